from functools import lru_cache
import logging

from fastapi import Depends, FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from enrollment.config import SERVICE_NAME, SERVICE_VERSION, setup_logging
from enrollment.processor import EnrollmentProcessor

setup_logging()
logger = logging.getLogger(__name__)

# ==================== CONFIGURATION ====================

app = FastAPI(
    title=SERVICE_NAME,
    description="Serverless enrollment processing: validation, protocol issuing and simulated back-office steps",
    version=SERVICE_VERSION
)

ENROLLMENT_ROUTE = "/api/ProcessarMatricula"
JSON_MEDIA_TYPE = "application/json; charset=utf-8"
METHOD_NOT_ALLOWED_MESSAGE = "Método não permitido. Use POST."

# Sent on every response, preflight and errors included
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Accept, Origin, X-Requested-With",
    "Access-Control-Max-Age": "3600",
}

@app.middleware("http")
async def add_cors_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response

@app.exception_handler(StarletteHTTPException)
async def method_not_allowed_handler(request: Request, exc: StarletteHTTPException):
    """Portuguese error body for 405, default handling for everything else"""
    if exc.status_code != 405:
        return await http_exception_handler(request, exc)

    logger.warning("Method not allowed: %s", request.method)
    return JSONResponse(
        {"erro": METHOD_NOT_ALLOWED_MESSAGE},
        status_code=405,
        headers=getattr(exc, "headers", None),
        media_type=JSON_MEDIA_TYPE,
    )

# ==================== DEPENDENCIES ====================

@lru_cache()
def get_processor() -> EnrollmentProcessor:
    """Shared processor, safe to reuse because it holds no request state"""
    return EnrollmentProcessor()

# ==================== API ENDPOINTS ====================

@app.get("/")
def root():
    """API health check"""
    return {
        "status": "healthy",
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION
    }

@app.api_route(ENROLLMENT_ROUTE, methods=["POST", "OPTIONS"])
async def process_enrollment(request: Request, processor: EnrollmentProcessor = Depends(get_processor)):
    """
    Process an enrollment request

    - OPTIONS answers the CORS preflight
    - POST validates the form, issues a protocol and runs the simulated steps
    """
    logger.info("Processing new request")

    if request.method == "OPTIONS":
        logger.info("Handling OPTIONS request (CORS preflight)")
        return Response(status_code=200)

    raw_body = await request.body()
    logger.info("Request body: %s", raw_body.decode("utf-8", errors="replace"))

    result, status_code = await processor.handle(raw_body)
    return JSONResponse(result.to_json(), status_code=status_code, media_type=JSON_MEDIA_TYPE)

# ==================== RUN SERVER ====================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)

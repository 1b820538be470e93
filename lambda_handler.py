# lambda_handler.py
# AWS Lambda handlers for the Enrollment Processing API

from mangum import Mangum
import os
import json
import logging

from enrollment.api import app as enrollment_app, CORS_HEADERS, JSON_MEDIA_TYPE
from enrollment.config import SERVICE_NAME, SERVICE_VERSION

logger = logging.getLogger(__name__)

# Wrap FastAPI app with Mangum for Lambda compatibility
enrollment_handler = Mangum(enrollment_app, lifespan="off")

# Lambda handlers
def enrollment(event, context):
    """
    Lambda handler for the enrollment function
    Handles POST/OPTIONS /api/ProcessarMatricula
    """
    try:
        return enrollment_handler(event, context)
    except Exception as e:
        logger.exception("Unhandled error in enrollment handler")
        return {
            "statusCode": 500,
            "body": json.dumps({
                "detail": str(e),
                "error_code": "INTERNAL_ERROR"
            }),
            "headers": {
                "Content-Type": JSON_MEDIA_TYPE,
                **CORS_HEADERS
            }
        }

# Health check handler
def health_check(event, context):
    """
    Simple health check endpoint
    """
    return {
        "statusCode": 200,
        "body": json.dumps({
            "status": "healthy",
            "service": SERVICE_NAME,
            "version": SERVICE_VERSION,
            "environment": os.getenv("AWS_LAMBDA_FUNCTION_NAME", "local")
        }),
        "headers": {
            "Content-Type": JSON_MEDIA_TYPE,
            **CORS_HEADERS
        }
    }

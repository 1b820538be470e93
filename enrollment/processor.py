"""
Enrollment request pipeline.

Parses and validates the inbound form, simulates document and payment checks,
issues a protocol number, runs the simulated persistence and notification
steps and assembles the response. Every failure is converted into an error
payload here; nothing escapes ``EnrollmentProcessor.handle``.
"""

import asyncio
import codecs
import logging
import random
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Tuple, Union

from pydantic import ValidationError as PydanticValidationError

from enrollment.config import PROCESSING_DELAY_MS
from enrollment.exceptions import EnrollmentError, ParseError, UnexpectedError, ValidationError
from enrollment.models import (
    PROTOCOL_PREFIX,
    EnrollmentRequest,
    EnrollmentResponse,
    ErrorPayload,
    NextStep,
    ProcessingStatus,
    get_course_value,
)
from enrollment.services import (
    NotifyApplicant,
    PersistEnrollment,
    SimulatedEnrollmentStore,
    SimulatedMailer,
)

logger = logging.getLogger(__name__)

DOCUMENTS_FAILURE_RATE = 0.10
PAYMENT_FAILURE_RATE = 0.05

EMPTY_BODY_MESSAGE = "Corpo da requisição está vazio"
UNDESERIALIZABLE_MESSAGE = "Não foi possível deserializar os dados da requisição"
MISSING_FIELDS_MESSAGE = "Campos obrigatórios não preenchidos: Nome, Email e Curso são obrigatórios"

CLIENT_ERROR_LABEL = "Erro ao processar matrícula"
CLIENT_ERROR_DETAILS = "Verifique se todos os campos obrigatórios foram preenchidos"
INTERNAL_ERROR_LABEL = "Erro interno ao processar matrícula"
INTERNAL_ERROR_MESSAGE = "Ocorreu um erro inesperado. Tente novamente mais tarde."

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def local_now() -> datetime:
    """Current wall-clock time, timezone-aware in the local zone"""
    return datetime.now(timezone.utc).astimezone()


def generate_protocol(now: datetime) -> str:
    """PUCPR- followed by the Unix epoch time of ``now`` in milliseconds"""
    return f"{PROTOCOL_PREFIX}{(now - _EPOCH) // timedelta(milliseconds=1)}"


def parse_request(raw_body: Union[bytes, str, None]) -> EnrollmentRequest:
    """Deserialize the request body into an EnrollmentRequest"""
    if isinstance(raw_body, bytes) and raw_body.startswith(codecs.BOM_UTF8):
        raw_body = raw_body[len(codecs.BOM_UTF8):]
    elif isinstance(raw_body, str) and raw_body.startswith("\ufeff"):
        raw_body = raw_body[1:]

    if not raw_body or not raw_body.strip():
        raise ParseError(EMPTY_BODY_MESSAGE)

    try:
        return EnrollmentRequest.model_validate_json(raw_body)
    except PydanticValidationError as exc:
        raise ParseError(UNDESERIALIZABLE_MESSAGE) from exc


def validate_request(request: EnrollmentRequest) -> None:
    """Ensure Nome, Email and Curso are all filled in"""
    missing = request.missing_fields()
    if missing:
        raise ValidationError(MISSING_FIELDS_MESSAGE, missing_fields=missing)


class EnrollmentProcessor:
    """
    Runs the enrollment pipeline for one request at a time.

    The processor keeps no per-request state, so one instance can serve
    concurrent requests. Randomness, the clock, the sleep function and the
    downstream capabilities are injected to make the pipeline testable.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = local_now,
        store: Optional[PersistEnrollment] = None,
        mailer: Optional[NotifyApplicant] = None,
        processing_delay: float = PROCESSING_DELAY_MS / 1000,
        sleep: Callable = asyncio.sleep,
    ):
        self.rng = rng if rng is not None else random.Random()
        self.clock = clock
        self.store = store if store is not None else SimulatedEnrollmentStore()
        self.mailer = mailer if mailer is not None else SimulatedMailer()
        self.processing_delay = processing_delay
        self.sleep = sleep

    async def handle(
        self, raw_body: Union[bytes, str, None]
    ) -> Tuple[Union[EnrollmentResponse, ErrorPayload], int]:
        """
        Process a raw request body.

        Returns the response model and the HTTP status code: 200 on success,
        400 for parse and validation errors, 500 for anything unexpected.
        """
        try:
            request = parse_request(raw_body)
            logger.info(
                "Data received: Nome=%s, Email=%s, Curso=%s",
                request.name, request.email, request.course_id,
            )
            validate_request(request)
            response = await self.process(request)
        except ValidationError as exc:
            logger.warning("Missing required fields: %s", ", ".join(exc.missing_fields))
            return self._error_payload(exc), exc.status_code
        except ParseError as exc:
            logger.warning("Error processing enrollment: %s", exc)
            return self._error_payload(exc), exc.status_code
        except Exception:
            logger.exception("Unexpected error processing enrollment")
            return self._error_payload(UnexpectedError(INTERNAL_ERROR_MESSAGE)), UnexpectedError.status_code

        logger.info("Enrollment processed successfully: Protocolo=%s", response.protocol)
        return response, 200

    async def process(self, request: EnrollmentRequest) -> EnrollmentResponse:
        """Simulated checks and downstream steps for a validated request"""
        if self.processing_delay > 0:
            await self.sleep(self.processing_delay)

        documents_valid = self.rng.random() > DOCUMENTS_FAILURE_RATE
        payment_valid = self.rng.random() > PAYMENT_FAILURE_RATE

        protocol = generate_protocol(self.clock())

        await self.store.save(request, protocol)
        await self.mailer.send_confirmation(request.email, protocol)

        if documents_valid and payment_valid:
            next_step = NextStep.CONTRACT_GENERATION
        else:
            next_step = NextStep.AWAITING_CORRECTIONS

        return EnrollmentResponse(
            protocol=protocol,
            status=ProcessingStatus.SUCCESS,
            documents_valid=documents_valid,
            payment_valid=payment_valid,
            next_step=next_step,
            processed_at=self.clock(),
            course_id=request.course_id,
            course_value=get_course_value(request.course_id),
        )

    def _error_payload(self, error: EnrollmentError) -> ErrorPayload:
        if isinstance(error, UnexpectedError):
            return ErrorPayload(
                erro=INTERNAL_ERROR_LABEL,
                mensagem=str(error),
                timestamp=self.clock(),
            )
        return ErrorPayload(
            erro=CLIENT_ERROR_LABEL,
            mensagem=str(error),
            timestamp=self.clock(),
            detalhes=CLIENT_ERROR_DETAILS,
        )

from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

# ==================== ENUMS & CONSTANTS ====================

class ProcessingStatus(str, Enum):
    SUCCESS = "Processado com Sucesso"

class NextStep(str, Enum):
    CONTRACT_GENERATION = "Geração de contrato"
    AWAITING_CORRECTIONS = "Aguardando correções"

PROTOCOL_PREFIX = "PUCPR-"
PROCESSING_TIME_LABEL = "1 segundo"

COURSE_PRICES = MappingProxyType({
    "1": "R$ 850,00",
    "2": "R$ 750,00",
    "3": "R$ 680,00",
})
DEFAULT_COURSE_VALUE = "R$ 0,00"

# Wire name of each required request field, in reporting order
REQUIRED_FIELDS = (
    ("name", "Nome"),
    ("email", "Email"),
    ("course_id", "Curso"),
)


def get_course_value(course_id: str) -> str:
    """Formatted price for a course, zero value when the course is unknown"""
    return COURSE_PRICES.get(course_id, DEFAULT_COURSE_VALUE)

# ==================== REQUEST/RESPONSE MODELS ====================

class EnrollmentRequest(BaseModel):
    """Inbound enrollment form. Missing or null fields stay blank."""

    name: Optional[str] = Field(default="", alias="Nome")
    email: Optional[str] = Field(default="", alias="Email")
    course_id: Optional[str] = Field(default="", alias="Curso")

    def missing_fields(self) -> List[str]:
        """Wire names of the required fields that are blank after trimming"""
        return [
            wire_name
            for attr, wire_name in REQUIRED_FIELDS
            if not (getattr(self, attr) or "").strip()
        ]

class EnrollmentResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    protocol: str = Field(..., alias="Protocolo")
    status: ProcessingStatus = Field(ProcessingStatus.SUCCESS, alias="Status")
    documents_valid: bool = Field(..., alias="DocumentosValidos")
    payment_valid: bool = Field(..., alias="PagamentoValido")
    next_step: NextStep = Field(..., alias="ProximaEtapa")
    processed_at: datetime = Field(..., alias="DataProcessamento")
    course_id: str = Field(..., alias="Curso")
    course_value: str = Field(..., alias="ValorCurso")
    processing_time: str = Field(PROCESSING_TIME_LABEL, alias="TempoProcessamento")

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)

class ErrorPayload(BaseModel):
    erro: str
    mensagem: str
    timestamp: datetime
    detalhes: Optional[str] = None

    def to_json(self) -> dict:
        return self.model_dump(mode="json", exclude_none=True)

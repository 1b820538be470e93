"""
Downstream capabilities used by the enrollment pipeline.

Persistence and email delivery are simulated: each step logs, waits for a
configured delay and always succeeds.
"""

import asyncio
import logging
from typing import Protocol

from enrollment.config import DB_DELAY_MS, EMAIL_DELAY_MS
from enrollment.models import EnrollmentRequest

logger = logging.getLogger(__name__)


class PersistEnrollment(Protocol):
    async def save(self, request: EnrollmentRequest, protocol: str) -> None:
        ...


class NotifyApplicant(Protocol):
    async def send_confirmation(self, email: str, protocol: str) -> None:
        ...


class SimulatedEnrollmentStore:
    """Stands in for the enrollment database insert"""

    def __init__(self, delay_seconds: float = DB_DELAY_MS / 1000):
        self.delay_seconds = delay_seconds

    async def save(self, request: EnrollmentRequest, protocol: str) -> None:
        logger.info("Simulating database insert for protocol: %s", protocol)
        await asyncio.sleep(self.delay_seconds)
        logger.info("Enrollment stored for protocol: %s", protocol)


class SimulatedMailer:
    """Stands in for the confirmation email dispatch"""

    def __init__(self, delay_seconds: float = EMAIL_DELAY_MS / 1000):
        self.delay_seconds = delay_seconds

    async def send_confirmation(self, email: str, protocol: str) -> None:
        logger.info("Simulating confirmation email to: %s", email)
        await asyncio.sleep(self.delay_seconds)
        logger.info("Confirmation email sent for protocol: %s", protocol)

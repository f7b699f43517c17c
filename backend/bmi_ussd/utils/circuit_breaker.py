# /bmi_ussd/utils/circuit_breaker.py

import asyncio
import time
import logging
from contextlib import asynccontextmanager
from enum import Enum
from typing import AsyncIterator

from bmi_ussd.utils.exceptions import StoreError

logger = logging.getLogger(__name__)

class CircuitState(Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"

class CircuitBreaker:
    """
    Guards calls to a shared backend. After ``failure_threshold`` consecutive
    failures the circuit opens and calls fail fast with StoreError for
    ``timeout`` seconds; then a few trial calls decide whether it closes again.
    """

    def __init__(self, name: str, failure_threshold: int = 5, timeout: float = 30, success_threshold: int = 2):
        self.name = name
        self.failure_threshold = failure_threshold
        self.timeout = timeout
        self.success_threshold = success_threshold
        self.failures = 0
        self.trial_successes = 0
        self.opened_at: float | None = None
        self.state = CircuitState.CLOSED
        self._lock = asyncio.Lock()

    @property
    def is_open(self) -> bool:
        return self.state == CircuitState.OPEN

    async def _before_call(self, operation: str):
        async with self._lock:
            if self.state != CircuitState.OPEN:
                return
            if self.opened_at is not None and time.monotonic() - self.opened_at >= self.timeout:
                self.state = CircuitState.HALF_OPEN
                self.trial_successes = 0
                logger.info(f"Circuit '{self.name}' half-open, letting {operation} through")
                return
        logger.warning(f"Circuit '{self.name}' is open, {operation} blocked")
        raise StoreError(f"{self.name} is unavailable (circuit open)", code="CIRCUIT_OPEN")

    async def _record(self, succeeded: bool):
        async with self._lock:
            if succeeded:
                if self.state == CircuitState.HALF_OPEN:
                    self.trial_successes += 1
                    if self.trial_successes < self.success_threshold:
                        return
                    logger.info(f"Circuit '{self.name}' closed again")
                self.state = CircuitState.CLOSED
                self.failures = 0
                return

            self.failures += 1
            if self.state == CircuitState.HALF_OPEN or self.failures >= self.failure_threshold:
                self.state = CircuitState.OPEN
                self.opened_at = time.monotonic()
                logger.error(f"Circuit '{self.name}' opened after {self.failures} failures")

    @asynccontextmanager
    async def guard(self, operation: str) -> AsyncIterator[None]:
        """Wraps one backend call; any exception inside counts as a failure."""
        await self._before_call(operation)
        try:
            yield
        except Exception:
            await self._record(False)
            raise
        await self._record(True)

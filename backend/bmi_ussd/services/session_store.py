# /bmi_ussd/services/session_store.py

import asyncio
import logging
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from datetime import datetime, timedelta
from typing import AsyncIterator, Callable, Dict, Optional

import pydantic
import redis.asyncio as redis
from redis.exceptions import LockError, RedisError

from bmi_ussd.config.settings import Settings
from bmi_ussd.models.session import UssdSession, utcnow
from bmi_ussd.utils.circuit_breaker import CircuitBreaker
from bmi_ussd.utils.exceptions import StoreError
from bmi_ussd.utils.keyed_lock import KeyedLock
from bmi_ussd.utils.metrics import active_sessions_gauge, store_operations_counter

# Session persistence behind one interface, so the navigator works the same
# against process memory (single worker, tests) and Redis (shared, TTL based).
# Every write replaces the whole session.

logger = logging.getLogger(__name__)

SESSION_KEY_PREFIX = "ussd:session:"
LOCK_KEY_PREFIX = "ussd:lock:"


class SessionStore(ABC):
    @abstractmethod
    async def get(self, session_id: str) -> Optional[UssdSession]:
        """Returns the session, or None when it is absent or expired."""

    @abstractmethod
    async def put(self, session: UssdSession) -> None:
        """Replaces the stored session as a whole."""

    @abstractmethod
    async def delete(self, session_id: str) -> None:
        ...

    @abstractmethod
    async def sweep(self) -> int:
        """Removes expired sessions and returns how many were removed."""

    @abstractmethod
    def lock(self, session_id: str, timeout: float):
        """Async context manager serializing work on one session id."""

    async def ping(self) -> bool:
        return True


class InMemorySessionStore(SessionStore):
    """
    Process-local store. Sessions are kept serialized so callers never share
    a mutable object with the store; idle sessions are treated as absent on
    access and removed by ``sweep``.
    """

    def __init__(self, idle_timeout_seconds: int, clock: Callable[[], datetime] = utcnow):
        self.idle_timeout = timedelta(seconds=idle_timeout_seconds)
        self.clock = clock
        self._sessions: Dict[str, str] = {}
        self._last_activity: Dict[str, datetime] = {}
        self._locks = KeyedLock()

    @property
    def size(self) -> int:
        return len(self._sessions)

    def _is_expired(self, session_id: str, now: datetime) -> bool:
        return now - self._last_activity[session_id] > self.idle_timeout

    def _drop(self, session_id: str):
        self._sessions.pop(session_id, None)
        self._last_activity.pop(session_id, None)
        active_sessions_gauge.set(len(self._sessions))

    async def get(self, session_id: str) -> Optional[UssdSession]:
        raw = self._sessions.get(session_id)
        if raw is None:
            store_operations_counter.labels(operation="get", status="miss").inc()
            return None
        if self._is_expired(session_id, self.clock()):
            logger.info(f"Session {session_id} expired on access")
            self._drop(session_id)
            store_operations_counter.labels(operation="get", status="expired").inc()
            return None
        store_operations_counter.labels(operation="get", status="hit").inc()
        return UssdSession.model_validate_json(raw)

    async def put(self, session: UssdSession) -> None:
        self._sessions[session.session_id] = session.model_dump_json()
        self._last_activity[session.session_id] = session.last_activity
        active_sessions_gauge.set(len(self._sessions))
        store_operations_counter.labels(operation="put", status="success").inc()

    async def delete(self, session_id: str) -> None:
        self._drop(session_id)
        store_operations_counter.labels(operation="delete", status="success").inc()

    async def sweep(self) -> int:
        now = self.clock()
        expired = [sid for sid in self._sessions if self._is_expired(sid, now)]
        for sid in expired:
            self._drop(sid)
        return len(expired)

    @asynccontextmanager
    async def lock(self, session_id: str, timeout: float) -> AsyncIterator[None]:
        acquired = False
        try:
            async with self._locks.acquire(session_id, timeout=timeout):
                acquired = True
                yield
        except asyncio.TimeoutError as e:
            if acquired:
                raise
            raise StoreError(f"Timed out waiting for the lock on session {session_id}", code="LOCK_TIMEOUT") from e


class RedisSessionStore(SessionStore):
    """
    Redis-backed store. Each session is a JSON string written with SETEX, so
    Redis itself expires sessions after the idle window and ``sweep`` has
    nothing to do. Locks are Redis locks, which keeps one request in flight
    per session across all workers.
    """

    def __init__(self, redis_client, idle_timeout_seconds: int, lock_ttl_seconds: int = 30):
        self.redis = redis_client
        self.idle_timeout_seconds = idle_timeout_seconds
        self.lock_ttl_seconds = lock_ttl_seconds
        self.circuit_breaker = CircuitBreaker("session_store")

    async def _call(self, operation: str, func: Callable, *args):
        try:
            async with self.circuit_breaker.guard(operation):
                result = await func(*args)
        except StoreError:
            store_operations_counter.labels(operation=operation, status="blocked").inc()
            raise
        except (RedisError, OSError) as e:
            store_operations_counter.labels(operation=operation, status="error").inc()
            logger.warning(f"Session store {operation} failed: {e}")
            raise StoreError(f"Session store {operation} failed: {e}", code="STORE_UNAVAILABLE") from e
        store_operations_counter.labels(operation=operation, status="success").inc()
        return result

    async def get(self, session_id: str) -> Optional[UssdSession]:
        raw = await self._call("get", self.redis.get, f"{SESSION_KEY_PREFIX}{session_id}")
        if not raw:
            return None
        try:
            return UssdSession.model_validate_json(raw)
        except pydantic.ValidationError as e:
            logger.warning(f"Discarding unreadable session {session_id}: {e}")
            return None

    async def put(self, session: UssdSession) -> None:
        await self._call(
            "put",
            self.redis.setex,
            f"{SESSION_KEY_PREFIX}{session.session_id}",
            self.idle_timeout_seconds,
            session.model_dump_json()
        )

    async def delete(self, session_id: str) -> None:
        await self._call("delete", self.redis.delete, f"{SESSION_KEY_PREFIX}{session_id}")

    async def sweep(self) -> int:
        # Keys expire through their TTL.
        return 0

    @asynccontextmanager
    async def lock(self, session_id: str, timeout: float) -> AsyncIterator[None]:
        redis_lock = self.redis.lock(
            f"{LOCK_KEY_PREFIX}{session_id}",
            timeout=self.lock_ttl_seconds,
            blocking_timeout=timeout
        )
        try:
            acquired = await redis_lock.acquire()
        except RedisError as e:
            raise StoreError(f"Could not lock session {session_id}: {e}", code="STORE_UNAVAILABLE") from e
        if not acquired:
            raise StoreError(f"Timed out waiting for the lock on session {session_id}", code="LOCK_TIMEOUT")
        try:
            yield
        finally:
            try:
                await redis_lock.release()
            except (LockError, RedisError) as e:
                logger.warning(f"Failed to release lock for session {session_id}: {e}")

    async def ping(self) -> bool:
        return bool(await self._call("ping", self.redis.ping))


def create_session_store(settings: Settings, clock: Callable[[], datetime] = utcnow) -> SessionStore:
    """Builds the store selected by SESSION_BACKEND."""
    if settings.session_backend == "redis":
        pool = redis.ConnectionPool.from_url(
            settings.redis_url,
            max_connections=20,
            socket_timeout=settings.store_timeout_seconds
        )
        logger.info("Using Redis session store.")
        return RedisSessionStore(redis.Redis(connection_pool=pool), settings.session_idle_timeout_seconds)
    logger.info("Using in-memory session store.")
    return InMemorySessionStore(settings.session_idle_timeout_seconds, clock=clock)

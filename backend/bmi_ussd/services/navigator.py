# /bmi_ussd/services/navigator.py

import asyncio
from datetime import datetime
from typing import Awaitable, Callable, List, Optional

import structlog

from bmi_ussd.config.settings import Settings, settings as default_settings
from bmi_ussd.models.api import NavigatorReply
from bmi_ussd.models.session import BmiResult, MenuState, UssdSession, utcnow
from bmi_ussd.services.result_log import ResultLog
from bmi_ussd.services.session_store import SessionStore
from bmi_ussd.services.string_service import StringService, string_service
from bmi_ussd.utils.exceptions import NavigationError, StoreError, UssdError, ValidationError
from bmi_ussd.utils.metrics import bmi_results_counter, transition_counter, ussd_requests_counter
from bmi_ussd.workflows import engine

# The navigator owns one keystroke from arrival to reply: it serializes work
# per session, loads the stored session, runs the pure engine, renders the
# next prompt and writes the whole session back in a single put.

log = structlog.get_logger(__name__)


class SessionNavigator:
    def __init__(
        self,
        store: SessionStore,
        result_log: Optional[ResultLog] = None,
        strings: Optional[StringService] = None,
        settings: Settings = default_settings,
        clock: Callable[[], datetime] = utcnow
    ):
        self.store = store
        self.result_log = result_log
        self.strings = strings or string_service
        self.settings = settings
        self.clock = clock

    async def handle(
        self,
        session_id: str,
        caller_id: str,
        token: str,
        dialog_start: Optional[bool] = None
    ) -> NavigatorReply:
        """
        Handles the newest keystroke of a dialog.

        Args:
            session_id: Gateway session identifier
            caller_id: Caller phone number
            token: Newest token only
            dialog_start: True when the gateway opens the dialog; when omitted,
                an empty token is taken as the start

        Returns:
            NavigatorReply telling the gateway whether the dialog continues
        """
        token = (token or "").strip()
        if dialog_start is None:
            dialog_start = not token
        try:
            async with self.store.lock(session_id, self.settings.lock_timeout_seconds):
                return await self._handle_locked(session_id, caller_id, token, dialog_start)
        except StoreError as e:
            # Nothing was written; the stored session stays as it was.
            log.error("Session store unavailable.", session_id=session_id, error=str(e))
            ussd_requests_counter.labels(outcome="store_error").inc()
            return self._end(e.message_key, self.settings.default_language)

    async def _handle_locked(self, session_id: str, caller_id: str, token: str, dialog_start: bool) -> NavigatorReply:
        now = self.clock()

        if token and token == self.settings.exit_token:
            session = await self._store_call("get", self.store.get(session_id))
            await self._store_call("delete", self.store.delete(session_id))
            language = session.language if session else self.settings.default_language
            log.info("Session ended by caller.", session_id=session_id)
            ussd_requests_counter.labels(outcome="goodbye").inc()
            return self._end("GOODBYE", language)

        session = await self._store_call("get", self.store.get(session_id))

        if dialog_start or session is None:
            if not dialog_start:
                log.info("No live session for token, starting over.", session_id=session_id, token=token)
            fresh = engine.new_session(session_id, caller_id, self.settings.default_language, now)
            message = self.strings.render(fresh)
            await self._store_call("put", self.store.put(fresh))
            log.info("Session started.", session_id=session_id, caller_id=caller_id)
            ussd_requests_counter.labels(outcome="start").inc()
            return NavigatorReply(continue_session=True, message=message)

        try:
            return await self._advance(session, token, now)
        except ValidationError as e:
            log.info("Invalid input, ending session.", session_id=session_id, state=session.state.value, reason=e.message)
            await self._terminate(session_id)
            ussd_requests_counter.labels(outcome="invalid").inc()
            return self._end(e.message_key, session.language)
        except StoreError:
            raise
        except Exception:
            log.exception("Unexpected error while handling keystroke.", session_id=session_id, state=session.state.value)
            await self._terminate(session_id)
            ussd_requests_counter.labels(outcome="error").inc()
            return self._end(UssdError.message_key, session.language)

    async def _advance(self, session: UssdSession, token: str, now: datetime) -> NavigatorReply:
        try:
            updated = engine.apply_token(
                session,
                token,
                languages=self.settings.languages,
                collect_age=self.settings.collect_age,
                back_token=self.settings.back_token
            )
        except NavigationError:
            log.info("Back requested with empty stack, resetting.", session_id=session.session_id)
            updated = engine.reset_to_welcome(session)

        updated = updated.model_copy(update={"last_activity": now})

        history: List[BmiResult] = []
        if updated.state == MenuState.HISTORY:
            history = await self._recent_results(updated.caller_id)

        message = self.strings.render(updated, history)
        await self._store_call("put", self.store.put(updated))

        if session.state == MenuState.HEIGHT and updated.state == MenuState.RESULT:
            await self._record_result(updated, now)

        transition_counter.labels(from_state=session.state.value, to_state=updated.state.value).inc()
        log.info(
            "Transition applied.",
            session_id=session.session_id,
            from_state=session.state.value,
            to_state=updated.state.value,
            navigation_stack=[s.value for s in updated.navigation_stack]
        )
        ussd_requests_counter.labels(outcome="continue").inc()
        return NavigatorReply(continue_session=True, message=message)

    async def _store_call(self, operation: str, call: Awaitable):
        try:
            return await asyncio.wait_for(call, timeout=self.settings.store_timeout_seconds)
        except asyncio.TimeoutError as e:
            raise StoreError(f"Session store {operation} timed out", code="STORE_TIMEOUT") from e

    async def _terminate(self, session_id: str):
        try:
            await self._store_call("delete", self.store.delete(session_id))
        except StoreError as e:
            log.warning("Could not delete terminated session.", session_id=session_id, error=str(e))

    async def _record_result(self, session: UssdSession, now: datetime):
        bmi_results_counter.labels(category=session.category.value).inc()
        if self.result_log is None:
            return
        result = BmiResult(
            caller_id=session.caller_id,
            session_id=session.session_id,
            age=session.age,
            weight=session.weight,
            height=session.height,
            bmi=session.bmi,
            category=session.category,
            created_at=now
        )
        try:
            await asyncio.wait_for(
                self.result_log.append(session.caller_id, result),
                timeout=self.settings.store_timeout_seconds
            )
        except Exception as e:
            log.warning("Failed to record BMI result.", session_id=session.session_id, error=str(e))

    async def _recent_results(self, caller_id: str) -> List[BmiResult]:
        if self.result_log is None:
            return []
        try:
            return await asyncio.wait_for(
                self.result_log.list_recent(caller_id, self.settings.history_limit),
                timeout=self.settings.store_timeout_seconds
            )
        except Exception as e:
            log.warning("Failed to load BMI history.", caller_id=caller_id, error=str(e))
            return []

    def _end(self, key: str, language: str) -> NavigatorReply:
        return NavigatorReply(continue_session=False, message=self.strings.get_string(key, language))

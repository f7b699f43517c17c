# /bmi_ussd/workflows/engine.py

"""
Pure USSD menu engine.

Given a session and the newest token, this module computes the next session:
- Validates the token against the current screen (validator functions)
- Fills collected fields and computes the BMI once height is known
- Pushes the screen being left on forward moves
- Pops the navigation stack on back and clears the fields invalidated by
  the screen being left

All functions are:
- Pure (the input session is never mutated; a copy is returned)
- Deterministic apart from the explicit ``now`` argument
- No store access
- No logging
"""

from datetime import datetime
from typing import Dict, Iterable

from bmi_ussd.models.session import MenuState, UssdSession
from bmi_ussd.services import bmi_service
from bmi_ussd.utils.exceptions import NavigationError, ValidationError
from bmi_ussd.workflows.definitions import COLLECTED_FIELDS, MENU
from bmi_ussd.workflows.validator import (
    validate_language_option,
    validate_menu_choice,
    validate_numeric_entry
)


def first_collection_state(collect_age: bool) -> MenuState:
    """The screen reached after the language menu."""
    return MenuState.AGE if collect_age else MenuState.WEIGHT


def _cleared(fields: Iterable[str]) -> Dict[str, None]:
    return {name: None for name in fields}


def new_session(session_id: str, caller_id: str, language: str, now: datetime) -> UssdSession:
    """A fresh dialog on the language menu with an empty navigation stack."""
    return UssdSession(
        session_id=session_id,
        caller_id=caller_id,
        state=MenuState.WELCOME,
        language=language,
        navigation_stack=[],
        created_at=now,
        last_activity=now
    )


def advance(session: UssdSession, next_state: MenuState, **updates) -> UssdSession:
    """Move forward, pushing the screen being left."""
    stack = list(session.navigation_stack)
    if session.state != next_state:
        stack.append(session.state)
    return session.model_copy(update={**updates, "state": next_state, "navigation_stack": stack}, deep=True)


def go_back(session: UssdSession) -> UssdSession:
    """
    Pop the previous screen and clear what the screen being left had invalidated.

    Raises:
        NavigationError: when the navigation stack is empty
    """
    if not session.navigation_stack:
        raise NavigationError(f"Nothing to go back to from '{session.state.value}'")

    stack = list(session.navigation_stack)
    previous_state = stack.pop()
    updates = _cleared(MENU[session.state]["clears"])
    return session.model_copy(update={**updates, "state": previous_state, "navigation_stack": stack}, deep=True)


def reset_to_welcome(session: UssdSession) -> UssdSession:
    """Back to the language menu with nothing collected; the language is kept."""
    updates = _cleared(COLLECTED_FIELDS)
    return session.model_copy(update={**updates, "state": MenuState.WELCOME, "navigation_stack": []}, deep=True)


def restart_calculation(session: UssdSession, collect_age: bool) -> UssdSession:
    """Start a new calculation from the result screen, keeping the language."""
    updates = _cleared(COLLECTED_FIELDS)
    return session.model_copy(
        update={
            **updates,
            "state": first_collection_state(collect_age),
            "navigation_stack": [MenuState.WELCOME]
        },
        deep=True
    )


def apply_token(
    session: UssdSession,
    token: str,
    *,
    languages: Dict[str, str],
    collect_age: bool,
    back_token: str
) -> UssdSession:
    """
    Apply one token to the session and return the resulting session.

    Args:
        session: Current session (not modified)
        token: Newest keystroke, already stripped of gateway history
        languages: Configured language options
        collect_age: Whether the age screen is part of the dialog
        back_token: Token that navigates back

    Raises:
        ValidationError: when the token is not accepted on the current screen
        NavigationError: when back is requested with an empty navigation stack
    """
    if token == back_token:
        if session.state == MenuState.RESULT:
            return restart_calculation(session, collect_age)
        return go_back(session)

    screen = MENU[session.state]
    kind = screen["input"]

    if kind == "language":
        result = validate_language_option(token, languages)
        if not result["is_valid"]:
            raise ValidationError(result["message"], code=result["error_code"])
        return advance(session, first_collection_state(collect_age), language=result["value"])

    if kind in ("integer", "number"):
        result = validate_numeric_entry(token, kind, screen["bounds"])
        if not result["is_valid"]:
            raise ValidationError(result["message"], code=result["error_code"])

        updates = {screen["field"]: result["value"]}
        if screen["field"] == "height":
            bmi, category = bmi_service.compute(session.weight, result["value"])
            updates.update(bmi=bmi, category=category)
        return advance(session, screen["next_state"], **updates)

    result = validate_menu_choice(token, screen["options"])
    if not result["is_valid"]:
        raise ValidationError(result["message"], code=result["error_code"], choice=True)
    return advance(session, result["value"])

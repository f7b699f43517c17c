# /bmi_ussd/workflows/definitions.py

"""
USSD menu definition as pure data (no logic).

Each screen specifies:
- prompt: template key rendered while the caller is on this screen
- input: how the newest token is read ("language", "integer", "number", "choice")
- field: session field filled by a valid entry (data-entry screens only)
- bounds: (minimum, maximum, minimum_inclusive) accepted for numeric entries
- next_state: screen reached after a valid entry
- options: token -> screen for menu screens
- clears: session fields invalidated when the caller navigates back off this screen
"""

from typing import Any, Dict, List

from bmi_ussd.models.session import MenuState

# Type definition for a screen
ScreenDefinition = Dict[str, Any]

# Fields collected during one calculation, in dialog order.
COLLECTED_FIELDS: List[str] = ["age", "weight", "height", "bmi", "category"]

MENU: Dict[MenuState, ScreenDefinition] = {
    MenuState.WELCOME: {
        "prompt": "WELCOME",
        "input": "language",
        "next_state": MenuState.AGE,
        "clears": ["age", "weight", "height", "bmi", "category"],
    },
    MenuState.AGE: {
        "prompt": "ENTER_AGE",
        "input": "integer",
        "field": "age",
        "bounds": (1, 120, True),
        "next_state": MenuState.WEIGHT,
        "clears": ["age", "weight", "height", "bmi", "category"],
    },
    MenuState.WEIGHT: {
        "prompt": "ENTER_WEIGHT",
        "input": "number",
        "field": "weight",
        "bounds": (0, 1000, False),
        "next_state": MenuState.HEIGHT,
        "clears": ["weight", "height", "bmi", "category"],
    },
    MenuState.HEIGHT: {
        "prompt": "ENTER_HEIGHT",
        "input": "number",
        "field": "height",
        "bounds": (0, 300, False),
        "next_state": MenuState.RESULT,
        "clears": ["height", "bmi", "category"],
    },
    MenuState.RESULT: {
        "prompt": "BMI_RESULT",
        "input": "choice",
        "options": {"1": MenuState.TIPS, "2": MenuState.HISTORY},
        "clears": [],
    },
    MenuState.TIPS: {
        "prompt": "HEALTH_TIPS",
        "input": "choice",
        "options": {},
        "clears": [],
    },
    MenuState.HISTORY: {
        "prompt": "HISTORY",
        "input": "choice",
        "options": {},
        "clears": [],
    },
}

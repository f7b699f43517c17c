# backend/tests/unit/test_validator.py
import pytest

from bmi_ussd.models.session import MenuState
from bmi_ussd.workflows.definitions import MENU
from bmi_ussd.workflows.validator import (
    validate_language_option,
    validate_menu_choice,
    validate_numeric_entry
)

LANGUAGES = {"1": "rw", "2": "en"}
AGE_BOUNDS = MENU[MenuState.AGE]["bounds"]
WEIGHT_BOUNDS = MENU[MenuState.WEIGHT]["bounds"]
HEIGHT_BOUNDS = MENU[MenuState.HEIGHT]["bounds"]


def test_language_option_maps_to_code():
    result = validate_language_option("2", LANGUAGES)
    assert result["is_valid"]
    assert result["value"] == "en"


@pytest.mark.parametrize("token", ["", "3", "en", " 1"])
def test_unknown_language_options(token):
    result = validate_language_option(token, LANGUAGES)
    assert not result["is_valid"]
    assert result["value"] is None


@pytest.mark.parametrize("token, expected", [("1", 1), ("25", 25), ("120", 120)])
def test_age_accepts_whole_years(token, expected):
    result = validate_numeric_entry(token, "integer", AGE_BOUNDS)
    assert result["is_valid"]
    assert result["value"] == expected


@pytest.mark.parametrize("token", ["121", "-3", "25.5", "abc", "", "0"])
def test_age_rejects(token):
    assert not validate_numeric_entry(token, "integer", AGE_BOUNDS)["is_valid"]


def test_weight_accepts_decimals():
    result = validate_numeric_entry("70.5", "number", WEIGHT_BOUNDS)
    assert result["is_valid"]
    assert result["value"] == 70.5


@pytest.mark.parametrize("token", ["0.0", "000", "-1", "1001", "nan", "inf", "seventy", "7_0", "1e2", "+5"])
def test_weight_rejects(token):
    result = validate_numeric_entry(token, "number", WEIGHT_BOUNDS)
    assert not result["is_valid"]
    assert result["error_code"] in ("NOT_A_NUMBER", "OUT_OF_RANGE")


def test_height_upper_bound_is_inclusive():
    assert validate_numeric_entry("300", "number", HEIGHT_BOUNDS)["is_valid"]
    assert not validate_numeric_entry("300.1", "number", HEIGHT_BOUNDS)["is_valid"]


def test_out_of_range_error_code():
    result = validate_numeric_entry("500", "number", HEIGHT_BOUNDS)
    assert result["error_code"] == "OUT_OF_RANGE"


def test_menu_choice_returns_destination():
    options = MENU[MenuState.RESULT]["options"]
    assert validate_menu_choice("1", options)["value"] == MenuState.TIPS
    assert validate_menu_choice("2", options)["value"] == MenuState.HISTORY
    assert validate_menu_choice("3", options)["error_code"] == "UNKNOWN_CHOICE"


def test_screens_without_options_accept_nothing():
    assert not validate_menu_choice("1", MENU[MenuState.TIPS]["options"])["is_valid"]


@pytest.mark.parametrize("token", ["7_0", "1e2", "+70", "٧٠", "70.", ".5", "70.125"])
def test_weight_accepts_only_keypad_numbers(token):
    result = validate_numeric_entry(token, "number", WEIGHT_BOUNDS)
    assert not result["is_valid"]
    assert result["error_code"] == "NOT_A_NUMBER"


@pytest.mark.parametrize("token", ["2_5", "+25", "٢٥"])
def test_age_accepts_only_keypad_digits(token):
    assert validate_numeric_entry(token, "integer", AGE_BOUNDS)["error_code"] == "NOT_A_NUMBER"


def test_empty_entry_is_rejected():
    assert validate_numeric_entry("", "number", WEIGHT_BOUNDS)["error_code"] == "EMPTY_TOKEN"
    assert validate_language_option("", LANGUAGES)["error_code"] == "EMPTY_TOKEN"

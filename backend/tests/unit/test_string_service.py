# backend/tests/unit/test_string_service.py
import json
from datetime import datetime, timezone

from bmi_ussd.models.session import BmiCategory, BmiResult, MenuState, UssdSession
from bmi_ussd.services.string_service import StringService


def make_session(**overrides) -> UssdSession:
    data = {"session_id": "s1", "caller_id": "+250788000000"}
    data.update(overrides)
    return UssdSession(**data)


def test_welcome_lists_configured_languages(strings):
    assert strings.render(make_session()) == (
        "Welcome to the BMI Calculator\nPlease select a language:\n1. Kinyarwanda\n2. English"
    )


def test_result_screen_shows_bmi_and_category(strings):
    session = make_session(state=MenuState.RESULT, bmi=24.2, category=BmiCategory.NORMAL)
    message = strings.render(session)
    assert message.startswith("Your BMI is 24.2\nCategory: Normal\n1. Health tips")
    assert "0. New calculation" in message


def test_whole_number_bmi_keeps_one_decimal(strings):
    session = make_session(state=MenuState.RESULT, bmi=30.0, category=BmiCategory.OBESE)
    assert "Your BMI is 30.0" in strings.render(session)


def test_tips_follow_the_category(strings):
    session = make_session(state=MenuState.TIPS, bmi=24.2, category=BmiCategory.NORMAL)
    assert "Maintain a balanced diet, exercise regularly, stay hydrated." in strings.render(session)


def test_kinyarwanda_prompt(strings):
    assert strings.render(make_session(state=MenuState.AGE, language="rw")).startswith("Injiza imyaka yawe")


def test_history_without_records(strings):
    message = strings.render(make_session(state=MenuState.HISTORY))
    assert "History of your last 3 BMI calculations:" in message
    assert "No history found." in message


def test_history_lines_are_limited(strings):
    history = [
        BmiResult(
            caller_id="+250788000000",
            session_id=f"s{i}",
            weight=70,
            height=170,
            bmi=24.2,
            category=BmiCategory.NORMAL,
            created_at=datetime(2026, 10, i, tzinfo=timezone.utc)
        )
        for i in range(1, 6)
    ]
    message = strings.render(make_session(state=MenuState.HISTORY), history)
    assert "1. 2026-10-01: BMI 24.2 (Normal)" in message
    assert "3. 2026-10-03" in message
    assert "4. 2026-10-04" not in message


def test_missing_language_falls_back_to_default(strings):
    assert strings.get_string("GOODBYE", "fr") == "Thank you for using the BMI Calculator. Goodbye!"


def test_render_does_not_modify_session(strings):
    session = make_session(state=MenuState.RESULT, bmi=18.4, category=BmiCategory.UNDERWEIGHT)
    before = session.model_dump()
    strings.render(session)
    assert session.model_dump() == before


def test_overrides_are_merged_over_defaults(tmp_path):
    override = tmp_path / "strings.json"
    override.write_text(json.dumps({"templates": {"GOODBYE": {"en": "Bye!"}}}), encoding="utf-8")

    service = StringService({"1": "rw", "2": "en"}, "en")
    service.load_strings(str(override))

    assert service.get_string("GOODBYE", "en") == "Bye!"
    assert service.get_string("GOODBYE", "rw") == "Murakoze gukoresha BMI Calculator. Turabonana!"
    assert service.get_string("INVALID", "en") == "Invalid input. Please try again."


def test_unreadable_overrides_keep_defaults(tmp_path):
    override = tmp_path / "strings.json"
    override.write_text("{not json", encoding="utf-8")

    service = StringService({"2": "en"}, "en")
    service.load_strings(str(override))

    assert service.get_string("GOODBYE", "en") == "Thank you for using the BMI Calculator. Goodbye!"
    assert service.language_options() == "2. English"

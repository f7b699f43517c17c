# backend/tests/integration/test_dialogs.py
from bmi_ussd.config.settings import settings

PHONE = "+250788000000"


def run_dialog(client, *texts, session_id="ATUid_dialog", phone=PHONE):
    """Posts each cumulative text in turn and returns the last reply body."""
    body = None
    for text in texts:
        body = client.post("/ussd", data={
            "sessionId": session_id,
            "serviceCode": "*384*123#",
            "phoneNumber": phone,
            "text": text,
        }).text
    return body


def test_kinyarwanda_calculation(test_client):
    body = run_dialog(test_client, "", "1", "1*30", "1*30*70", "1*30*70*170")
    assert body.startswith("CON BMI yawe ni 24.2\nIcyiciro : Bisanzwe")


def test_back_then_correct_entry(test_client):
    body = run_dialog(test_client, "", "2", "2*25", "2*25*700", "2*25*700*0", "2*25*700*0*70", "2*25*700*0*70*170")
    assert body.startswith("CON Your BMI is 24.2")


def test_history_across_sessions(test_client):
    run_dialog(test_client, "", "2", "2*25", "2*25*70", "2*25*70*170", "2*25*70*170*00", session_id="first")
    body = run_dialog(test_client, "", "2", "2*25", "2*25*120", "2*25*120*200", "2*25*120*200*2", session_id="second")

    assert body.startswith("CON History of your last 3 BMI calculations:")
    assert "1. " in body and "BMI 30.0 (Obese)" in body
    assert "2. " in body and "BMI 24.2 (Normal)" in body


def test_history_is_per_caller(test_client):
    run_dialog(test_client, "", "2", "2*25", "2*25*70", "2*25*70*170", session_id="first")
    body = run_dialog(
        test_client, "", "2", "2*25", "2*25*70", "2*25*70*170", "2*25*70*170*2",
        session_id="other", phone="+250788999999"
    )
    assert body.count("BMI 24.2") == 1


def test_new_calculation_keeps_language(test_client):
    body = run_dialog(test_client, "", "1", "1*30", "1*30*70", "1*30*70*170", "1*30*70*170*0")
    assert body.startswith("CON Injiza imyaka yawe")


def test_tips_then_exit(test_client):
    body = run_dialog(test_client, "", "2", "2*25", "2*25*100", "2*25*100*200", "2*25*100*200*1")
    assert body.startswith("CON Tips: Reduce calorie intake")

    body = run_dialog(test_client, "2*25*100*200*1*00")
    assert body.startswith("END Thank you")


def test_delta_input_convention(test_client, mocker):
    mocker.patch.object(settings, "ussd_input_convention", "delta")
    body = run_dialog(test_client, "", "2", "25", "70", "170")
    assert body.startswith("CON Your BMI is 24.2")

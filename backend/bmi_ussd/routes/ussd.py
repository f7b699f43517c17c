# /bmi_ussd/routes/ussd.py

import uuid
import structlog
from fastapi import APIRouter, Depends, Form
from fastapi.responses import PlainTextResponse

from bmi_ussd.config import strings
from bmi_ussd.config.settings import settings
from bmi_ussd.services.navigator import SessionNavigator
from bmi_ussd.utils.dependencies import get_navigator
from bmi_ussd.utils.metrics import response_time_histogram, ussd_requests_counter
from bmi_ussd.utils.ussd_protocol import END_MARKER, latest_token, to_wire

# The USSD gateway callback. The gateway posts a form for every keystroke and
# shows our plain-text reply; everything about the dialog lives in the
# navigator, this route only translates the wire format.

router = APIRouter(
    tags=["USSD"]
)

log = structlog.get_logger(__name__)

@router.post("/ussd", response_class=PlainTextResponse)
async def ussd_callback(
    sessionId: str = Form(default=""),
    serviceCode: str = Form(default=""),
    phoneNumber: str = Form(default="unknown"),
    text: str = Form(default=""),
    navigator: SessionNavigator = Depends(get_navigator)
):
    """USSD gateway callback (Africa's Talking form convention)."""
    with response_time_histogram.labels(endpoint="ussd").time():
        session_id = sessionId or uuid.uuid4().hex
        token = latest_token(text, settings.ussd_input_convention)
        # Only a blank text opens the dialog; "2*25*" is an empty entry on a live session
        dialog_start = not (text or "").strip()
        log.info(
            "USSD request received.",
            session_id=session_id,
            service_code=serviceCode,
            caller=phoneNumber[:7] + "****",
            token=token
        )
        try:
            reply = await navigator.handle(session_id, phoneNumber, token, dialog_start=dialog_start)
        except Exception:
            log.exception("Unhandled error in USSD callback.", session_id=session_id)
            ussd_requests_counter.labels(outcome="error").inc()
            return PlainTextResponse(f"{END_MARKER} {strings.TEMPLATES['ERROR'][settings.default_language]}")

        return PlainTextResponse(to_wire(reply))

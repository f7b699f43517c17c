# /bmi_ussd/utils/ussd_protocol.py

from bmi_ussd.models.api import NavigatorReply

# Wire conventions of the USSD gateway (Africa's Talking style). The gateway
# sends everything typed so far joined by "*", and reads the first word of our
# reply: CON keeps the dialog open, END closes it.

CONTINUE_MARKER = "CON"
END_MARKER = "END"
TOKEN_SEPARATOR = "*"


def latest_token(text: str, convention: str = "cumulative") -> str:
    """
    Returns the newest token of the gateway text.

    "cumulative": "1*70*170" -> "170"; "" stays "" (dialog start).
    "delta": the gateway already sends only the newest token.
    """
    text = (text or "").strip()
    if convention == "delta" or not text:
        return text
    return text.split(TOKEN_SEPARATOR)[-1].strip()


def to_wire(reply: NavigatorReply) -> str:
    marker = CONTINUE_MARKER if reply.continue_session else END_MARKER
    return f"{marker} {reply.message}"

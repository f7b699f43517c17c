# /bmi_ussd/models/api.py

from pydantic import BaseModel, Field
from typing import Dict, Optional
from datetime import datetime, timezone

# This file contains Pydantic models that define the structure of data
# exchanged at the service boundaries.

class NavigatorReply(BaseModel):
    """What the navigator answers for one keystroke; the wire adapter adds the marker."""
    continue_session: bool
    message: str

class APIResponse(BaseModel):
    success: bool
    message: str
    data: Optional[Dict] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    version: str

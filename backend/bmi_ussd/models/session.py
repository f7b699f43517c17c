# /bmi_ussd/models/session.py

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MenuState(str, Enum):
    """Screens of the USSD menu."""
    WELCOME = "welcome"
    AGE = "age"
    WEIGHT = "weight"
    HEIGHT = "height"
    RESULT = "result"
    TIPS = "tips"
    HISTORY = "history"


class BmiCategory(str, Enum):
    UNDERWEIGHT = "underweight"
    NORMAL = "normal"
    OVERWEIGHT = "overweight"
    OBESE = "obese"


class UssdSession(BaseModel):
    """
    One caller's dialog through the menu.

    The navigation stack holds the screens left on forward moves, so its top
    is always the screen the caller came from. Collected fields are cleared
    whenever back navigation abandons the screen that produced them.
    """
    session_id: str = Field(..., description="Session identifier supplied by the gateway")
    caller_id: str = Field(..., description="Caller phone number")
    state: MenuState = Field(default=MenuState.WELCOME, description="Current screen")
    language: str = Field(default="en", description="Selected language code")
    navigation_stack: List[MenuState] = Field(default_factory=list, description="Previously visited screens")
    age: Optional[int] = None
    weight: Optional[float] = Field(default=None, description="Weight in kilograms")
    height: Optional[float] = Field(default=None, description="Height in centimeters")
    bmi: Optional[float] = Field(default=None, description="BMI rounded to one decimal")
    category: Optional[BmiCategory] = None
    created_at: datetime = Field(default_factory=utcnow)
    last_activity: datetime = Field(default_factory=utcnow)


class BmiResult(BaseModel):
    """A computed BMI, kept per caller for the history screen."""
    caller_id: str
    session_id: str
    age: Optional[int] = None
    weight: float
    height: float
    bmi: float
    category: BmiCategory
    created_at: datetime = Field(default_factory=utcnow)

# /bmi_ussd/services/bmi_service.py

from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Tuple, Union

from bmi_ussd.models.session import BmiCategory

# BMI is computed on exact decimals of what the caller typed and rounded half-up
# to one decimal place, so 24.25 becomes 24.3 (banker's rounding would give 24.2).

Number = Union[int, float, str, Decimal]

ONE_DECIMAL = Decimal("0.1")

# Lower bounds (inclusive) of each category, checked against the rounded BMI.
NORMAL_FROM = Decimal("18.5")
OVERWEIGHT_FROM = Decimal("25")
OBESE_FROM = Decimal("30")


def _to_decimal(value: Number) -> Decimal:
    # str() keeps 70.1 as 70.1 instead of its binary expansion
    return value if isinstance(value, Decimal) else Decimal(str(value))


def calculate_bmi(weight_kg: Number, height_cm: Number) -> Decimal:
    """Returns weight / (height in meters)^2 rounded half-up to one decimal."""
    weight = _to_decimal(weight_kg)
    height_m = _to_decimal(height_cm) / 100
    if weight <= 0 or height_m <= 0:
        raise ValueError("Weight and height must be positive")
    with localcontext() as ctx:
        raw = weight / (height_m * height_m)
        # quantize needs every integer digit plus the tenths within precision
        ctx.prec = max(ctx.prec, raw.adjusted() + 2)
        return raw.quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP)


def classify_bmi(bmi: Number) -> BmiCategory:
    value = _to_decimal(bmi)
    if value < NORMAL_FROM:
        return BmiCategory.UNDERWEIGHT
    if value < OVERWEIGHT_FROM:
        return BmiCategory.NORMAL
    if value < OBESE_FROM:
        return BmiCategory.OVERWEIGHT
    return BmiCategory.OBESE


def compute(weight_kg: Number, height_cm: Number) -> Tuple[float, BmiCategory]:
    """BMI as a float (for storage and display) with its category."""
    bmi = calculate_bmi(weight_kg, height_cm)
    return float(bmi), classify_bmi(bmi)

# backend/tests/unit/test_bmi.py
from decimal import Decimal

import pytest

from bmi_ussd.models.session import BmiCategory
from bmi_ussd.services.bmi_service import calculate_bmi, classify_bmi, compute


def test_reference_calculation():
    """70 kg at 170 cm is 24.221..., shown as 24.2."""
    assert calculate_bmi(70, 170) == Decimal("24.2")
    assert compute(70, 170) == (24.2, BmiCategory.NORMAL)


def test_rounds_half_up_at_five_hundredths():
    # 97 / 2.0^2 is exactly 24.25; banker's rounding would give 24.2
    assert calculate_bmi(97, 200) == Decimal("24.3")
    assert round(24.25, 1) == 24.2


def test_fractional_inputs_use_typed_decimals():
    # 70.1 must not be read as its binary expansion
    assert calculate_bmi("70.1", "170") == Decimal("24.3")
    assert calculate_bmi(70.1, 170.0) == Decimal("24.3")


@pytest.mark.parametrize("bmi, expected", [
    ("18.4", BmiCategory.UNDERWEIGHT),
    ("18.5", BmiCategory.NORMAL),
    ("24.9", BmiCategory.NORMAL),
    ("25.0", BmiCategory.OVERWEIGHT),
    ("29.9", BmiCategory.OVERWEIGHT),
    ("30.0", BmiCategory.OBESE),
])
def test_category_boundaries(bmi, expected):
    assert classify_bmi(Decimal(bmi)) == expected


def test_category_uses_rounded_value():
    # 73.8 / 4 = 18.45, rounded to 18.5, which is normal
    bmi, category = compute(73.8, 200)
    assert bmi == 18.5
    assert category == BmiCategory.NORMAL

    bmi, category = compute(73.6, 200)
    assert bmi == 18.4
    assert category == BmiCategory.UNDERWEIGHT


def test_obese_and_overweight_examples():
    assert compute(120, 200) == (30.0, BmiCategory.OBESE)
    assert compute(119.6, 200) == (29.9, BmiCategory.OVERWEIGHT)


def test_non_positive_inputs_are_rejected():
    with pytest.raises(ValueError):
        calculate_bmi(0, 170)
    with pytest.raises(ValueError):
        calculate_bmi(70, 0)


def test_very_large_bmi_keeps_its_tenths():
    # 1000 kg at 1e-10 cm needs more than the default 28 digits
    assert calculate_bmi(1000, "0.0000000001") == Decimal("1e27")
    assert calculate_bmi(1000, "0.01") == Decimal("100000000000.0")

import pytest
from pydantic import ValidationError

from app.schemas.quotations import HourlyRate, QuotationItem, coerce_number


@pytest.mark.parametrize(
    "raw,expected",
    [
        (12, 12.0),
        ("12.5", 12.5),
        (None, 7.0),
        ("", 7.0),
        ("abc", 7.0),
        (True, 7.0),
        (float("nan"), 7.0),
        (10**400, 7.0),
        ("1e400", 7.0),
        ([1], 7.0),
        (0, 0.0),
    ],
)
def test_coerce_number(raw, expected):
    assert coerce_number(raw, 7.0) == expected


def test_item_defaults():
    item = QuotationItem.model_validate({"serviceName": "Survey"})
    assert item.quantity == 1
    assert item.unitPrice == 0
    assert item.totalPrice == 0


def test_item_total_computed_when_missing_or_garbage():
    item = QuotationItem.model_validate(
        {"serviceName": "Cable", "quantity": "3", "unitPrice": "10", "totalPrice": "n/a"}
    )
    assert item.totalPrice == 30


def test_item_supplied_total_is_kept():
    item = QuotationItem.model_validate(
        {"serviceName": "Cable", "quantity": 3, "unitPrice": 10, "totalPrice": 25}
    )
    assert item.totalPrice == 25


def test_item_keeps_unknown_keys():
    item = QuotationItem.model_validate({"serviceName": "Cable", "unit": "m"})
    assert item.model_dump()["unit"] == "m"


@pytest.mark.parametrize("raw", [{}, {"serviceName": ""}, {"serviceName": "   "}])
def test_item_requires_service_name(raw):
    with pytest.raises(ValidationError):
        QuotationItem.model_validate(raw)


def test_hourly_rate_coerces_rate():
    assert HourlyRate.model_validate({"role": "Fitter", "rate": "40"}).rate == 40
    assert HourlyRate.model_validate({"role": "Fitter", "rate": "x"}).rate is None

"""Unit tests for guest payload normalization."""

import pytest
from pydantic import TypeAdapter, ValidationError

from app.models.service_request import RequestPriority, RequestType
from app.services.submission import GuestRequest, format_amount, normalize

guest_request = TypeAdapter(GuestRequest)


def _parse(**body):
    return guest_request.validate_python({"guest_phone": "9876543210", **body})


@pytest.mark.parametrize(
    "value, expected",
    [(40.0, "40"), (12.5, "12.5"), (0, "0"), (99.99, "99.99"), (10.10, "10.1")],
)
def test_format_amount(value, expected):
    assert format_amount(value) == expected


def test_food_order_lines_and_total():
    result = normalize(_parse(
        type="order-food",
        order_details={"items": [
            {"name": "Masala Dosa", "price": 80, "quantity": 2},
            {"name": "Lime Soda", "price": 45.5, "quantity": 1},
        ]},
    ))
    assert result.type == RequestType.ORDER_FOOD
    assert result.message == (
        "Food Order:\n"
        "Masala Dosa x2 = ₹160\n"
        "Lime Soda x1 = ₹45.5\n"
        "Total: ₹205.5"
    )
    assert result.order_details.total_amount == 205.5
    assert [line.total for line in result.order_details.items] == [160, 45.5]


def test_room_service_with_description():
    result = normalize(_parse(
        type="room-service",
        service_name="Laundry",
        category="Housekeeping",
        estimated_time="2 hours",
        description="  Two shirts  ",
    ))
    assert result.message.endswith("Description: Two shirts")
    assert result.priority == RequestPriority.MEDIUM
    assert result.order_details is None


def test_blank_description_is_na():
    result = normalize(_parse(
        type="complaint", complaint_name="AC", category="Maintenance", description="   ",
    ))
    assert result.message.endswith("Description: N/A")
    assert result.priority == RequestPriority.HIGH


def test_call_service_keeps_guest_message():
    result = normalize(_parse(type="call-service", message="Bring an umbrella"))
    assert result.message == "Bring an umbrella"


def test_explicit_priority_is_used():
    result = normalize(_parse(type="custom-message", message="Hi", priority="low"))
    assert result.priority == RequestPriority.LOW


@pytest.mark.parametrize(
    "body",
    [
        {"type": "order-food"},
        {"type": "order-food", "order_details": {"items": [{"name": "Tea", "price": 5, "quantity": 0}]}},
        {"type": "room-service", "service_name": "Towels"},
        {"type": "custom-message", "message": ""},
        {"type": "unknown"},
    ],
)
def test_invalid_payloads_rejected(body):
    with pytest.raises(ValidationError):
        _parse(**body)


def test_phone_is_required():
    with pytest.raises(ValidationError):
        guest_request.validate_python({"type": "call-service"})

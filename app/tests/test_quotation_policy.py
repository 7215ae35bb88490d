import pytest

from app.core.errors import InvalidStatusTransition, QuotationForbidden
from app.policies.principal import Principal
from app.policies.quotation_policy import (
    can_transition,
    require_owner,
    require_send_allowed,
)


def test_allowed_transitions():
    assert can_transition("draft", "sent")
    assert can_transition("sent", "viewed")


@pytest.mark.parametrize(
    "current,target",
    [
        ("draft", "viewed"),
        ("viewed", "sent"),
        ("sent", "sent"),
        ("accepted", "sent"),
        ("rejected", "sent"),
        ("expired", "viewed"),
        ("bogus", "sent"),
        ("draft", "bogus"),
    ],
)
def test_rejected_transitions(current, target):
    assert not can_transition(current, target)


def test_send_allowed_from_draft():
    require_send_allowed("draft")


@pytest.mark.parametrize("status", ["sent", "accepted"])
def test_send_rejected_when_already_sent(status):
    with pytest.raises(InvalidStatusTransition, match="already been sent or accepted"):
        require_send_allowed(status)


@pytest.mark.parametrize("status", ["viewed", "rejected", "expired"])
def test_send_rejected_from_other_states(status):
    with pytest.raises(InvalidStatusTransition, match=status):
        require_send_allowed(status)


def test_require_owner():
    p = Principal(user_id="u-1", email="a@example.com", name="A")
    require_owner(p, "u-1", "nope")
    with pytest.raises(QuotationForbidden, match="nope"):
        require_owner(p, "u-2", "nope")

import pytest

from core.exceptions import InvalidStateError, ValidationError
from core.validate_enum import validate_enum
from models.enums import (
    ACTIVE_TRANSFER_STATUSES,
    BuyerDecision,
    ContactMessageStatus,
    TransferStatus,
)
from policy.contact_message_policy import ContactMessagePolicy
from policy.transfer_policy import TRANSFER_TRANSITIONS, TransferPolicy


def test_every_transfer_status_has_a_transition_entry():
    assert set(TRANSFER_TRANSITIONS) == set(TransferStatus)


@pytest.mark.parametrize(
    "current,target",
    [
        (TransferStatus.PENDING, TransferStatus.ADMIN_PENDING),
        (TransferStatus.PENDING, TransferStatus.REJECTED),
        (TransferStatus.PENDING, TransferStatus.CANCELLED),
        (TransferStatus.ACCEPTED, TransferStatus.ADMIN_PENDING),
        (TransferStatus.ADMIN_PENDING, TransferStatus.ADMIN_APPROVED),
        (TransferStatus.ADMIN_PENDING, TransferStatus.ADMIN_REJECTED),
        (TransferStatus.ADMIN_APPROVED, TransferStatus.COMPLETED),
    ],
)
def test_allowed_transfer_transitions(current, target):
    assert TransferPolicy.can_transition(current, target)


@pytest.mark.parametrize(
    "current,target",
    [
        (TransferStatus.PENDING, TransferStatus.COMPLETED),
        (TransferStatus.PENDING, TransferStatus.ADMIN_APPROVED),
        (TransferStatus.ADMIN_PENDING, TransferStatus.COMPLETED),
        (TransferStatus.ADMIN_APPROVED, TransferStatus.CANCELLED),
        (TransferStatus.COMPLETED, TransferStatus.ADMIN_PENDING),
        (TransferStatus.REJECTED, TransferStatus.PENDING),
    ],
)
def test_disallowed_transfer_transitions_raise(current, target):
    with pytest.raises(InvalidStateError):
        TransferPolicy.ensure_transition(current, target)


def test_terminal_statuses_have_no_way_out():
    for status in TransferStatus:
        if TransferPolicy.is_terminal(status):
            assert not TRANSFER_TRANSITIONS[status]
            assert status not in ACTIVE_TRANSFER_STATUSES
        else:
            assert status in ACTIVE_TRANSFER_STATUSES


def test_ensure_status_names_the_action():
    with pytest.raises(InvalidStateError, match="Cannot approve"):
        TransferPolicy.ensure_status(
            TransferStatus.PENDING, TransferStatus.ADMIN_PENDING, "approve"
        )


@pytest.mark.parametrize(
    "current,target,allowed",
    [
        (ContactMessageStatus.PENDING, ContactMessageStatus.READ, True),
        (ContactMessageStatus.PENDING, ContactMessageStatus.CLOSED, True),
        (ContactMessageStatus.READ, ContactMessageStatus.REPLIED, True),
        (ContactMessageStatus.REPLIED, ContactMessageStatus.REPLIED, True),
        (ContactMessageStatus.RESOLVED, ContactMessageStatus.READ, False),
        (ContactMessageStatus.REPLIED, ContactMessageStatus.PENDING, False),
        (ContactMessageStatus.CLOSED, ContactMessageStatus.REPLIED, False),
        (ContactMessageStatus.CLOSED, ContactMessageStatus.CLOSED, True),
        (ContactMessageStatus.CLOSED, ContactMessageStatus.RESOLVED, True),
        (ContactMessageStatus.CLOSED, ContactMessageStatus.READ, False),
    ],
)
def test_contact_status_only_moves_forward(current, target, allowed):
    assert ContactMessagePolicy.can_transition(current, target) is allowed


def test_contact_rewind_raises_invalid_state():
    with pytest.raises(InvalidStateError):
        ContactMessagePolicy.ensure_transition(
            ContactMessageStatus.RESOLVED, ContactMessageStatus.READ
        )


def test_validate_enum_accepts_values_and_names():
    assert validate_enum("Accepted", BuyerDecision, field="response") == BuyerDecision.ACCEPTED
    assert validate_enum("DECLINED", BuyerDecision, field="response") == BuyerDecision.DECLINED
    assert validate_enum("", BuyerDecision, field="response") is None
    assert validate_enum(None, BuyerDecision, field="response") is None


def test_validate_enum_rejects_unknown_values():
    with pytest.raises(ValidationError, match="Allowed values"):
        validate_enum("maybe", BuyerDecision, field="response")

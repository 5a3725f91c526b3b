"""
Tests for the escalation event bus and subscriber notification.
"""
import pytest

from coach_core.escalation import EscalationEventBus
from coach_core.models import (
    EscalationPriority,
    EscalationReason,
    EscalationReasonType,
    EscalationRequest,
    EscalationStatus
)


@pytest.fixture
def sample_request() -> EscalationRequest:
    return EscalationRequest(
        id="escalation-test",
        user_id="user-1",
        reason=EscalationReason(
            type=EscalationReasonType.USER_REQUEST,
            description="asked for a human",
            confidence=1.0
        ),
        priority=EscalationPriority.MEDIUM
    )


# ===========================
# Event Bus Tests
# ===========================

@pytest.mark.unit
def test_publish_reaches_every_subscriber(event_bus, sample_request):
    first, second = [], []
    event_bus.subscribe(first.append)
    event_bus.subscribe(second.append)

    delivered = event_bus.publish(sample_request)

    assert delivered == 2
    assert [r.id for r in first] == ["escalation-test"]
    assert [r.id for r in second] == ["escalation-test"]


@pytest.mark.unit
def test_failing_subscriber_does_not_block_others(event_bus, sample_request):
    received = []

    def broken(request):
        raise RuntimeError("subscriber failure")

    event_bus.subscribe(broken)
    event_bus.subscribe(received.append)

    delivered = event_bus.publish(sample_request)

    assert delivered == 1
    assert len(received) == 1


@pytest.mark.unit
def test_subscribers_receive_independent_copies(event_bus, sample_request):
    received = []

    def mutate(request):
        request.status = EscalationStatus.CANCELLED
        received.append(request)

    event_bus.subscribe(mutate)
    event_bus.publish(sample_request)

    assert received[0] is not sample_request
    assert sample_request.status == EscalationStatus.PENDING


@pytest.mark.unit
def test_duplicate_subscribe_and_unsubscribe(event_bus, sample_request):
    received = []

    event_bus.subscribe(received.append)
    event_bus.subscribe(received.append)
    assert event_bus.subscriber_count == 1

    assert event_bus.unsubscribe(received.append) is True
    assert event_bus.unsubscribe(received.append) is False

    event_bus.publish(sample_request)
    assert received == []


# ===========================
# Manager Notification Tests
# ===========================

@pytest.mark.unit
def test_manager_notifies_on_create_assign_and_status(escalation_manager):
    updates = []
    escalation_manager.subscribe(updates.append)

    request = escalation_manager.create_escalation_request(
        "user-1",
        EscalationReason(
            type=EscalationReasonType.USER_REQUEST,
            description="asked for a human",
            confidence=1.0
        )
    )
    escalation_manager.update_escalation_status(request.id, EscalationStatus.IN_PROGRESS)

    assert [u.status for u in updates] == [
        EscalationStatus.PENDING,
        EscalationStatus.ASSIGNED,
        EscalationStatus.IN_PROGRESS
    ]

    assert escalation_manager.unsubscribe(updates.append) is True

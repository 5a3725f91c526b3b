"""
Integration tests for CoachingService.
A chat turn flows through classification, conversation storage and the
escalation decision.
"""
import pytest

from coach_core.exceptions import SessionNotFound
from coach_core.models import (
    EscalationPriority,
    EscalationReasonType,
    EscalationStatus,
    MessageType,
    Mood,
    Sentiment
)


@pytest.mark.integration
def test_crisis_message_is_stored_and_escalated(coaching_service, storage):
    turn = coaching_service.process_user_message(
        "user-1",
        "I got fired and I'm having a panic attack"
    )

    assert turn.requires_escalation is True
    assert turn.decision.reason.type == EscalationReasonType.CAREER_CRISIS
    assert turn.escalation.priority == EscalationPriority.URGENT
    assert turn.escalation.status == EscalationStatus.ASSIGNED
    assert turn.escalation.context.original_message == "I got fired and I'm having a panic attack"

    assert turn.sentiment.sentiment == Sentiment.NEGATIVE
    assert turn.emotional_state.mood == Mood.OVERWHELMED
    assert turn.message.sentiment == Sentiment.NEGATIVE
    assert turn.message.metadata["mood"] == "overwhelmed"
    assert storage.get_session_messages(turn.session_id) == [turn.message]


@pytest.mark.integration
def test_plain_question_is_stored_without_escalation(coaching_service, escalation_manager):
    turn = coaching_service.process_user_message("user-1", "What does this variable do?")

    assert turn.requires_escalation is False
    assert turn.escalation is None
    assert escalation_manager.get_user_escalation_requests("user-1") == []
    assert turn.message.type == MessageType.USER


@pytest.mark.integration
def test_messages_reuse_the_users_current_session(coaching_service, storage):
    first = coaching_service.process_user_message("user-1", "Hello there")
    second = coaching_service.process_user_message("user-1", "Another question")
    other = coaching_service.process_user_message("user-2", "Hi from someone else")

    assert first.session_id == second.session_id
    assert other.session_id != first.session_id
    assert [m.content for m in storage.get_session_messages(first.session_id)] == [
        "Hello there",
        "Another question"
    ]


@pytest.mark.integration
def test_foreign_session_is_rejected(coaching_service, storage):
    foreign = storage.create_session("user-2")

    with pytest.raises(SessionNotFound):
        coaching_service.process_user_message("user-1", "Hello", session_id=foreign.id)


@pytest.mark.integration
def test_topics_tag_message_and_session(coaching_service, storage):
    turn = coaching_service.process_user_message(
        "user-1",
        "Should I learn python for a data job?"
    )

    assert turn.topics == ["data science", "career"]
    assert storage.get_session(turn.session_id).tags == ["data science", "career"]


@pytest.mark.integration
def test_profile_guides_mentor_choice(coaching_service):
    turn = coaching_service.process_user_message(
        "user-1",
        "Can I talk to a human mentor?",
        user_profile={"interests": ["React"]}
    )

    assert turn.decision.reason.type == EscalationReasonType.USER_REQUEST
    assert turn.escalation.assigned_mentor == "mentor-1"


@pytest.mark.integration
def test_ai_limitation_escalates(coaching_service):
    turn = coaching_service.process_user_message(
        "user-1",
        "Which language should I pick?",
        ai_response="I don't know enough about your situation."
    )

    assert turn.decision.reason.type == EscalationReasonType.AI_LIMITATION
    assert turn.escalation.priority == EscalationPriority.LOW


@pytest.mark.integration
def test_record_coach_message(coaching_service, storage):
    turn = coaching_service.process_user_message("user-1", "Where do I start?")

    reply = coaching_service.record_coach_message(
        turn.session_id,
        "Focus on python and data projects",
        metadata={"source": "template"}
    )

    assert reply.type == MessageType.COACH
    assert reply.topics == ["data science"]
    assert reply.metadata == {"source": "template"}
    assert storage.get_session(turn.session_id).message_count == 2


@pytest.mark.integration
def test_record_coach_message_unknown_session(coaching_service):
    with pytest.raises(SessionNotFound):
        coaching_service.record_coach_message("session-missing", "Hello")


@pytest.mark.integration
def test_turn_to_dict(coaching_service):
    turn = coaching_service.process_user_message("user-1", "This is awesome")

    data = turn.to_dict()

    assert data["session_id"] == turn.session_id
    assert data["message"]["content"] == "This is awesome"
    assert data["sentiment"]["sentiment"] == "positive"
    assert data["requires_escalation"] is False
    assert data["escalation"] is None
    assert data["processing_time"] >= 0

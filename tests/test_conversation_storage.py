"""
Tests for ConversationStorage: sessions, messages, analytics,
export/import and persistence failure handling.
"""
import json
from datetime import datetime, timezone

import pytest

from coach_core.conversation import ConversationStorage, InMemoryConversationStore
from coach_core.exceptions import NoActiveSession, SessionNotFound, StorageError
from coach_core.models import ConversationExport, Level, MessageType, Sentiment


class FlakyStore(InMemoryConversationStore):
    """In-memory store whose writes can be switched off."""

    def __init__(self):
        super().__init__()
        self.fail = False

    def save(self, document):
        if self.fail:
            raise StorageError("disk full")
        super().save(document)


@pytest.fixture
def flaky_store() -> FlakyStore:
    return FlakyStore()


@pytest.fixture
def flaky_storage(flaky_store, test_settings, clock) -> ConversationStorage:
    return ConversationStorage(store=flaky_store, settings=test_settings, clock=clock)


# ===========================
# Session Tests
# ===========================

@pytest.mark.unit
def test_create_session_defaults(storage):
    session = storage.create_session("user-1")

    assert session.title == "Conversation 2024-03-04"
    assert session.message_count == 0
    assert session.tags == []
    assert storage.get_current_session_id() == session.id
    assert storage.get_session_messages(session.id) == []


@pytest.mark.unit
def test_messages_preserve_content_and_order(storage):
    storage.create_session("user-1")
    contents = ["First question", "Coach answer", "Follow-up", ""]

    for index, content in enumerate(contents):
        storage.add_message(content, MessageType.COACH if index % 2 else MessageType.USER)

    messages = storage.get_current_session_messages()

    assert [m.content for m in messages] == contents
    assert [m.type for m in messages] == [
        MessageType.USER, MessageType.COACH, MessageType.USER, MessageType.COACH
    ]
    assert len({m.id for m in messages}) == 4
    assert all(m.user_id == "user-1" for m in messages)


@pytest.mark.unit
def test_add_message_without_session_raises(storage):
    with pytest.raises(NoActiveSession):
        storage.add_message("Hello")


@pytest.mark.unit
def test_add_message_to_unknown_session_raises(storage):
    with pytest.raises(SessionNotFound) as exc_info:
        storage.add_message("Hello", session_id="session-missing")

    assert exc_info.value.session_id == "session-missing"


@pytest.mark.unit
def test_explicit_session_id_overrides_current(storage):
    first = storage.create_session("user-1")
    second = storage.create_session("user-1")

    storage.add_message("For the first session", session_id=first.id)

    assert storage.get_current_session_id() == second.id
    assert [m.content for m in storage.get_session_messages(first.id)] == ["For the first session"]
    assert storage.get_session_messages(second.id) == []


@pytest.mark.unit
def test_add_message_updates_session_metadata(storage, clock):
    session = storage.create_session("user-1")
    clock.advance(minutes=3)

    message = storage.add_message("Hi", topics=["career", "programming"], sentiment="positive")
    storage.add_message("More", topics=["career", "data science"])

    updated = storage.get_session(session.id)
    assert updated.message_count == 2
    assert updated.last_message_at == message.timestamp
    assert updated.updated_at == message.timestamp
    assert updated.tags == ["career", "programming", "data science"]
    assert message.sentiment == Sentiment.POSITIVE


@pytest.mark.unit
def test_first_message_sets_title(storage):
    session = storage.create_session("user-1")

    storage.add_message("How do I learn React hooks quickly today please")
    storage.add_message("A second message never renames the session")

    assert storage.get_session(session.id).title == "How do I learn React hooks"


@pytest.mark.unit
def test_long_first_message_title_is_truncated(storage):
    session = storage.create_session("user-1")

    storage.add_message(
        "Supercalifragilistic expialidocious wonderfully extraordinary developer opportunities await"
    )

    title = storage.get_session(session.id).title
    assert title == "Supercalifragilistic expialidocious wonderfully..."
    assert len(title) == 50


@pytest.mark.unit
def test_custom_title_is_kept(storage):
    session = storage.create_session("user-1", title="Interview prep")

    storage.add_message("Let's talk about system design")

    assert storage.get_session(session.id).title == "Interview prep"


@pytest.mark.unit
def test_session_title_and_tags_updates(storage):
    session = storage.create_session("user-1")

    assert storage.update_session_title(session.id, "Renamed") is True
    assert storage.add_session_tags(session.id, ["career", "career", "resume"]) is True
    assert storage.add_session_tags(session.id, ["resume", "salary"]) is True

    updated = storage.get_session(session.id)
    assert updated.title == "Renamed"
    assert updated.tags == ["career", "resume", "salary"]

    assert storage.update_session_title("missing", "x") is False
    assert storage.add_session_tags("missing", ["x"]) is False


@pytest.mark.unit
def test_set_current_session(storage):
    first = storage.create_session("user-1")
    storage.create_session("user-1")

    assert storage.set_current_session(first.id) is True
    storage.add_message("Back to the first one")

    assert storage.get_current_session_id() == first.id
    assert len(storage.get_session_messages(first.id)) == 1
    assert storage.set_current_session("missing") is False


@pytest.mark.unit
def test_returned_sessions_are_copies(storage):
    session = storage.create_session("user-1")

    fetched = storage.get_session(session.id)
    fetched.title = "Changed outside"

    assert storage.get_session(session.id).title == "Conversation 2024-03-04"


# ===========================
# Retrieval Tests
# ===========================

@pytest.mark.unit
def test_user_sessions_sorted_by_last_activity(storage, clock):
    older = storage.create_session("user-1")
    newer = storage.create_session("user-1")
    storage.create_session("user-2")

    clock.advance(minutes=1)
    storage.add_message("newer activity", session_id=newer.id)
    clock.advance(minutes=1)
    storage.add_message("latest activity", session_id=older.id)

    assert [s.id for s in storage.get_user_sessions("user-1")] == [older.id, newer.id]


@pytest.mark.unit
def test_recent_messages_newest_first_with_limit(storage, clock):
    first = storage.create_session("user-1")
    storage.add_message("one")
    clock.advance(minutes=1)
    storage.create_session("user-1")
    storage.add_message("two")
    clock.advance(minutes=1)
    storage.add_message("three", session_id=first.id)

    recent = storage.get_recent_messages("user-1", limit=2)

    assert [m.content for m in recent] == ["three", "two"]
    assert len(storage.get_recent_messages("user-1")) == 3
    assert storage.get_recent_messages("user-2") == []


@pytest.mark.unit
def test_search_matches_content_and_topics(storage):
    storage.create_session("user-1")
    storage.add_message("Tips for my RESUME?")
    storage.add_message("Let's look at your portfolio", "coach", topics=["Career"])
    storage.add_message("Thanks")

    assert [m.content for m in storage.search_messages("user-1", "resume")] == ["Tips for my RESUME?"]
    assert [m.content for m in storage.search_messages("user-1", "career")] == [
        "Let's look at your portfolio"
    ]
    assert storage.search_messages("user-2", "resume") == []


# ===========================
# Summary Tests
# ===========================

@pytest.mark.unit
def test_session_summary(storage, clock):
    session = storage.create_session("user-1")
    storage.add_message("How do I get a job?", topics=["career"])
    clock.advance(minutes=5)
    storage.add_message("Start with your resume", "coach", topics=["career", "programming"])

    summary = storage.generate_session_summary(session.id)

    assert summary == (
        "Discussed career, programming over 5 minutes. "
        "1 questions asked, 1 responses provided."
    )


@pytest.mark.unit
def test_summary_of_empty_session(storage):
    session = storage.create_session("user-1")

    assert storage.generate_session_summary(session.id) == ""
    assert storage.auto_save_session_summary(session.id) is None


@pytest.mark.unit
def test_auto_save_session_summary(storage):
    session = storage.create_session("user-1")
    storage.add_message("Hello")

    summary = storage.auto_save_session_summary(session.id)

    assert summary == "Discussed general topics over a few minutes. 1 questions asked, 0 responses provided."
    assert storage.get_session(session.id).summary == summary
    assert storage.auto_save_session_summary("missing") is None


# ===========================
# Statistics Tests
# ===========================

@pytest.mark.unit
@pytest.mark.parametrize("layout,average", [
    ([1], 1.0),
    ([2, 3], 2.5),
    ([0, 4, 1], 1.7),
])
def test_total_messages_matches_session_counts(storage, layout, average):
    for count in layout:
        storage.create_session("user-1")
        for index in range(count):
            storage.add_message(f"message {index}")

    storage.create_session("user-2")
    storage.add_message("someone else")

    stats = storage.get_conversation_stats("user-1")
    sessions = storage.get_user_sessions("user-1")

    assert stats.total_messages == sum(layout)
    assert stats.total_messages == sum(s.message_count for s in sessions)
    assert stats.total_sessions == len(layout)
    assert stats.average_session_length == average


@pytest.mark.unit
def test_stats_topics_days_and_sentiment(storage, clock):
    storage.create_session("user-1")
    storage.add_message("a", topics=["career"], sentiment="positive")
    storage.add_message("b", topics=["career", "programming"], sentiment="negative")
    clock.advance(days=1)
    storage.add_message("c", topics=["programming"], sentiment="positive")
    storage.add_message("d", topics=["career"])
    storage.add_message("e", sentiment="neutral")

    stats = storage.get_conversation_stats("user-1")

    assert stats.most_active_day == "2024-03-05"
    assert [(t.topic, t.count) for t in stats.top_topics] == [("career", 3), ("programming", 2)]
    assert stats.sentiment_distribution.positive == 2
    assert stats.sentiment_distribution.negative == 1
    assert stats.sentiment_distribution.neutral == 1


@pytest.mark.unit
def test_most_active_day_tie_keeps_first_day(storage, clock):
    storage.create_session("user-1")
    storage.add_message("monday")
    clock.advance(days=1)
    storage.add_message("tuesday")

    assert storage.get_conversation_stats("user-1").most_active_day == "2024-03-04"


@pytest.mark.unit
def test_stats_for_unknown_user(storage):
    stats = storage.get_conversation_stats("nobody")

    assert stats.total_messages == 0
    assert stats.total_sessions == 0
    assert stats.average_session_length == 0.0
    assert stats.most_active_day == ""


# ===========================
# Insights Tests
# ===========================

@pytest.mark.unit
def test_conversation_insights(storage, clock):
    storage.create_session("user-1")
    storage.add_message(
        "How do I design a scalable architecture?",
        topics=["programming"],
        sentiment="positive"
    )
    clock.advance(minutes=1)
    storage.add_message("Start small", "coach", topics=["programming"], sentiment="positive")
    clock.advance(minutes=1)
    storage.add_message("Can you explain closures?", topics=["career"], sentiment="negative")

    insights = storage.get_conversation_insights("user-1")

    patterns = insights.learning_patterns
    assert patterns.total_questions == 2
    assert patterns.unique_topics == 2
    assert [t.topic for t in patterns.most_frequent_topics] == ["career", "programming"]
    assert patterns.question_complexity == Level.HIGH
    assert insights.engagement_level == Level.LOW
    assert insights.improvement_areas == [
        'Consider asking more specific questions to get better guidance',
        'Explore more diverse topics to broaden your learning'
    ]
    assert insights.achievements == ['Positive learning attitude maintained']


@pytest.mark.unit
def test_insights_for_unknown_user(storage):
    insights = storage.get_conversation_insights("nobody")

    assert insights.learning_patterns.total_questions == 0
    assert insights.learning_patterns.question_complexity == Level.LOW
    assert insights.engagement_level == Level.LOW
    assert insights.achievements == []


# ===========================
# Export / Import Tests
# ===========================

def populate(storage, clock):
    first = storage.create_session("user-1")
    storage.add_message("I want a data science job", topics=["data science", "career"], sentiment="neutral")
    clock.advance(minutes=2)
    storage.add_message("Let's plan it", "coach", metadata={"template": "plan"})
    second = storage.create_session("user-1", title="Portfolio")
    storage.add_message("Review my portfolio?")
    storage.create_session("user-2")
    storage.add_message("Not exported")
    return first, second


@pytest.mark.unit
def test_export_contains_user_sessions_and_stats(storage, clock):
    first, second = populate(storage, clock)

    export = storage.export_conversation_data("user-1")

    assert export.user_id == "user-1"
    assert {entry.session.id for entry in export.sessions} == {first.id, second.id}
    assert export.stats.total_messages == 3

    data = export.to_dict()
    assert set(data) == {"userId", "exportDate", "sessions", "stats"}
    assert set(data["sessions"][0]) == {"session", "messages"}
    json.dumps(data)


@pytest.mark.unit
def test_export_import_round_trip(storage, clock, test_settings):
    populate(storage, clock)
    data = storage.export_conversation_data("user-1").to_dict()

    target = ConversationStorage(InMemoryConversationStore(), test_settings, clock)
    assert target.import_conversation_data(data) is True

    assert target.get_user_sessions("user-1") == storage.get_user_sessions("user-1")
    for session in storage.get_user_sessions("user-1"):
        assert target.get_session_messages(session.id) == storage.get_session_messages(session.id)
    assert target.get_user_sessions("user-2") == []
    assert target.get_current_session_id() is None


@pytest.mark.unit
def test_import_accepts_export_model(storage, clock, test_settings):
    populate(storage, clock)
    export = storage.export_conversation_data("user-1")

    target = ConversationStorage(InMemoryConversationStore(), test_settings, clock)

    assert target.import_conversation_data(export) is True
    assert isinstance(export, ConversationExport)
    assert target.get_conversation_stats("user-1").total_messages == 3


@pytest.mark.unit
@pytest.mark.parametrize("payload", [
    "garbage",
    None,
    {"sessions": []},
    {"userId": "user-1", "sessions": [{"session": {"id": "s-1"}}]},
    {
        "userId": "user-1",
        "sessions": [{
            "session": {"id": "s-1", "userId": "user-1", "title": "t"},
            "messages": [{"id": "m-1", "userId": "user-9", "type": "user", "content": "hi"}]
        }]
    },
])
def test_malformed_import_changes_nothing(storage, memory_store, payload):
    session = storage.create_session("user-1")
    storage.add_message("existing")
    saves_before = memory_store.save_count

    assert storage.import_conversation_data(payload) is False

    assert [s.id for s in storage.get_user_sessions("user-1")] == [session.id]
    assert memory_store.save_count == saves_before


@pytest.mark.unit
def test_import_rejects_session_owned_by_other_user(storage, clock, test_settings):
    foreign = storage.create_session("user-2")
    data = {
        "userId": "user-1",
        "sessions": [{
            "session": {"id": foreign.id, "userId": "user-1", "title": "Hijack"},
            "messages": []
        }]
    }

    assert storage.import_conversation_data(data) is False
    assert storage.get_session(foreign.id).user_id == "user-2"


@pytest.mark.unit
def test_import_rejects_sessions_of_another_user_than_the_bundle(storage, memory_store):
    saves_before = memory_store.save_count
    data = {
        "userId": "user-1",
        "sessions": [{
            "session": {"id": "s-9", "userId": "user-2", "title": "Someone else"},
            "messages": [{"id": "m-9", "userId": "user-2", "type": "user", "content": "hi"}]
        }]
    }

    assert storage.import_conversation_data(data) is False
    assert storage.get_session("s-9") is None
    assert memory_store.save_count == saves_before


@pytest.mark.unit
def test_import_without_utc_offset_is_read_as_utc(storage, clock):
    live = storage.create_session("user-1")
    storage.add_message("Live message")
    data = {
        "userId": "user-1",
        "sessions": [{
            "session": {
                "id": "s-old",
                "userId": "user-1",
                "title": "Old chat",
                "createdAt": "2024-01-01T00:00:00",
                "updatedAt": "2024-01-01T00:00:00",
                "lastMessageAt": "2024-01-01T00:00:00"
            },
            "messages": [{
                "id": "m-old",
                "userId": "user-1",
                "type": "user",
                "content": "Old message",
                "timestamp": "2024-01-01T00:00:00"
            }]
        }]
    }

    assert storage.import_conversation_data(data) is True

    recent = storage.get_recent_messages("user-1")
    assert [m.content for m in recent] == ["Live message", "Old message"]
    assert recent[1].timestamp == datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert [s.id for s in storage.get_user_sessions("user-1")] == [live.id, "s-old"]
    assert storage.get_conversation_stats("user-1").total_messages == 2


@pytest.mark.unit
def test_import_rolls_back_when_save_fails(flaky_storage, flaky_store, storage, clock):
    populate(storage, clock)
    data = storage.export_conversation_data("user-1").to_dict()

    own = flaky_storage.create_session("user-3")
    flaky_store.fail = True

    with pytest.raises(StorageError):
        flaky_storage.import_conversation_data(data)

    assert flaky_storage.get_user_sessions("user-1") == []
    assert [s.id for s in flaky_storage.get_user_sessions("user-3")] == [own.id]


# ===========================
# Persistence Tests
# ===========================

@pytest.mark.unit
def test_state_is_reloaded_from_store(storage, memory_store, test_settings, clock):
    session = storage.create_session("user-1")
    storage.add_message("persist me", topics=["career"])

    reloaded = ConversationStorage(memory_store, test_settings, clock)

    assert reloaded.get_current_session_id() == session.id
    assert reloaded.get_session(session.id) == storage.get_session(session.id)
    assert reloaded.get_session_messages(session.id) == storage.get_session_messages(session.id)


@pytest.mark.unit
def test_invalid_persisted_document_raises(test_settings):
    store = InMemoryConversationStore(initial={
        "conversations": {},
        "sessions": {"s-1": {"id": "s-1", "userId": "user-1", "title": "orphan"}},
        "currentSessionId": None
    })

    with pytest.raises(StorageError):
        ConversationStorage(store, test_settings)


@pytest.mark.unit
def test_failed_write_rolls_back_message(flaky_storage, flaky_store):
    session = flaky_storage.create_session("user-1")
    flaky_storage.add_message("kept")
    flaky_store.fail = True

    with pytest.raises(StorageError):
        flaky_storage.add_message("lost", topics=["career"])

    assert [m.content for m in flaky_storage.get_session_messages(session.id)] == ["kept"]
    restored = flaky_storage.get_session(session.id)
    assert restored.message_count == 1
    assert restored.tags == []


@pytest.mark.unit
def test_failed_create_session_rolls_back(flaky_storage, flaky_store):
    flaky_store.fail = True

    with pytest.raises(StorageError):
        flaky_storage.create_session("user-1")

    assert flaky_storage.get_user_sessions("user-1") == []
    assert flaky_storage.get_current_session_id() is None


# ===========================
# Clearing Tests
# ===========================

@pytest.mark.unit
def test_clear_user_data(storage):
    storage.create_session("user-2")
    storage.add_message("keep me")
    storage.create_session("user-1")
    storage.add_message("remove me")

    assert storage.clear_user_data("user-1") == 1

    assert storage.get_user_sessions("user-1") == []
    assert storage.get_current_session_id() is None
    assert len(storage.get_user_sessions("user-2")) == 1
    assert storage.clear_user_data("user-1") == 0


@pytest.mark.unit
def test_clear_all_data(storage, memory_store):
    storage.create_session("user-1")
    storage.add_message("bye")

    storage.clear_all_data()

    assert storage.get_user_sessions("user-1") == []
    assert storage.get_current_session_id() is None
    assert memory_store.load() is None

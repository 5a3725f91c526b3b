"""
Pytest configuration and shared fixtures for testing.
Provides settings, a controllable clock, seeded randomness and in-memory
components for the coaching core.
"""
import os
import random
from datetime import datetime, timedelta, timezone

import pytest

# Set testing environment before importing the package
os.environ["COACH_ENVIRONMENT"] = "testing"
os.environ["COACH_STORAGE_BACKEND"] = "memory"

from coach_core.analysis import KeywordSentimentAnalyzer
from coach_core.config import CoachSettings
from coach_core.conversation import ConversationStorage, InMemoryConversationStore
from coach_core.escalation import EscalationEventBus, EscalationManager, MentorDirectory
from coach_core.services import CoachingService


class FakeClock:
    """Deterministic clock; advance() moves time forward."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


# ===========================
# Settings Fixtures
# ===========================

@pytest.fixture
def test_settings() -> CoachSettings:
    """Settings for the testing environment."""
    return CoachSettings(
        environment="testing",
        debug=True,
        storage_backend="memory",
        mentor_max_load=90,
        mentor_load_step=10
    )


# ===========================
# Determinism Fixtures
# ===========================

@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 3, 4, 9, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def rng() -> random.Random:
    return random.Random(42)


# ===========================
# Component Fixtures
# ===========================

@pytest.fixture
def analyzer(rng) -> KeywordSentimentAnalyzer:
    return KeywordSentimentAnalyzer(rng=rng)


@pytest.fixture
def memory_store() -> InMemoryConversationStore:
    return InMemoryConversationStore()


@pytest.fixture
def storage(memory_store, test_settings, clock) -> ConversationStorage:
    return ConversationStorage(store=memory_store, settings=test_settings, clock=clock)


@pytest.fixture
def event_bus() -> EscalationEventBus:
    return EscalationEventBus()


@pytest.fixture
def mentor_directory() -> MentorDirectory:
    """Directory seeded with the default mentors."""
    return MentorDirectory()


@pytest.fixture
def escalation_manager(mentor_directory, event_bus, test_settings, clock) -> EscalationManager:
    return EscalationManager(
        mentors=mentor_directory,
        event_bus=event_bus,
        settings=test_settings,
        clock=clock
    )


@pytest.fixture
def coaching_service(storage, escalation_manager, analyzer) -> CoachingService:
    return CoachingService(
        storage=storage,
        escalations=escalation_manager,
        classifier=analyzer
    )

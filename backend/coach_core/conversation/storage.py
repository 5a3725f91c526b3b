"""
Conversation storage service.
Owns sessions and their append-only message lists and persists the whole
state through an injected ConversationStore.

Version: 1.0.0
"""
import logging
import threading
import uuid
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Sequence, Union

from pydantic import ValidationError

from ..config import CoachSettings, get_settings
from ..exceptions import NoActiveSession, SessionNotFound, StorageError
from ..models.base import utc_now
from ..models.conversation import (
    ConversationDocument,
    ConversationExport,
    ConversationInsights,
    ConversationMessage,
    ConversationSession,
    ConversationStats,
    ExportedSession,
    MessageType
)
from ..models.sentiment import Sentiment
from ..analysis.text import dedupe
from . import analytics
from .in_memory_store import InMemoryConversationStore
from .store import ConversationStore

logger = logging.getLogger(__name__)


def default_session_title(created_at: datetime) -> str:
    """Title given to sessions created without one."""
    return f"Conversation {created_at.date().isoformat()}"


class ConversationStorage:
    """
    Session and message repository for the coach.

    Features:
    - Explicit session ids on every call, with the most recently created or
      selected session as an optional default for add_message()
    - Automatic session titles, tag merging and summaries
    - Per-user statistics and coaching insights
    - Export/import bundles validated before anything is changed
    - Every mutation is persisted; a failed write rolls memory back and
      raises StorageError
    """

    def __init__(
        self,
        store: Optional[ConversationStore] = None,
        settings: Optional[CoachSettings] = None,
        clock: Callable[[], datetime] = utc_now
    ):
        """
        Initialize storage and load any persisted document.

        Args:
            store: Persistence port (in-memory if not provided)
            settings: Coaching settings (global settings if not provided)
            clock: Source of timestamps

        Raises:
            StorageError: If the persisted document cannot be read or is invalid
        """
        self.store = store if store is not None else InMemoryConversationStore()
        self.settings = settings or get_settings()
        self.clock = clock

        self._sessions: Dict[str, ConversationSession] = {}
        self._conversations: Dict[str, List[ConversationMessage]] = {}
        self._current_session_id: Optional[str] = None
        self._lock = threading.RLock()

        self._load()

        logger.info(
            f"ConversationStorage initialized with {len(self._sessions)} sessions "
            f"({type(self.store).__name__})"
        )

    # ===========================
    # Persistence
    # ===========================

    def _load(self) -> None:
        raw = self.store.load()
        if raw is None:
            return

        try:
            document = ConversationDocument.model_validate(raw)
        except ValidationError as e:
            logger.error(f"Persisted conversation document is invalid: {e}")
            raise StorageError(f"Persisted conversation document is invalid: {e}") from e

        self._sessions = dict(document.sessions)
        self._conversations = {sid: list(messages) for sid, messages in document.conversations.items()}
        self._current_session_id = document.current_session_id

    def _document(self) -> Dict[str, Any]:
        return ConversationDocument.model_construct(
            conversations=self._conversations,
            sessions=self._sessions,
            current_session_id=self._current_session_id
        ).to_dict()

    def _snapshot(self):
        return (
            {sid: session.model_copy() for sid, session in self._sessions.items()},
            {sid: list(messages) for sid, messages in self._conversations.items()},
            self._current_session_id
        )

    @contextmanager
    def _transaction(self) -> Iterator[None]:
        """Apply a mutation and persist it; restore the prior state on any failure."""
        with self._lock:
            snapshot = self._snapshot()
            try:
                yield
                self.store.save(self._document())
            except Exception:
                self._sessions, self._conversations, self._current_session_id = snapshot
                raise

    # ===========================
    # Sessions
    # ===========================

    def create_session(self, user_id: str, title: Optional[str] = None) -> ConversationSession:
        """
        Create a session and make it the default for add_message().

        Args:
            user_id: Owner of the session
            title: Session title (defaults to 'Conversation <date>')

        Returns:
            Created session
        """
        now = self.clock()
        session = ConversationSession(
            id=f"session-{uuid.uuid4().hex}",
            user_id=user_id,
            title=title or default_session_title(now),
            created_at=now,
            updated_at=now,
            last_message_at=now
        )

        with self._transaction():
            self._sessions[session.id] = session
            self._conversations[session.id] = []
            self._current_session_id = session.id

        logger.info(f"Created conversation session {session.id} for user {user_id}")
        return session.model_copy()

    def get_current_session_id(self) -> Optional[str]:
        with self._lock:
            return self._current_session_id

    def set_current_session(self, session_id: str) -> bool:
        """
        Select the default session for add_message().

        Returns:
            False if the session does not exist
        """
        with self._lock:
            if session_id not in self._sessions:
                return False
            if self._current_session_id == session_id:
                return True

            with self._transaction():
                self._current_session_id = session_id
            return True

    def get_session(self, session_id: str) -> Optional[ConversationSession]:
        with self._lock:
            session = self._sessions.get(session_id)
            return session.model_copy(deep=True) if session else None

    def get_user_sessions(self, user_id: str) -> List[ConversationSession]:
        """Sessions of a user, most recently active first."""
        with self._lock:
            sessions = [
                session.model_copy(deep=True)
                for session in self._sessions.values()
                if session.user_id == user_id
            ]

        sessions.sort(key=lambda s: s.last_message_at, reverse=True)
        return sessions

    def update_session_title(self, session_id: str, title: str) -> bool:
        with self._lock:
            session = self._sessions.get(session_id)
            if not session:
                return False

            with self._transaction():
                session.title = title
                session.updated_at = self.clock()
            return True

    def add_session_tags(self, session_id: str, tags: Sequence[str]) -> bool:
        """Merge tags into a session, keeping existing order and dropping duplicates."""
        with self._lock:
            session = self._sessions.get(session_id)
            if not session:
                return False

            with self._transaction():
                session.tags = dedupe([*session.tags, *tags])
                session.updated_at = self.clock()
            return True

    # ===========================
    # Messages
    # ===========================

    def add_message(
        self,
        content: str,
        type: Union[MessageType, str] = MessageType.USER,
        session_id: Optional[str] = None,
        sentiment: Optional[Union[Sentiment, str]] = None,
        topics: Optional[Sequence[str]] = None,
        metadata: Optional[Mapping[str, Any]] = None
    ) -> ConversationMessage:
        """
        Append a message to a session.

        Args:
            content: Message text
            type: Message author ('user' or 'coach')
            session_id: Target session (current session if omitted)
            sentiment: Sentiment label of the message
            topics: Topic labels; merged into the session's tags
            metadata: Arbitrary JSON-compatible data

        Returns:
            Stored message

        Raises:
            NoActiveSession: If no session id is given and no current session exists
            SessionNotFound: If the given session id does not exist
        """
        with self._lock:
            target_id = session_id or self._current_session_id
            if target_id is None:
                raise NoActiveSession("No active conversation session; call create_session() first")

            session = self._sessions.get(target_id)
            if session is None:
                if session_id is None:
                    raise NoActiveSession(f"Current session {target_id} no longer exists")
                raise SessionNotFound(target_id)

            now = self.clock()
            message = ConversationMessage(
                id=f"msg-{uuid.uuid4().hex}",
                user_id=session.user_id,
                type=type,
                content=content,
                timestamp=now,
                sentiment=sentiment,
                topics=list(topics) if topics is not None else None,
                metadata=dict(metadata) if metadata is not None else None
            )

            with self._transaction():
                messages = self._conversations[target_id]
                is_first = not messages
                messages.append(message)

                session.message_count = len(messages)
                session.last_message_at = now
                session.updated_at = now

                if is_first and session.title == default_session_title(session.created_at):
                    title = analytics.generate_session_title(content)
                    if title:
                        session.title = title

                if message.topics:
                    session.tags = dedupe([*session.tags, *message.topics])

        logger.debug(f"Added {message.type.value} message {message.id} to session {target_id}")
        return message

    def get_current_session_messages(self) -> List[ConversationMessage]:
        with self._lock:
            if self._current_session_id is None:
                return []
            return list(self._conversations.get(self._current_session_id, []))

    def get_session_messages(self, session_id: str) -> List[ConversationMessage]:
        with self._lock:
            return list(self._conversations.get(session_id, []))

    def _user_messages(self, user_id: str) -> List[ConversationMessage]:
        return [
            message
            for sid, session in self._sessions.items()
            if session.user_id == user_id
            for message in self._conversations.get(sid, [])
        ]

    def get_recent_messages(self, user_id: str, limit: Optional[int] = None) -> List[ConversationMessage]:
        """
        Most recent messages of a user across all sessions, newest first.

        Args:
            user_id: User identifier
            limit: Maximum number of messages (settings.recent_messages_limit if omitted)
        """
        if limit is None:
            limit = self.settings.recent_messages_limit

        with self._lock:
            messages = self._user_messages(user_id)

        messages.sort(key=lambda m: m.timestamp, reverse=True)
        return messages[:max(limit, 0)]

    def search_messages(self, user_id: str, query: str) -> List[ConversationMessage]:
        """Case-insensitive substring search over message content and topics."""
        needle = query.lower()

        with self._lock:
            messages = self._user_messages(user_id)

        return [
            message for message in messages
            if needle in message.content.lower()
            or any(needle in topic.lower() for topic in (message.topics or []))
        ]

    # ===========================
    # Summaries and Analytics
    # ===========================

    def generate_session_summary(self, session_id: str) -> str:
        """Summary sentence for a session ('' if it has no messages)."""
        return analytics.summarize_session(self.get_session_messages(session_id))

    def auto_save_session_summary(self, session_id: str) -> Optional[str]:
        """
        Generate a session summary and store it on the session.

        Returns:
            The summary, or None if the session is unknown or empty
        """
        with self._lock:
            session = self._sessions.get(session_id)
            if not session:
                return None

            summary = self.generate_session_summary(session_id)
            if not summary:
                return None

            with self._transaction():
                session.summary = summary
                session.updated_at = self.clock()

        return summary

    def get_conversation_stats(self, user_id: str) -> ConversationStats:
        with self._lock:
            sessions = [s for s in self._sessions.values() if s.user_id == user_id]
            messages = self._user_messages(user_id)

        return analytics.compute_stats(sessions, messages)

    def get_conversation_insights(self, user_id: str) -> ConversationInsights:
        """Insights from overall stats and the user's most recent messages."""
        stats = self.get_conversation_stats(user_id)
        recent = self.get_recent_messages(user_id, self.settings.insights_window)
        return analytics.build_insights(stats, recent)

    # ===========================
    # Export / Import
    # ===========================

    def export_conversation_data(self, user_id: str) -> ConversationExport:
        """
        Bundle every session of a user with its messages and stats.

        Use .to_dict() on the result for the JSON form.
        """
        with self._lock:
            entries = [
                ExportedSession(
                    session=session.model_copy(deep=True),
                    messages=list(self._conversations.get(sid, []))
                )
                for sid, session in self._sessions.items()
                if session.user_id == user_id
            ]
            stats = self.get_conversation_stats(user_id)

        return ConversationExport(
            user_id=user_id,
            export_date=self.clock(),
            sessions=entries,
            stats=stats
        )

    def import_conversation_data(self, data: Union[ConversationExport, Mapping[str, Any]]) -> bool:
        """
        Import an export bundle.

        The bundle is validated in full before anything changes. Imported
        sessions replace existing sessions with the same id; the current
        session is left untouched.

        Returns:
            False if the bundle is malformed or conflicts with existing data

        Raises:
            StorageError: If the imported state cannot be persisted
        """
        try:
            bundle = (
                data if isinstance(data, ConversationExport)
                else ConversationExport.model_validate(data)
            )
        except ValidationError as e:
            logger.warning(f"Rejected conversation import: {e.error_count()} validation errors")
            return False

        with self._lock:
            for entry in bundle.sessions:
                existing = self._sessions.get(entry.session.id)
                if existing and existing.user_id != entry.session.user_id:
                    logger.warning(
                        f"Rejected conversation import: session {entry.session.id} "
                        f"belongs to another user"
                    )
                    return False

            with self._transaction():
                for entry in bundle.sessions:
                    session = entry.session.model_copy(
                        deep=True,
                        update={"message_count": len(entry.messages)}
                    )
                    self._sessions[session.id] = session
                    self._conversations[session.id] = list(entry.messages)

        logger.info(f"Imported {len(bundle.sessions)} sessions for user {bundle.user_id}")
        return True

    # ===========================
    # Clearing
    # ===========================

    def clear_user_data(self, user_id: str) -> int:
        """
        Delete every session of a user.

        Returns:
            Number of sessions removed
        """
        with self._lock:
            doomed = [sid for sid, s in self._sessions.items() if s.user_id == user_id]
            if not doomed:
                return 0

            with self._transaction():
                if self._current_session_id in doomed:
                    self._current_session_id = None
                for sid in doomed:
                    del self._sessions[sid]
                    self._conversations.pop(sid, None)

        logger.info(f"Cleared {len(doomed)} sessions for user {user_id}")
        return len(doomed)

    def clear_all_data(self) -> None:
        """Delete every session and remove the persisted document."""
        with self._lock:
            snapshot = self._snapshot()
            self._sessions = {}
            self._conversations = {}
            self._current_session_id = None
            try:
                self.store.clear()
            except Exception:
                self._sessions, self._conversations, self._current_session_id = snapshot
                raise

        logger.info("Cleared all conversation data")


__all__ = ['ConversationStorage', 'default_session_title']

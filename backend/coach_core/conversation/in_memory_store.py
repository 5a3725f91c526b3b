"""
In-memory conversation store implementation.
Suitable for tests and single-process use.
"""
import json
import logging
import threading
from typing import Any, Dict, Optional

from ..exceptions import StorageError
from .store import ConversationStore

logger = logging.getLogger(__name__)


class InMemoryConversationStore(ConversationStore):
    """
    In-memory implementation of ConversationStore.
    
    The document is kept as serialized JSON so that callers get the same
    encoding guarantees (and failures) as with the persistent stores.
    """
    
    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        """
        Initialize in-memory store.
        
        Args:
            initial: Document to start with (optional)
        """
        self._payload: Optional[str] = None
        self._lock = threading.Lock()
        self.save_count = 0
        
        if initial is not None:
            self._payload = self._encode(initial)
        
        logger.info("InMemoryConversationStore initialized")
    
    @staticmethod
    def _encode(document: Dict[str, Any]) -> str:
        try:
            return json.dumps(document)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Conversation document is not JSON serializable: {e}") from e
    
    def load(self) -> Optional[Dict[str, Any]]:
        with self._lock:
            if self._payload is None:
                return None
            return json.loads(self._payload)
    
    def save(self, document: Dict[str, Any]) -> None:
        payload = self._encode(document)
        with self._lock:
            self._payload = payload
            self.save_count += 1
    
    def clear(self) -> None:
        with self._lock:
            self._payload = None


__all__ = ['InMemoryConversationStore']

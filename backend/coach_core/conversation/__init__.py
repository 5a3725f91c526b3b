"""
Conversation package.
Session/message storage, persistence ports and conversation analytics.

Version: 1.0.0
"""
from typing import Optional

from ..config import CoachSettings, get_settings
from .store import ConversationStore
from .in_memory_store import InMemoryConversationStore
from .file_store import JsonFileConversationStore
from .redis_store import RedisConversationStore
from .storage import ConversationStorage, default_session_title
from . import analytics


def create_conversation_store(
    store_type: str = "memory",
    **kwargs
) -> ConversationStore:
    """
    Factory function to create a conversation store.
    
    Args:
        store_type: Type of store ('memory', 'file' or 'redis')
        **kwargs: Store-specific configuration
        
    Returns:
        ConversationStore instance
        
    Examples:
        # In-memory store
        store = create_conversation_store('memory')
        
        # JSON file store
        store = create_conversation_store('file', path='data/conversations.json')
        
        # Redis store
        store = create_conversation_store(
            'redis',
            redis_url='redis://localhost:6379/0',
            key='conversation-storage'
        )
    """
    if store_type in ("memory", "in_memory"):
        return InMemoryConversationStore(**kwargs)
    
    elif store_type == "file":
        return JsonFileConversationStore(**kwargs)
    
    elif store_type == "redis":
        return RedisConversationStore(**kwargs)
    
    else:
        raise ValueError(f"Unknown store type: {store_type}")


def create_conversation_storage(settings: Optional[CoachSettings] = None) -> ConversationStorage:
    """Build ConversationStorage with the store selected by settings."""
    if settings is None:
        settings = get_settings()
    
    store = create_conversation_store(settings.storage_backend, **settings.get_store_config())
    return ConversationStorage(store=store, settings=settings)


__all__ = [
    'ConversationStore',
    'InMemoryConversationStore',
    'JsonFileConversationStore',
    'RedisConversationStore',
    'ConversationStorage',
    'default_session_title',
    'create_conversation_store',
    'create_conversation_storage',
    'analytics'
]

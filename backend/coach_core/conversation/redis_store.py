"""
Redis-backed conversation store implementation.
Suitable for deployments where several processes share conversation state.
"""
import json
import logging
from typing import Any, Dict, Optional

import redis
from redis.exceptions import RedisError

from ..exceptions import StorageError
from .store import ConversationStore

logger = logging.getLogger(__name__)


class RedisConversationStore(ConversationStore):
    """
    Redis-backed implementation of ConversationStore.
    
    The document is stored as a JSON string under one key built from
    key_prefix and key. Redis failures surface as StorageError.
    """
    
    def __init__(
        self,
        redis_url: str = "redis://localhost:6379/0",
        key: str = "conversation-storage",
        key_prefix: str = "coach:",
        client: Optional[redis.Redis] = None
    ):
        """
        Initialize Redis store.
        
        Args:
            redis_url: Redis connection URL
            key: Document key
            key_prefix: Prefix for the Redis key
            client: Pre-built client (a connection is created from redis_url otherwise)
        """
        self.redis_url = redis_url
        self.redis_key = f"{key_prefix}{key}"
        self.client = client if client is not None else redis.Redis.from_url(
            redis_url,
            decode_responses=True
        )
        
        logger.info(f"RedisConversationStore initialized: key={self.redis_key}")
    
    def load(self) -> Optional[Dict[str, Any]]:
        try:
            raw = self.client.get(self.redis_key)
        except RedisError as e:
            logger.error(f"Redis error loading {self.redis_key}: {e}")
            raise StorageError(f"Cannot read conversation document from Redis: {e}") from e
        
        if raw is None:
            return None
        
        if isinstance(raw, bytes):
            raw = raw.decode('utf-8')
        
        try:
            document = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error(f"Corrupt conversation document at {self.redis_key}: {e}")
            raise StorageError(f"Conversation document at {self.redis_key} is not valid JSON") from e
        
        if not isinstance(document, dict):
            raise StorageError(f"Conversation document at {self.redis_key} is not a JSON object")
        
        return document
    
    def save(self, document: Dict[str, Any]) -> None:
        try:
            payload = json.dumps(document)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Conversation document is not JSON serializable: {e}") from e
        
        try:
            self.client.set(self.redis_key, payload)
        except RedisError as e:
            logger.error(f"Redis error saving {self.redis_key}: {e}")
            raise StorageError(f"Cannot write conversation document to Redis: {e}") from e
    
    def clear(self) -> None:
        try:
            self.client.delete(self.redis_key)
        except RedisError as e:
            logger.error(f"Redis error clearing {self.redis_key}: {e}")
            raise StorageError(f"Cannot clear conversation document in Redis: {e}") from e
    
    def ping(self) -> bool:
        """Check the Redis connection."""
        try:
            return bool(self.client.ping())
        except RedisError as e:
            logger.warning(f"Redis ping failed: {e}")
            return False


__all__ = ['RedisConversationStore']

"""
JSON file conversation store implementation.
Persists the conversation document to a single file on local disk.
"""
import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..exceptions import StorageError
from .store import ConversationStore

logger = logging.getLogger(__name__)


class JsonFileConversationStore(ConversationStore):
    """
    File-backed implementation of ConversationStore.
    
    Features:
    - Writes go to a temporary file in the same directory and are moved
      into place with os.replace(), so readers never see a partial document
    - Parent directories are created on first save
    - A missing or empty file loads as None
    """
    
    def __init__(self, path: Union[str, Path], indent: Optional[int] = 2):
        """
        Initialize file store.
        
        Args:
            path: Location of the JSON document
            indent: JSON indentation (None for compact output)
        """
        self.path = Path(path)
        self.indent = indent
        self._lock = threading.Lock()
        
        logger.info(f"JsonFileConversationStore initialized: path={self.path}")
    
    def load(self) -> Optional[Dict[str, Any]]:
        with self._lock:
            if not self.path.exists():
                return None
            
            try:
                with open(self.path, 'r', encoding='utf-8') as f:
                    raw = f.read()
            except OSError as e:
                logger.error(f"Failed to read {self.path}: {e}")
                raise StorageError(f"Cannot read conversation file {self.path}: {e}") from e
            
            if not raw.strip():
                return None
            
            try:
                document = json.loads(raw)
            except json.JSONDecodeError as e:
                logger.error(f"Corrupt conversation file {self.path}: {e}")
                raise StorageError(f"Conversation file {self.path} is not valid JSON: {e}") from e
            
            if not isinstance(document, dict):
                raise StorageError(f"Conversation file {self.path} does not hold a JSON object")
            
            return document
    
    def save(self, document: Dict[str, Any]) -> None:
        try:
            payload = json.dumps(document, indent=self.indent)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Conversation document is not JSON serializable: {e}") from e
        
        with self._lock:
            tmp_name = None
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                
                fd, tmp_name = tempfile.mkstemp(
                    dir=self.path.parent,
                    prefix=f".{self.path.name}.",
                    suffix=".tmp"
                )
                with os.fdopen(fd, 'w', encoding='utf-8') as f:
                    f.write(payload)
                
                os.replace(tmp_name, self.path)
                tmp_name = None
                
            except OSError as e:
                logger.error(f"Failed to write {self.path}: {e}")
                raise StorageError(f"Cannot write conversation file {self.path}: {e}") from e
            
            finally:
                if tmp_name is not None and os.path.exists(tmp_name):
                    os.unlink(tmp_name)
    
    def clear(self) -> None:
        with self._lock:
            try:
                self.path.unlink(missing_ok=True)
            except OSError as e:
                raise StorageError(f"Cannot remove conversation file {self.path}: {e}") from e


__all__ = ['JsonFileConversationStore']

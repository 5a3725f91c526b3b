"""
Abstract conversation store interface.
Defines the contract for conversation document persistence.

Version: 1.0.0
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class ConversationStore(ABC):
    """
    Abstract base class for conversation persistence.
    
    A store holds one JSON-compatible document (sessions, messages and the
    current session pointer) under a single key. Implementations must:
    - Return None from load() when nothing has been saved yet
    - Replace the whole document on save()
    - Raise StorageError when the backend cannot be read or written
    """
    
    @abstractmethod
    def load(self) -> Optional[Dict[str, Any]]:
        """
        Load the stored document.
        
        Returns:
            Document dictionary or None if nothing is stored
            
        Raises:
            StorageError: If the document cannot be read or decoded
        """
        pass
    
    @abstractmethod
    def save(self, document: Dict[str, Any]) -> None:
        """
        Replace the stored document.
        
        Args:
            document: JSON-compatible document dictionary
            
        Raises:
            StorageError: If the document cannot be written
        """
        pass
    
    @abstractmethod
    def clear(self) -> None:
        """
        Remove the stored document.
        
        Raises:
            StorageError: If the backend cannot be reached
        """
        pass


__all__ = ['ConversationStore']

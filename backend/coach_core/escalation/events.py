"""
Synchronous event bus for escalation updates.

Every subscriber is called in its own try/except: a failing subscriber is
logged and skipped, and delivery continues with the next one.
"""
import logging
import threading
from typing import Callable, List

from ..models.escalation import EscalationRequest

logger = logging.getLogger(__name__)

EscalationCallback = Callable[[EscalationRequest], None]


class EscalationEventBus:
    """
    In-process broadcast of escalation request changes.
    
    Subscribers receive an independent copy of the request on every create,
    assignment and status update.
    """
    
    def __init__(self):
        self._subscribers: List[EscalationCallback] = []
        self._lock = threading.Lock()
    
    def subscribe(self, callback: EscalationCallback) -> None:
        """Register a callback (duplicates are ignored)."""
        with self._lock:
            if callback not in self._subscribers:
                self._subscribers.append(callback)
    
    def unsubscribe(self, callback: EscalationCallback) -> bool:
        """
        Remove a callback.
        
        Returns:
            True if the callback was registered
        """
        with self._lock:
            if callback in self._subscribers:
                self._subscribers.remove(callback)
                return True
            return False
    
    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)
    
    def publish(self, request: EscalationRequest) -> int:
        """
        Deliver a request update to every subscriber.
        
        Args:
            request: Updated request
            
        Returns:
            Number of subscribers that handled the update without error
        """
        with self._lock:
            subscribers = list(self._subscribers)
        
        delivered = 0
        for callback in subscribers:
            try:
                callback(request.model_copy(deep=True))
                delivered += 1
            except Exception:
                logger.exception(
                    f"Escalation subscriber {getattr(callback, '__name__', callback)!r} "
                    f"failed for request {request.id}"
                )
        
        return delivered


__all__ = ['EscalationEventBus', 'EscalationCallback']

"""
In-memory mentor directory.

Stands in for an external mentor registry. Only load counters change at
runtime; everything else is fixture data.
"""
import logging
import threading
from copy import deepcopy
from typing import Dict, Iterable, List, Optional

from ..models.escalation import Mentor, MentorAvailability

logger = logging.getLogger(__name__)

WEEKDAYS = ['Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday']


def default_mentors() -> List[Mentor]:
    """Seed mentors used when no directory is supplied."""
    return [
        Mentor(
            id='mentor-1',
            name='Sarah Johnson',
            email='sarah.johnson@example.com',
            expertise=['Web Development', 'Career Guidance', 'JavaScript', 'React'],
            availability=MentorAvailability(
                timezone='EST',
                working_hours='9 AM - 5 PM',
                days_available=list(WEEKDAYS)
            ),
            rating=4.8,
            response_time=30,
            is_online=True,
            current_load=60
        ),
        Mentor(
            id='mentor-2',
            name='Michael Chen',
            email='michael.chen@example.com',
            expertise=['Data Science', 'Python', 'Machine Learning', 'Career Transition'],
            availability=MentorAvailability(
                timezone='PST',
                working_hours='10 AM - 6 PM',
                days_available=list(WEEKDAYS)
            ),
            rating=4.9,
            response_time=45,
            is_online=True,
            current_load=40
        ),
        Mentor(
            id='mentor-3',
            name='Emily Rodriguez',
            email='emily.rodriguez@example.com',
            expertise=['UI/UX Design', 'Career Coaching', 'Portfolio Review', 'Freelancing'],
            availability=MentorAvailability(
                timezone='CST',
                working_hours='8 AM - 4 PM',
                days_available=list(WEEKDAYS)
            ),
            rating=4.7,
            response_time=60,
            is_online=False,
            current_load=80
        )
    ]


class MentorDirectory:
    """
    Thread-safe mentor registry.

    Returns deep copies so callers cannot change load counters behind the
    directory's back.
    """

    def __init__(self, mentors: Optional[Iterable[Mentor]] = None):
        """
        Initialize directory.

        Args:
            mentors: Mentors to register (defaults to the seed fixture)
        """
        self._mentors: Dict[str, Mentor] = {}
        self._lock = threading.RLock()

        for mentor in (default_mentors() if mentors is None else mentors):
            self.register(mentor)

        logger.info(f"MentorDirectory initialized with {len(self._mentors)} mentors")

    def register(self, mentor: Mentor) -> None:
        """Add or replace a mentor."""
        with self._lock:
            self._mentors[mentor.id] = deepcopy(mentor)

    def get(self, mentor_id: str) -> Optional[Mentor]:
        """Get a copy of a mentor, or None."""
        with self._lock:
            mentor = self._mentors.get(mentor_id)
            return deepcopy(mentor) if mentor else None

    def exists(self, mentor_id: str) -> bool:
        with self._lock:
            return mentor_id in self._mentors

    def list_all(self) -> List[Mentor]:
        """Copies of every registered mentor."""
        with self._lock:
            return [deepcopy(mentor) for mentor in self._mentors.values()]

    def set_online(self, mentor_id: str, is_online: bool) -> bool:
        """
        Update a mentor's presence.

        Returns:
            False if the mentor is unknown
        """
        with self._lock:
            mentor = self._mentors.get(mentor_id)
            if not mentor:
                return False
            mentor.is_online = is_online
            return True

    def adjust_load(self, mentor_id: str, delta: int) -> Optional[int]:
        """
        Change a mentor's load; the model clamps the result to [0, 100].

        Returns:
            New load, or None if the mentor is unknown
        """
        with self._lock:
            mentor = self._mentors.get(mentor_id)
            if not mentor:
                return None

            previous = mentor.current_load
            mentor.current_load = previous + delta

            logger.debug(f"Mentor {mentor_id} load {previous} -> {mentor.current_load}")
            return mentor.current_load


__all__ = ['MentorDirectory', 'default_mentors']

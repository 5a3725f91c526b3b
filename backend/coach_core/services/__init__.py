"""
Service layer combining analysis, escalation and conversation storage.
"""
from .coaching_service import CoachingService, CoachingTurn

__all__ = ['CoachingService', 'CoachingTurn']

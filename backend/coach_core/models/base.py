"""
Shared pydantic base for coaching core models.
"""
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


class CoachModel(BaseModel):
    """
    Base model serialized with camelCase keys.
    
    Fields are populated by either their python name or their alias, so
    documents written by older clients load unchanged.
    """
    
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True
    )
    
    @field_validator('*', mode='after')
    @classmethod
    def assume_utc(cls, v: Any) -> Any:
        """Naive datetimes are read as UTC so they compare with utc_now()."""
        if isinstance(v, datetime) and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v
    
    def to_dict(self) -> dict:
        """Dump to a JSON-compatible dictionary with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


__all__ = ['CoachModel', 'utc_now']

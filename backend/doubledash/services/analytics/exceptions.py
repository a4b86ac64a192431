"""
Analytics errors.
"""
from typing import Any, Optional


class DataError(ValueError):
    """An activity record cannot be placed on the calendar."""

    def __init__(self, message: str, activity_id: Optional[str] = None, value: Any = None):
        super().__init__(message)
        self.activity_id = activity_id
        self.value = value

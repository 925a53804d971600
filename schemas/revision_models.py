"""
Revision Pydantic Models

Request body for scheduling a revision by hand. Revisions created from a
problem or learning item with is_revision set do not go through this model.
"""

from datetime import date
from pydantic import BaseModel, Field
from typing import Literal


class RevisionItemCreate(BaseModel):
    """
    Example:
    {
        "item_id": 12,
        "item_type": "problem",
        "original_date": "2024-01-01",
        "next_revision_date": "2024-01-02"
    }
    """
    item_id: int = Field(gt=0)
    item_type: Literal['problem', 'learning']
    original_date: date
    next_revision_date: date
    revision_cycle: int = Field(default=1, ge=1)

"""
Learning Item Pydantic Models

Request bodies for courses, books, videos and other learning resources.
"""

import datetime as dt
from pydantic import BaseModel, Field, field_validator
from typing import Literal, Optional

LearningType = Literal['course', 'book', 'tutorial', 'article', 'video', 'podcast', 'workshop', 'other']
LearningStatus = Literal['not-started', 'in-progress', 'completed', 'paused']
LearningDifficulty = Literal['beginner', 'intermediate', 'advanced']


class LearningItemCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    type: LearningType
    category: str = Field(min_length=1, max_length=100)
    subtopic: Optional[str] = Field(default=None, max_length=100)
    time_spent: int = Field(default=0, ge=0, description="Minutes spent")
    progress: int = Field(default=0, ge=0, le=100, description="Completion percentage")
    status: LearningStatus = 'not-started'
    date: Optional[dt.date] = None
    link: Optional[str] = None
    resource_link: Optional[str] = None
    tags: Optional[str] = Field(default=None, description="Comma-separated tags")
    notes: Optional[str] = None
    platform: Optional[str] = Field(default=None, max_length=100)
    difficulty: Optional[LearningDifficulty] = None
    is_revision: bool = False


class LearningItemUpdate(BaseModel):
    """Partial update; only fields present in the request body are applied"""
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    type: Optional[LearningType] = None
    category: Optional[str] = Field(default=None, min_length=1, max_length=100)
    subtopic: Optional[str] = Field(default=None, max_length=100)
    time_spent: Optional[int] = Field(default=None, ge=0)
    progress: Optional[int] = Field(default=None, ge=0, le=100)
    status: Optional[LearningStatus] = None
    date: Optional[dt.date] = None
    link: Optional[str] = None
    resource_link: Optional[str] = None
    tags: Optional[str] = None
    notes: Optional[str] = None
    platform: Optional[str] = Field(default=None, max_length=100)
    difficulty: Optional[LearningDifficulty] = None
    is_revision: Optional[bool] = None

    @field_validator('title', 'type', 'category', 'time_spent', 'progress',
                     'status', 'date', 'is_revision', mode='before')
    @classmethod
    def reject_null(cls, value):
        # NOT NULL columns; omit the field to leave it unchanged
        if value is None:
            raise ValueError('may not be null')
        return value

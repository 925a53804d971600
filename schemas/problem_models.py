"""
Problem Pydantic Models

Request bodies for creating and updating coding problems.
Allowed values mirror the constants in models/problem.py.
"""

from datetime import datetime
from pydantic import BaseModel, Field, field_validator
from typing import List, Literal, Optional

Platform = Literal['LeetCode', 'HackerRank', 'Codeforces', 'AtCoder', 'CodeChef', 'other']
Difficulty = Literal['easy', 'medium', 'hard']
Outcome = Literal['solved', 'attempted', 'stuck', 'skipped', 'hints', 'failed']


class ProblemCreate(BaseModel):
    """
    New problem log entry.

    Example:
    {
        "title": "Two Sum",
        "platform": "LeetCode",
        "difficulty": "easy",
        "topic": "Arrays",
        "time_spent": 15,
        "outcome": "solved",
        "is_revision": true
    }
    """
    title: str = Field(min_length=1, max_length=200, description="Problem title")
    platform: Platform
    difficulty: Difficulty
    topic: str = Field(min_length=1, max_length=100)
    time_spent: int = Field(default=0, ge=0, le=1440, description="Minutes spent")
    outcome: Outcome
    date: Optional[datetime] = Field(default=None, description="When the problem was attempted (defaults to now)")
    link: Optional[str] = Field(default=None, max_length=500)
    code_link: Optional[str] = Field(default=None, max_length=500)
    tags: List[str] = Field(default_factory=list)
    is_revision: bool = Field(default=False, description="Schedule spaced-repetition revisions")


class ProblemUpdate(BaseModel):
    """Partial update; only fields present in the request body are applied"""
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    platform: Optional[Platform] = None
    difficulty: Optional[Difficulty] = None
    topic: Optional[str] = Field(default=None, min_length=1, max_length=100)
    time_spent: Optional[int] = Field(default=None, ge=0, le=1440)
    outcome: Optional[Outcome] = None
    date: Optional[datetime] = None
    link: Optional[str] = Field(default=None, max_length=500)
    code_link: Optional[str] = Field(default=None, max_length=500)
    tags: Optional[List[str]] = None
    is_revision: Optional[bool] = None

    @field_validator('title', 'platform', 'difficulty', 'topic', 'time_spent',
                     'outcome', 'date', 'is_revision', mode='before')
    @classmethod
    def reject_null(cls, value):
        # NOT NULL columns; omit the field to leave it unchanged
        if value is None:
            raise ValueError('may not be null')
        return value

"""
Roadmap Pydantic Models

Request bodies for roadmaps and their topics and subtopics.
"""

from pydantic import BaseModel, Field
from typing import Literal, Optional


class RoadmapCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    color: Optional[str] = Field(default=None, pattern=r'^#[0-9A-Fa-f]{6}$', description="Hex color, e.g. #3B82F6")
    is_public: bool = False


class TopicCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    order: int = Field(default=0, ge=0)


class SubtopicCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    order: int = Field(default=0, ge=0)
    difficulty: Literal['beginner', 'intermediate', 'advanced'] = 'beginner'
    estimated_time: Optional[int] = Field(default=None, ge=0, description="Estimated minutes")

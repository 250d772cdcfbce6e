"""
Pydantic models shared across the Link Shelf core.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field


class Category(str, Enum):
    """The fixed set of categories a saved link can belong to."""

    SEO = "SEO"
    PRODUCT = "Product"
    ANALYSIS = "Analysis"
    STRATEGY = "Strategy"
    LEADERSHIP = "Leadership"
    FRAMEWORKS = "Frameworks"
    BUSINESS = "Business"


#: Category used whenever classification cannot decide.
DEFAULT_CATEGORY = Category.BUSINESS


class NewLink(BaseModel):
    """A normalised record produced by the extraction pipeline, not yet stored."""

    url: str
    title: str = "Untitled"
    summary: str = ""
    content: str = ""
    category: Category = DEFAULT_CATEGORY
    tags: list[str] = Field(min_length=1)
    source: str = "Unknown"


class SavedLink(NewLink):
    """A persisted link. ``id`` and ``created_at`` are assigned by the store."""

    id: str
    created_at: datetime


class ChatMessage(BaseModel):
    """One turn of an in-memory chat transcript."""

    role: Literal["user", "assistant"]
    content: str
    sources: list[int] = Field(default_factory=list)


class ChatReply(BaseModel):
    """Structured output expected from the grounded chat call."""

    answer: str
    sources: list[int] = Field(default_factory=list)


class CategoryChoice(BaseModel):
    """Structured output expected from the classification call."""

    category: Category

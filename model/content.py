# model/content.py
from typing import List, Optional
from pydantic import BaseModel, Field
from util.types import AspectRatio, FileType


class Record(BaseModel):
    id: str
    created_at: Optional[str] = None


class Category(Record):
    name: str
    slug: str
    aspect_ratio: AspectRatio = "16:9"
    is_hidden: bool = False
    order_index: int = 0


class Tag(Record):
    name: str
    slug: str
    color: str = "#14b8a6"
    order_index: int = 0


class PortfolioItem(Record):
    file_url: str
    file_type: FileType
    category_id: str
    order_index: int = 0
    is_starred: bool = False
    # Joined at read time, never persisted.
    category: Optional[Category] = None
    tags: List[Tag] = Field(default_factory=list)


class PortfolioItemTag(Record):
    portfolio_item_id: str
    tag_id: str


class TagPreset(Record):
    preset_name: str
    tag_ids: List[str] = Field(default_factory=list)


class ABTest(Record):
    video_title: str
    version_a_url: str
    version_b_url: str
    order_index: int = 0


class Achievement(Record):
    number: int
    suffix: str = ""
    label: str
    icon: str = ""
    order_index: int = 0


class Review(Record):
    reviewer_name: str
    reviewer_text: str
    order_index: int = 0


class FAQ(Record):
    question: str
    answer: str
    order_index: int = 0


class ProgressTracker(Record):
    thumbnails_in_progress: int = Field(ge=0)
    updated_at: Optional[str] = None


class PrivateFormSubmission(Record):
    name: str
    email: str
    message: str

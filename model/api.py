# model/api.py
from typing import Dict, List, Optional
from pydantic import BaseModel, Field
from model.content import Achievement, Category, PortfolioItem, Tag
from util.enums import Severity
from util.types import AspectRatio


# ---------------- Auth ----------------


class LoginRequest(BaseModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class LoginResponse(BaseModel):
    token: str
    email: str
    expiresIn: int


class SessionResponse(BaseModel):
    authenticated: bool
    email: Optional[str] = None


# ---------------- Admin payloads ----------------


class CategoryPayload(BaseModel):
    name: str
    aspect_ratio: AspectRatio = "16:9"
    is_hidden: bool = False


class TagPayload(BaseModel):
    name: str
    color: str = "#14b8a6"


class TagPresetPayload(BaseModel):
    preset_name: str
    tag_ids: List[str] = Field(default_factory=list)


class AchievementPayload(BaseModel):
    number: int = Field(ge=0)
    suffix: str = ""
    label: str
    icon: str = ""


class ReviewPayload(BaseModel):
    reviewer_name: str
    reviewer_text: str


class FAQPayload(BaseModel):
    question: str
    answer: str


class ReorderRequest(BaseModel):
    movedId: str
    targetId: str


class OrderEntry(BaseModel):
    id: str
    orderIndex: int


class ReorderResponse(BaseModel):
    items: List[OrderEntry]


class StarRequest(BaseModel):
    # Flow: omitted -> flip the current state.
    isStarred: Optional[bool] = None


class StarResponse(BaseModel):
    item: PortfolioItem
    starredCount: int


class ProgressRequest(BaseModel):
    thumbnailsInProgress: int = Field(ge=0)


class AppliedPresetResponse(BaseModel):
    tagIds: List[str]


# ---------------- Public views ----------------


class GalleryEntry(BaseModel):
    item: PortfolioItem
    canStar: bool


class GalleryResponse(BaseModel):
    items: List[GalleryEntry]
    categories: List[Category]
    starredCounts: Dict[str, int]
    message: Optional[str] = None


class NeighborsResponse(BaseModel):
    index: int
    total: int
    previousId: Optional[str] = None
    nextId: Optional[str] = None


class TimeEstimateResponse(BaseModel):
    thumbnailsInProgress: int
    timeLabel: str
    severity: Severity
    status: str
    description: str
    updatedAt: Optional[str] = None
    lastUpdated: str


class AchievementView(BaseModel):
    achievement: Achievement
    isMillionViews: bool
    displayValue: str


class PrivateAccessRequest(BaseModel):
    password: str


class PrivateAccessResponse(BaseModel):
    ok: bool


class PrivateSubmissionRequest(BaseModel):
    name: str = ""
    email: str = ""
    message: str = ""


# ---------------- Analytics ----------------


class TopItem(BaseModel):
    item: Optional[PortfolioItem] = None
    itemId: str
    clicks: int


class AnalyticsSummary(BaseModel):
    totalVisits: int
    todayVisits: int
    totalClicks: int
    topItems: List[TopItem]


class DashboardCounts(BaseModel):
    portfolioItems: int
    abTests: int
    achievements: int
    reviews: int
    faqs: int
    categories: int


class TagSuggestionsResponse(BaseModel):
    tags: List[Tag]

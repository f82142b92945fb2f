# core/entities.py
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar
from util.enums import Severity

T = TypeVar("T")


@dataclass(frozen=True)
class ScoredItem(Generic[T]):
    item: T
    similarity: float  # 0..1


@dataclass(frozen=True)
class OrderedEntity:
    """
    Position of one record inside a managed collection.
    order_index is a sort key only; id is the identity.
    """

    id: str
    order_index: int


@dataclass(frozen=True)
class DeliveryTier:
    time_label: str
    severity: Severity
    status: str
    description: str


@dataclass(frozen=True)
class MediaUpload:
    data: bytes
    filename: Optional[str]
    content_type: str

    @property
    def file_type(self) -> str:
        return "video" if (self.content_type or "").startswith("video/") else "image"


@dataclass(frozen=True)
class Neighbors:
    index: int
    previous_id: Optional[str]
    next_id: Optional[str]
    total: int

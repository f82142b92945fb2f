# util/enums.py
from enum import Enum
from typing import NamedTuple
from fastapi import status


class Color(str, Enum):
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    MAGENTA = "\033[35m"
    CYAN = "\033[36m"
    BOLD = "\033[1m"

    def __str__(self):
        return self.value


class Environment(str, Enum):
    DEV = "dev"
    PROD = "prod"


class Kind(str, Enum):
    """Record collections held by the content store."""

    CATEGORIES = "categories"
    PORTFOLIO_ITEMS = "portfolio_items"
    TAGS = "tags"
    PORTFOLIO_ITEM_TAGS = "portfolio_item_tags"
    TAG_PRESETS = "tag_presets"
    AB_TESTS = "ab_tests"
    ACHIEVEMENTS = "achievements"
    REVIEWS = "reviews"
    FAQS = "faqs"
    PROGRESS_TRACKER = "progress_tracker"
    PRIVATE_FORM_SUBMISSIONS = "private_form_submissions"

    def __str__(self):
        return self.value


# Collections an admin may drag-reorder.
ORDERED_KINDS = frozenset(
    {
        Kind.CATEGORIES,
        Kind.PORTFOLIO_ITEMS,
        Kind.TAGS,
        Kind.AB_TESTS,
        Kind.ACHIEVEMENTS,
        Kind.REVIEWS,
        Kind.FAQS,
    }
)


class Severity(str, Enum):
    FAST = "fast"
    STANDARD = "standard"
    BUSY = "busy"
    HIGH_DEMAND = "high-demand"


class ErrorInfo(NamedTuple):
    message: str
    http_status: int


class ErrorMessage(Enum):
    UNAUTHORIZED = ErrorInfo("Not signed in", status.HTTP_401_UNAUTHORIZED)
    INVALID_CREDENTIALS = ErrorInfo(
        "Invalid email or password", status.HTTP_401_UNAUTHORIZED
    )
    INCORRECT_PASSWORD = ErrorInfo(
        "Incorrect password. Please try again.", status.HTTP_401_UNAUTHORIZED
    )
    NOT_FOUND = ErrorInfo("Not found", status.HTTP_404_NOT_FOUND)
    STAR_LIMIT = ErrorInfo(
        "Star limit reached for this category", status.HTTP_409_CONFLICT
    )
    STAR_FAILED = ErrorInfo(
        "Failed to update star status. Please try again.",
        status.HTTP_502_BAD_GATEWAY,
    )
    REORDER_FAILED = ErrorInfo(
        "Error updating order. Please try again.", status.HTTP_502_BAD_GATEWAY
    )
    FETCH_FAILED = ErrorInfo(
        "Error loading content. Please try again.", status.HTTP_502_BAD_GATEWAY
    )
    UPLOAD_FAILED = ErrorInfo(
        "Error uploading file. Please try again.", status.HTTP_502_BAD_GATEWAY
    )
    SUBMIT_FAILED = ErrorInfo(
        "Error submitting form. Please try again.", status.HTTP_502_BAD_GATEWAY
    )
    FIELDS_REQUIRED = ErrorInfo(
        "Please fill in all fields", status.HTTP_422_UNPROCESSABLE_ENTITY
    )
    INVALID_EMAIL = ErrorInfo(
        "Please enter a valid email address", status.HTTP_422_UNPROCESSABLE_ENTITY
    )
    PRESET_INCOMPLETE = ErrorInfo(
        "Please enter a preset name and select at least one tag",
        status.HTTP_422_UNPROCESSABLE_ENTITY,
    )
    AB_IMAGES_REQUIRED = ErrorInfo(
        "Both Version A and Version B images are required",
        status.HTTP_422_UNPROCESSABLE_ENTITY,
    )
    ITEM_INCOMPLETE = ErrorInfo(
        "A file and a category are required", status.HTTP_422_UNPROCESSABLE_ENTITY
    )
    NOT_REORDERABLE = ErrorInfo(
        "This collection cannot be reordered", status.HTTP_400_BAD_REQUEST
    )
    INTERNAL_ERROR = ErrorInfo("Internal Error", status.HTTP_502_BAD_GATEWAY)

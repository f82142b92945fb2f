# core/delivery.py
from typing import Final, Tuple
from core.entities import DeliveryTier
from util.enums import Severity

# (inclusive upper bound, tier); the last band is open-ended.
_BANDS: Final[Tuple[Tuple[int, DeliveryTier], ...]] = (
    (
        5,
        DeliveryTier(
            time_label="24 hours",
            severity=Severity.FAST,
            status="Fast Track",
            description="Your thumbnail will be prioritized and delivered quickly!",
        ),
    ),
    (
        10,
        DeliveryTier(
            time_label="30 hours",
            severity=Severity.STANDARD,
            status="Standard",
            description="Your thumbnail is in the standard delivery queue.",
        ),
    ),
    (
        15,
        DeliveryTier(
            time_label="48 hours",
            severity=Severity.BUSY,
            status="Busy Period",
            description="We're experiencing higher demand, but your thumbnail is queued.",
        ),
    ),
)

_OVERFLOW: Final[DeliveryTier] = DeliveryTier(
    time_label="72 hours",
    severity=Severity.HIGH_DEMAND,
    status="High Demand",
    description="We're working through a busy period. Thank you for your patience!",
)


def tier(count: int) -> DeliveryTier:
    """Map thumbnails in progress to a delivery estimate band."""
    if count < 0:
        raise ValueError(f"thumbnails in progress must be >= 0, got {count}")
    for upper, band in _BANDS:
        if count <= upper:
            return band
    return _OVERFLOW

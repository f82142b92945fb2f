# util/types.py
from typing import Literal, Protocol


FileType = Literal["image", "video"]
AspectRatio = Literal["16:9", "1:1", "9:16"]


class ScrollHost(Protocol):
    # Flow: anything exposing a mutable `overflow` (body style, test double).
    overflow: str

# core/lightbox.py
from contextlib import contextmanager
from typing import Callable, Iterator, Optional, Sequence
from core.entities import Neighbors
from util.types import ScrollHost

HIDDEN: str = "hidden"


@contextmanager
def scroll_lock(host: ScrollHost) -> Iterator[ScrollHost]:
    """Hide background scrolling; restore the prior overflow on any exit."""
    prior = host.overflow
    host.overflow = HIDDEN
    try:
        yield host
    finally:
        host.overflow = prior


class LightboxNavigator:
    """
    Cyclic index over a fixed number of media entries.
    Keyboard and pointer inputs map onto the same close/previous/next actions.
    """

    def __init__(
        self,
        count: int,
        index: int = 0,
        on_close: Optional[Callable[[], None]] = None,
    ) -> None:
        if count <= 0:
            raise ValueError("lightbox needs at least one item")
        self.count = count
        self.index = index % count
        self.is_open = False
        self._on_close = on_close

    def next(self) -> int:
        self.index = (self.index + 1) % self.count
        return self.index

    def previous(self) -> int:
        self.index = (self.index - 1 + self.count) % self.count
        return self.index

    def peek(self, step: int) -> int:
        return (self.index + step) % self.count

    def close(self) -> None:
        if not self.is_open:
            return
        self.is_open = False
        if self._on_close is not None:
            self._on_close()

    def handle_key(self, key: str) -> None:
        if key == "Escape":
            self.close()
        elif key == "ArrowLeft":
            self.previous()
        elif key == "ArrowRight":
            self.next()

    def click_backdrop(self, on_backdrop: bool = True) -> None:
        # Clicks on the media itself bubble up with on_backdrop=False.
        if on_backdrop:
            self.close()

    @contextmanager
    def opened(self, host: ScrollHost) -> Iterator["LightboxNavigator"]:
        """Open for the duration of the block with the host scroll locked."""
        with scroll_lock(host):
            self.is_open = True
            try:
                yield self
            finally:
                self.close()


def neighbors(ids: Sequence[str], item_id: str) -> Optional[Neighbors]:
    """Previous/next ids around `item_id`, wrapping; None when absent."""
    try:
        idx = list(ids).index(item_id)
    except ValueError:
        return None
    nav = LightboxNavigator(len(ids), idx)
    if len(ids) == 1:
        return Neighbors(index=idx, previous_id=None, next_id=None, total=1)
    return Neighbors(
        index=idx,
        previous_id=ids[nav.peek(-1)],
        next_id=ids[nav.peek(1)],
        total=len(ids),
    )

# core/reorder.py
from typing import List, Sequence
from core.entities import OrderedEntity


def reindex(entities: Sequence[OrderedEntity]) -> List[OrderedEntity]:
    """Assign order_index = position, 0-based and contiguous."""
    return [
        e if e.order_index == i else OrderedEntity(id=e.id, order_index=i)
        for i, e in enumerate(entities)
    ]


def reorder(
    entities: Sequence[OrderedEntity], moved_id: str, target_id: str
) -> List[OrderedEntity]:
    """
    Move `moved_id` into the slot currently held by `target_id` (a list move,
    not a swap) and reindex the whole sequence.

    Same id or an unknown id is a no-op: the input comes back unchanged.
    """
    if moved_id == target_id:
        return list(entities)

    ids = [e.id for e in entities]
    try:
        src = ids.index(moved_id)
        dst = ids.index(target_id)
    except ValueError:
        return list(entities)

    out = list(entities)
    moved = out.pop(src)
    out.insert(dst, moved)
    return reindex(out)


def changed_positions(
    before: Sequence[OrderedEntity], after: Sequence[OrderedEntity]
) -> List[OrderedEntity]:
    """Entities of `after` whose order_index differs from `before`, in `after` order."""
    previous = {e.id: e.order_index for e in before}
    return [e for e in after if previous.get(e.id) != e.order_index]

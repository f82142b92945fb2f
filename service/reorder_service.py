# service/reorder_service.py
import logging
from typing import List
from core.entities import OrderedEntity
from core.reorder import changed_positions, reindex, reorder
from repository.base import RecordStore
from service.catalog import BY_ORDER
from util.enums import ORDERED_KINDS, ErrorMessage, Kind
from util.errors import AppError, StoreError, store_guard
from util.timing import timed

logger = logging.getLogger(__name__)


class ReorderService:
    """
    Drag-and-drop reordering for admin lists.

    Flow:
    - Read the collection by order_index, compute the move in memory.
    - Write only the changed (id, order_index) pairs, in final order.
    - If a write fails, put the pairs already written back to their old
      index and report failure; the stored order stays the pre-move order.
    """

    def __init__(self, records: RecordStore) -> None:
        self._records = records

    async def current(self, kind: Kind) -> List[OrderedEntity]:
        with store_guard(logger, "reorder.read", ErrorMessage.FETCH_FAILED, kind=kind):
            rows = await self._records.fetch_collection(kind, order_by=BY_ORDER)
        return [OrderedEntity(id=r["id"], order_index=int(r.get("order_index") or 0)) for r in rows]

    async def reorder(self, kind: Kind, moved_id: str, target_id: str) -> List[OrderedEntity]:
        if kind not in ORDERED_KINDS:
            raise AppError.of(ErrorMessage.NOT_REORDERABLE)

        before = await self.current(kind)
        after = reorder(before, moved_id, target_id)
        if after == before:
            logger.info("reorder.noop kind=%s moved=%s target=%s", kind, moved_id, target_id)
            return before

        pending = changed_positions(before, after)
        with timed(logger, "reorder.persist", kind=kind, writes=len(pending)):
            await self._persist(kind, before, pending)
        logger.info("reorder.ok kind=%s moved=%s target=%s", kind, moved_id, target_id)
        return after

    async def _persist(
        self,
        kind: Kind,
        before: List[OrderedEntity],
        pending: List[OrderedEntity],
    ) -> None:
        previous = {e.id: e.order_index for e in before}
        written: List[OrderedEntity] = []
        try:
            for entity in pending:
                await self._records.update_record(
                    kind, entity.id, {"order_index": entity.order_index}
                )
                written.append(entity)
        except StoreError as e:
            logger.error(
                "reorder.persist.error kind=%s written=%d of=%d err=%s",
                kind,
                len(written),
                len(pending),
                e,
            )
            await self._revert(kind, written, previous)
            raise AppError.of(ErrorMessage.REORDER_FAILED) from e

    async def _revert(self, kind: Kind, written: List[OrderedEntity], previous: dict) -> None:
        for entity in reversed(written):
            try:
                await self._records.update_record(
                    kind, entity.id, {"order_index": previous[entity.id]}
                )
            except StoreError as e:
                # Nothing more to do here; the next normalize() repairs gaps.
                logger.error("reorder.revert.error kind=%s id=%s err=%s", kind, entity.id, e)

    async def normalize(self, kind: Kind) -> List[OrderedEntity]:
        """Rewrite indices as 0..N-1 (after deletes or a failed revert)."""
        before = await self.current(kind)
        after = reindex(before)
        pending = changed_positions(before, after)
        if pending:
            await self._persist(kind, before, pending)
        return after

    async def settle(self, kind: Kind) -> None:
        """
        normalize() after a committed delete.

        The delete already succeeded, so a failure here is logged and left
        for the next normalize() instead of being reported to the caller.
        """
        try:
            await self.normalize(kind)
        except AppError as e:
            logger.error("reorder.settle.error kind=%s err=%s", kind, e.detail)

# util/errors.py
import logging
from contextlib import contextmanager
from typing import Any, Iterator
from fastapi import HTTPException, status
from util.enums import ErrorMessage


class AppError(HTTPException):
    # Flow: raise AppError to short-circuit with a typed status & message.
    def __init__(
        self, message: str, http_status: int = status.HTTP_400_BAD_REQUEST
    ) -> None:
        super().__init__(status_code=http_status, detail=message)

    @classmethod
    def of(cls, error: ErrorMessage, message: str | None = None) -> "AppError":
        return cls(message or error.value.message, error.value.http_status)


class StoreError(Exception):
    """Raised by repositories when the backing store fails or rejects a call."""


class RecordNotFoundError(StoreError):
    def __init__(self, kind: str, record_id: str) -> None:
        super().__init__(f"{kind}:{record_id} not found")
        self.kind = kind
        self.record_id = record_id


@contextmanager
def store_guard(
    logger: logging.Logger,
    event: str,
    error: ErrorMessage,
    message: str | None = None,
    **kv: Any,
) -> Iterator[None]:
    """
    Service boundary for store calls: missing rows become 404, any other
    store failure is logged once and becomes a user-facing AppError.
    No retries.
    """
    suffix = "".join(f" {k}={v}" for k, v in kv.items())
    try:
        yield
    except RecordNotFoundError as e:
        logger.warning("%s.not_found%s ref=%s", event, suffix, e)
        raise AppError.of(ErrorMessage.NOT_FOUND) from e
    except StoreError as e:
        logger.error("%s.error%s err=%s", event, suffix, e)
        raise AppError.of(error, message) from e

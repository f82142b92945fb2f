# service/private_access_service.py
import hmac
import logging
from typing import List
from config.settings import settings
from model.content import PrivateFormSubmission
from repository.base import RecordStore
from util import functions
from util.enums import ErrorMessage, Kind
from util.errors import AppError, store_guard

logger = logging.getLogger(__name__)


class PrivateAccessService:
    """Password-gated private area and its contact form."""

    def __init__(
        self, records: RecordStore, password: str = settings.PRIVATE_ACCESS_PASSWORD
    ) -> None:
        self._records = records
        self._password = password

    def check_password(self, password: str) -> None:
        if not hmac.compare_digest(password.encode("utf-8"), self._password.encode("utf-8")):
            logger.info("private.access.rejected")
            raise AppError.of(ErrorMessage.INCORRECT_PASSWORD)

    async def submit(self, name: str, email: str, message: str) -> PrivateFormSubmission:
        name, email, message = name.strip(), email.strip(), message.strip()
        if not name or not email or not message:
            raise AppError.of(ErrorMessage.FIELDS_REQUIRED)
        if not functions.is_valid_email(email):
            raise AppError.of(ErrorMessage.INVALID_EMAIL)

        with store_guard(logger, "private.submit", ErrorMessage.SUBMIT_FAILED):
            row = await self._records.insert_record(
                Kind.PRIVATE_FORM_SUBMISSIONS,
                {"name": name, "email": email, "message": message},
            )
        logger.info("private.submit.ok id=%s", row["id"])
        return PrivateFormSubmission.model_validate(row)

    async def submissions(self) -> List[PrivateFormSubmission]:
        with store_guard(logger, "private.list", ErrorMessage.FETCH_FAILED):
            rows = await self._records.fetch_collection(
                Kind.PRIVATE_FORM_SUBMISSIONS, order_by=[("created_at", True)]
            )
        return [PrivateFormSubmission.model_validate(r) for r in rows]

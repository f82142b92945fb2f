# service/auth_service.py
import hmac
import logging
import secrets
from typing import Optional
from config.settings import settings
from model.api import LoginResponse
from repository.base import SessionStore
from util.enums import ErrorMessage
from util.errors import AppError, store_guard

logger = logging.getLogger(__name__)


class AuthService:
    """
    Admin sign-in against the configured credentials.
    Any live session is authorised; there are no roles.
    """

    def __init__(
        self,
        sessions: SessionStore,
        email: str = settings.ADMIN_EMAIL,
        password: str = settings.ADMIN_PASSWORD,
        ttl_seconds: int = settings.SESSION_TTL_SECONDS,
    ) -> None:
        self._sessions = sessions
        self._email = email
        self._password = password
        self._ttl = ttl_seconds

    def _matches(self, email: str, password: str) -> bool:
        ok_email = hmac.compare_digest(
            email.strip().lower().encode("utf-8"), self._email.lower().encode("utf-8")
        )
        ok_password = hmac.compare_digest(
            password.encode("utf-8"), self._password.encode("utf-8")
        )
        return ok_email and ok_password

    async def sign_in(self, email: str, password: str) -> LoginResponse:
        if not self._matches(email, password):
            logger.warning("auth.login.rejected")
            raise AppError.of(ErrorMessage.INVALID_CREDENTIALS)
        token = secrets.token_urlsafe(32)
        with store_guard(logger, "auth.login", ErrorMessage.INTERNAL_ERROR):
            await self._sessions.create(token, self._email)
        logger.info("auth.login.ok")
        return LoginResponse(token=token, email=self._email, expiresIn=self._ttl)

    async def get_session(self, token: Optional[str]) -> Optional[str]:
        if not token:
            return None
        with store_guard(logger, "auth.session", ErrorMessage.INTERNAL_ERROR):
            return await self._sessions.get(token)

    async def sign_out(self, token: str) -> None:
        with store_guard(logger, "auth.logout", ErrorMessage.INTERNAL_ERROR):
            await self._sessions.delete(token)
        logger.info("auth.logout.ok")

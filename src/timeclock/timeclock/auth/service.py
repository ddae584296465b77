from __future__ import annotations

import hmac
import logging
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_min_length
from ..core.constants import ADMIN_PASSWORD_SETTING_KEY, MIN_ADMIN_PASSWORD_LENGTH
from ..core.exceptions import AuthenticationError, ConfigurationError, ValidationError
from ..settings.repository import SettingsRepository

log = logging.getLogger(__name__)


class AdminAuthService:
    """Use case: verify and change the shared admin password.

    A password changed through the UI is stored as a werkzeug hash in the
    settings table and wins over ``ADMIN_PASSWORD`` from the environment.
    """

    def __init__(self, settings: SettingsRepository, *, fallback_password: Optional[str] = None):
        self._settings = settings
        self._fallback_password = fallback_password or None

    def _matches(self, password: str) -> bool:
        stored_hash = self._settings.get(ADMIN_PASSWORD_SETTING_KEY)
        if stored_hash:
            try:
                return check_password_hash(stored_hash, password)
            except ValueError:
                # e.g. a hash written by another tool with an unknown method
                log.warning("Stored admin password hash is not readable")
                return False

        if self._fallback_password is None:
            raise ConfigurationError("管理パスワードが設定されていません")
        return hmac.compare_digest(password.encode("utf-8"), self._fallback_password.encode("utf-8"))

    def verify(self, password: Optional[str]) -> None:
        if not isinstance(password, str) or not password:
            raise ValidationError("パスワードが必要です")
        if not self._matches(password):
            raise AuthenticationError("パスワードが正しくありません")

    def change_password(self, current_password: Optional[str], new_password: Optional[str]) -> None:
        if not all(isinstance(p, str) and p for p in (current_password, new_password)):
            raise ValidationError("現在のパスワードと新しいパスワードが必要です")
        require_min_length(
            new_password,
            f"パスワードは{MIN_ADMIN_PASSWORD_LENGTH}文字以上で入力してください",
            MIN_ADMIN_PASSWORD_LENGTH,
        )

        if not self._matches(current_password):
            raise AuthenticationError("現在のパスワードが正しくありません")

        self._settings.upsert(ADMIN_PASSWORD_SETTING_KEY, generate_password_hash(new_password))
        log.info("Admin password changed")

# core/auth.py
from __future__ import annotations
import logging

import bcrypt

from core.settings import AuthConfig

log = logging.getLogger(__name__)


class AdminCredentials:
    """
    Single administrator account taken from settings.

    The configured password is hashed once with bcrypt at construction;
    login attempts are checked against the hash only.
    """

    def __init__(self, cfg: AuthConfig):
        self.username = cfg.admin_user.strip().lower()
        self.display_name = cfg.display_name
        self._pw_hash = bcrypt.hashpw(cfg.admin_password.encode("utf-8"), bcrypt.gensalt())

    def verify(self, username: str, password: str) -> bool:
        if (username or "").strip().lower() != self.username:
            log.warning(f"Login rejected for unknown user {username!r}")
            return False
        pw = (password or "").encode("utf-8")
        # bcrypt only looks at 72 bytes and newer releases reject longer input
        if len(pw) > 72:
            log.warning(f"Login rejected for {self.username}: password too long")
            return False
        ok = bcrypt.checkpw(pw, self._pw_hash)
        if not ok:
            log.warning(f"Login rejected for {self.username}: bad password")
        return ok

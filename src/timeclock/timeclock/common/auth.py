from __future__ import annotations

from functools import wraps

from flask import session

from .http import fail

ADMIN_SESSION_KEY = "admin_verified"


def admin_required(view):
    """Reject the request unless the admin password was verified in this session."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        if not session.get(ADMIN_SESSION_KEY):
            return fail("管理者認証が必要です", status=401)
        return view(*args, **kwargs)

    return wrapper

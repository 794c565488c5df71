"""Caller identity supplied by the upstream authentication layer."""

from dataclasses import dataclass

from fastapi import Depends, Header, HTTPException


@dataclass(frozen=True)
class Caller:
    user_id: str | None = None
    role: str | None = None


def get_caller(
    x_user_id: str | None = Header(default=None),
    x_user_role: str | None = Header(default=None),
) -> Caller:
    return Caller(user_id=x_user_id or None, role=(x_user_role or "").upper() or None)


def require_role(*roles: str):
    """Dependency factory rejecting callers whose role is not in ``roles``."""
    allowed = {role.upper() for role in roles}

    def dependency(caller: Caller = Depends(get_caller)) -> Caller:
        if caller.role not in allowed:
            raise HTTPException(status_code=403, detail="Forbidden: insufficient role")
        return caller

    return dependency

from __future__ import annotations

from fastapi import Header

from comanda.application.use_cases.context import Principal
from comanda.domain.common.ids import CompanyId, UserId


class UnauthenticatedError(Exception):
    pass


def get_principal(
    x_company_id: str | None = Header(default=None),
    x_user_id: str | None = Header(default=None),
    x_user_role: str | None = Header(default=None),
) -> Principal:
    """Principal forwarded by the authenticating gateway."""
    if not x_company_id or not x_user_id:
        raise UnauthenticatedError("X-Company-Id and X-User-Id headers are required")
    return Principal(
        company_id=CompanyId(x_company_id),
        user_id=UserId(x_user_id),
        role=x_user_role or "staff",
    )

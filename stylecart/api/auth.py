"""Authentication helpers and route dependencies."""

from __future__ import annotations

import secrets

from fastapi import Depends, Header, HTTPException, status

from stylecart.api.context import AppContext, get_context


def require_admin_token(
    x_internal_token: str | None = Header(default=None, alias="X-Internal-Token"),
    context: AppContext = Depends(get_context),
) -> None:
    """Guard catalog management and store statistics with a shared secret."""

    expected_token = context.settings.admin_token
    if not expected_token:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Admin token is not configured.",
        )

    if x_internal_token is None or not secrets.compare_digest(x_internal_token, expected_token):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid administrative token.",
        )


AdminAuthDependency = Depends(require_admin_token)

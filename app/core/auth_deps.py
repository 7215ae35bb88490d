#app/core/auth_deps.py
from __future__ import annotations

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError

from app.core.security import decode_token
from app.policies.principal import Principal

bearer = HTTPBearer(auto_error=True)


def get_current_principal(
    request: Request,
    creds: HTTPAuthorizationCredentials = Depends(bearer),
) -> Principal:
    """
    Canonical authentication dependency for owner-scoped routes.

    Guarantees:
    - JWT signature and expiry are valid
    - `sub` (the user id) is present
    """

    try:
        payload = decode_token(creds.credentials)
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid or expired token.")

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(status_code=401, detail="Token missing required claims.")

    principal = Principal(
        user_id=str(user_id),
        email=str(payload.get("email") or ""),
        name=str(payload.get("name") or "Unknown"),
    )

    # Make principal available to downstream middleware / handlers
    request.state.principal = principal

    return principal

#app/api/v1/auth.py
from __future__ import annotations

from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy.orm import Session

from app.core.auth_deps import get_current_principal
from app.db.session import get_db
from app.policies.principal import Principal
from app.schemas.auth import LoginRequest, RegisterRequest
from app.services.auth_service import authenticate, issue_token, register

router = APIRouter(prefix="/auth")


def _user(principal: Principal) -> dict:
    return {
        "id": principal.user_id,
        "name": principal.name,
        "email": principal.email,
    }


@router.post("/register", status_code=201)
def register_user(req: RegisterRequest, db: Session = Depends(get_db)):
    try:
        principal = register(db, req.name, req.email, req.password)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {"success": True, "data": _user(principal), "token": issue_token(principal)}


@router.post("/login")
def login(req: LoginRequest, db: Session = Depends(get_db)):
    principal = authenticate(db, req.email, req.password)
    if not principal:
        raise HTTPException(status_code=401, detail="Invalid credentials")

    return {"success": True, "data": _user(principal), "token": issue_token(principal)}


@router.get("/me")
def get_me(principal: Principal = Depends(get_current_principal)):
    return {"success": True, "data": _user(principal)}

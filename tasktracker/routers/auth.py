from typing import Optional

from fastapi import APIRouter, Cookie, Depends, Header, Response
from sqlalchemy.orm import Session

import tasktracker.config as _cfg
from tasktracker.database import get_db
from tasktracker.middleware import TOKEN_COOKIE
from tasktracker.schemas.user import (
    AuthResponse,
    LoginResponse,
    UserCreate,
    UserLogin,
    VerifyResponse,
)
from tasktracker.services import auth as auth_service
from tasktracker.utils.auth import extract_token

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _set_token_cookie(response: Response, token: str):
    response.set_cookie(
        key=TOKEN_COOKIE,
        value=token,
        max_age=int(_cfg.ACCESS_TOKEN_EXPIRE_MINUTES * 60),
        httponly=True,
        samesite="lax",
        secure=_cfg.COOKIE_SECURE,
    )


@router.post("/register", response_model=AuthResponse)
def register(user: UserCreate, response: Response, db: Session = Depends(get_db)):
    token, new_user = auth_service.register(db, user.username, user.email, user.password)
    _set_token_cookie(response, token)
    return {"token": token, "user": new_user}


@router.post("/login", response_model=LoginResponse)
def login(user: UserLogin, response: Response, db: Session = Depends(get_db)):
    token, db_user = auth_service.login(db, user.username, user.password)
    _set_token_cookie(response, token)
    return {"success": True, "token": token, "user": db_user}


@router.get("/verify", response_model=VerifyResponse)
def verify(
    authorization: Optional[str] = Header(None),
    token: Optional[str] = Cookie(None),
    db: Session = Depends(get_db),
):
    user = auth_service.verify_token(db, extract_token(authorization, token))
    return {"user": user}


@router.post("/logout")
def logout(response: Response):
    # tokens are stateless; this only drops the browser's copy
    response.delete_cookie(TOKEN_COOKIE, httponly=True, samesite="lax", secure=_cfg.COOKIE_SECURE)
    return {"success": True}

# decorbook/api/auth.py
# Routes for registration, login/logout and the cookie-based session.
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from decorbook.api.schemas import LoginRequest, RegisterRequest, UserResponse
from decorbook.core import security
from decorbook.db.session import get_db
from decorbook.models.user import User, RoleEnum

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(body: RegisterRequest, db: Session = Depends(get_db)):
    """
    Register a user: name + email + password.
    The default role is USER.
    """
    existing = db.scalar(select(User).where(User.email == body.email))
    if existing:
        raise HTTPException(status_code=409, detail="Email already registered")
    hashed = security.get_password_hash(body.password)
    user = User(name=body.name, email=body.email, hashed_password=hashed, role=RoleEnum.user)
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"User {user.id} registered")
    return {"message": "Registration successful", "user": UserResponse.model_validate(user)}

@router.post("/login")
def login(body: LoginRequest, request: Request, response: Response, db: Session = Depends(get_db)):
    """
    Login: checks the password, sets the auth cookie and returns the token.
    """
    user = db.scalar(select(User).where(User.email == body.email))
    if not user or not security.verify_password(body.password, user.hashed_password):
        raise HTTPException(status_code=401, detail="Incorrect email or password")
    settings = security.get_settings(request)
    token = security.create_access_token(settings, subject=str(user.id), email=user.email, name=user.name)
    security.set_auth_cookie(response, settings, token)
    return {"message": "Login successful", "user": UserResponse.model_validate(user), "token": token}

@router.post("/logout")
def logout(request: Request, response: Response):
    response.delete_cookie(security.get_settings(request).AUTH_COOKIE_NAME, path="/")
    return {"message": "Logout successful"}

@router.get("/me")
def me(claims: dict = Depends(security.get_token_claims)):
    return {"user": claims}

@router.get("/status")
def auth_status(request: Request, token: str | None = Depends(security.read_token)):
    """Login state for the navbar; never fails."""
    claims = security.decode_access_token(security.get_settings(request), token) if token else None
    if claims is None:
        return {"isLoggedIn": False}
    return {
        "isLoggedIn": True,
        "user": {"id": claims["sub"], "name": claims.get("name"), "email": claims.get("email")},
    }

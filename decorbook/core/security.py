# decorbook/core/security.py
# Password hashing and JWT session helpers.
from passlib.context import CryptContext
from datetime import datetime, timedelta
from jose import jwt, JWTError
from fastapi import Depends, HTTPException, Request, Response, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from decorbook.core.config import Settings
from decorbook.db.session import get_db
from decorbook.models.user import User, RoleEnum

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)

def get_password_hash(password: str) -> str:
    """Hash a password for storage."""
    return pwd_context.hash(password)

def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a password at login."""
    return pwd_context.verify(plain_password, hashed_password)

def get_settings(request: Request) -> Settings:
    return request.app.state.settings

def create_access_token(settings: Settings, subject: str, email: str, name: str | None = None,
                        expires_delta: timedelta | None = None) -> str:
    """Create a JWT with sub = user id plus email and name for the client."""
    now = datetime.utcnow()
    if expires_delta:
        expire = now + expires_delta
    else:
        expire = now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode = {"sub": str(subject), "email": email, "name": name, "iat": now, "exp": expire}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

def decode_access_token(settings: Settings, token: str) -> dict | None:
    """Return the token claims, or None when the token is invalid or expired."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    if payload.get("sub") is None:
        return None
    return payload

def set_auth_cookie(response: Response, settings: Settings, token: str) -> None:
    response.set_cookie(
        settings.AUTH_COOKIE_NAME,
        token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        path="/",
    )

def read_token(request: Request, bearer: str | None = Depends(oauth2_scheme)) -> str | None:
    """Token from the auth cookie, falling back to an Authorization: Bearer header."""
    return request.cookies.get(get_settings(request).AUTH_COOKIE_NAME) or bearer

def get_token_claims(request: Request, token: str | None = Depends(read_token)) -> dict:
    """Claims of a valid token or 401."""
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Access denied")
    payload = decode_access_token(get_settings(request), token)
    if payload is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    return payload

def get_current_user(claims: dict = Depends(get_token_claims), db: Session = Depends(get_db)) -> User:
    """Return the current user from the JWT or raise 401."""
    try:
        user_id = int(claims["sub"])
    except (KeyError, TypeError, ValueError):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    return user

def require_role(role: RoleEnum):
    """Dependency factory: checks the user's role."""
    def _checker(current_user: User = Depends(get_current_user)):
        if current_user.role != role:
            raise HTTPException(status_code=403, detail="Access denied. Admins only.")
        return current_user
    return _checker

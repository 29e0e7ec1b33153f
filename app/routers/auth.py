from fastapi import APIRouter, HTTPException, Depends, Response, Request
from fastapi.security import OAuth2PasswordBearer
from pydantic import BaseModel, EmailStr
from typing import Optional
from datetime import datetime, timedelta, timezone
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session
import uuid

from app.config import settings
from app.database import get_db
from app.models.user import User
from app.folderdeck_logger import logger

router = APIRouter(prefix="/api/auth", tags=["Authentication"])

AUTH_COOKIE_NAME = "auth_token"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


# Pydantic Models
class UserBase(BaseModel):
    email: EmailStr
    username: str
    full_name: str


class UserCreate(UserBase):
    password: str


class UserResponse(UserBase):
    id: int
    is_guest: bool = False
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class LoginRequest(BaseModel):
    username: str
    password: str


# Helper Functions
def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def create_access_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT carrying the user's identity."""
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS))

    to_encode = {
        "sub": str(user.id),
        "user_id": user.id,
        "username": user.username,
        "is_guest": bool(user.is_guest),
        "exp": expire,
        "iat": now,
        "type": "access_token",
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def get_token(request: Request, bearer_token: Optional[str]) -> Optional[str]:
    """Prefer the HTTP-only cookie, fall back to an Authorization header."""
    return request.cookies.get(AUTH_COOKIE_NAME) or bearer_token


async def get_current_user_optional(
    request: Request,
    bearer_token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> Optional[User]:
    token = get_token(request, bearer_token)
    if not token:
        return None

    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None

    user_id = payload.get("user_id")
    if user_id is None:
        return None

    # The token may outlive the user
    return db.query(User).filter(User.id == user_id).first()


async def get_current_user_required(
    user: Optional[User] = Depends(get_current_user_optional),
) -> User:
    if user is None:
        raise HTTPException(
            status_code=401,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def set_auth_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=AUTH_COOKIE_NAME,
        value=token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_DAYS * 24 * 60 * 60,
        httponly=True,
        secure=not settings.DEBUG,
        samesite="lax",
    )


# API Routes
@router.post("/register", response_model=UserResponse)
async def register(response: Response, user_data: UserCreate, db: Session = Depends(get_db)):
    """Register a new user and start a session"""
    if db.query(User).filter(User.email == user_data.email).first():
        raise HTTPException(status_code=400, detail="Email already registered")
    if db.query(User).filter(User.username == user_data.username).first():
        raise HTTPException(status_code=400, detail="Username already taken")

    db_user = User(
        email=user_data.email,
        username=user_data.username,
        full_name=user_data.full_name,
        password_hash=get_password_hash(user_data.password),
        is_guest=False,
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    logger.info(f"Registered user {db_user.id}")

    set_auth_cookie(response, create_access_token(db_user))
    return db_user


@router.post("/guest", response_model=UserResponse)
async def guest_session(response: Response, db: Session = Depends(get_db)):
    """Start an anonymous session backed by a throwaway guest user"""
    guest_suffix = uuid.uuid4().hex[:8]
    user = User(
        full_name=f"Guest {guest_suffix}",
        email=f"guest_{guest_suffix}@example.com",
        username=f"guest_{guest_suffix}",
        password_hash="",
        is_guest=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    set_auth_cookie(response, create_access_token(user))
    return user


@router.post("/login", response_model=UserResponse)
async def login(response: Response, login_data: LoginRequest, db: Session = Depends(get_db)):
    """Login user with username and password"""
    user = db.query(User).filter(User.username == login_data.username).first()

    if not user or not user.password_hash or not verify_password(login_data.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Incorrect username or password")

    set_auth_cookie(response, create_access_token(user))
    return user


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(current_user: User = Depends(get_current_user_required)):
    return current_user


@router.get("/check")
async def check_auth_status(user: Optional[User] = Depends(get_current_user_optional)):
    """Report whether the caller holds a session, and whether it is a guest one"""
    if user:
        return {
            "authenticated": True,
            "user": UserResponse.model_validate(user).model_dump(mode="json"),
        }
    return {"authenticated": False}


@router.post("/logout")
async def logout(response: Response):
    response.delete_cookie(
        key=AUTH_COOKIE_NAME,
        httponly=True,
        secure=not settings.DEBUG,
        samesite="lax",
    )
    return {"message": "Successfully logged out"}

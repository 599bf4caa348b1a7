import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shoplists.db import GetDb
from shoplists.modules.auth.deps import RequireAuthenticated, UserContext, _require_env
from shoplists.modules.auth.models import User
from shoplists.modules.auth.schemas import LoginRequest, RegisterRequest, TokenResponse, UserOut
from shoplists.modules.auth.service import CreateAccessToken, HashPassword, VerifyPassword

router = APIRouter(prefix="/api/auth", tags=["auth"])
logger = logging.getLogger("app.auth")

DEFAULT_ROLE = "User"


def _BuildUserOut(user: User) -> UserOut:
    return UserOut(
        Id=user.Id,
        Username=user.Username,
        Email=user.Email,
        Role=user.Role,
        CreatedAt=user.CreatedAt,
    )


@router.post("/login", response_model=TokenResponse)
def Login(payload: LoginRequest, db: Session = Depends(GetDb)) -> TokenResponse:
    user = db.query(User).filter(User.Username == payload.Username).first()
    if not user or not VerifyPassword(payload.Password, user.PasswordHash):
        logger.info("login failed for %s", payload.Username)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    access_token, expires_in = CreateAccessToken(user.Id, user.Username, user.Role)
    return TokenResponse(
        AccessToken=access_token,
        ExpiresIn=expires_in,
        Username=user.Username,
        Role=user.Role,
    )


@router.post("/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def Register(payload: RegisterRequest, db: Session = Depends(GetDb)) -> UserOut:
    username = payload.Username.strip()
    if not username:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username required")

    existing = db.query(User).filter(User.Username == username).first()
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already exists")

    min_length = int(_require_env("AUTH_PASSWORD_MIN_LENGTH"))
    if len(payload.Password) < min_length:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Password must be at least {min_length} characters",
        )

    record = User(
        Username=username,
        PasswordHash=HashPassword(payload.Password),
        Email=payload.Email.strip().lower() if payload.Email else None,
        Role=DEFAULT_ROLE,
    )
    db.add(record)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already exists")
    db.refresh(record)
    logger.info("registered user %s", record.Username)
    return _BuildUserOut(record)


@router.get("/me", response_model=UserOut)
def Me(
    db: Session = Depends(GetDb),
    user: UserContext = Depends(RequireAuthenticated),
) -> UserOut:
    record = db.query(User).filter(User.Id == user.Id).first()
    if not record:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")
    return _BuildUserOut(record)

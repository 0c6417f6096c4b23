"""Registration, login and token-to-user resolution."""

import logging
from typing import Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from errors import AuthError, ConflictError
from models import User
from schemas import LoginRequest, RegisterRequest
from security import create_access_token, decode_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"

# Checked against when the email is unknown
_DUMMY_HASH = None


def _dummy_hash():
    global _DUMMY_HASH
    if _DUMMY_HASH is None:
        _DUMMY_HASH = hash_password("not-a-real-password")
    return _DUMMY_HASH


def register(db: Session, payload: RegisterRequest) -> Tuple[User, str]:
    if db.query(User).filter(User.email == payload.email).first():
        raise ConflictError("User already exists")

    user = User(
        name=payload.name,
        email=payload.email,
        hashed_password=hash_password(payload.password),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("User already exists")
    db.refresh(user)

    logger.info("Registered user %s", user.id)
    return user, create_access_token(user.id)


def login(db: Session, payload: LoginRequest) -> Tuple[User, str]:
    user = db.query(User).filter(User.email == payload.email).first()
    if user is None:
        verify_password(payload.password, _dummy_hash())
        logger.warning("Failed login attempt")
        raise AuthError(INVALID_CREDENTIALS)
    if not verify_password(payload.password, user.hashed_password):
        logger.warning("Failed login attempt")
        raise AuthError(INVALID_CREDENTIALS)

    logger.info("User %s logged in", user.id)
    return user, create_access_token(user.id)


def get_current_user(db: Session, token: str) -> User:
    user_id = decode_access_token(token)
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise AuthError("Not authorized to access this route")
    return user

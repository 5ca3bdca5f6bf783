import logging

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from tasktracker.errors import (
    BadRequestError,
    ConflictError,
    InternalError,
    NotFoundError,
    UnauthorizedError,
)
from tasktracker.models.user import User
from tasktracker.utils.auth import create_token, decode_token, hash_password, verify_password

logger = logging.getLogger(__name__)


def _raise_if_taken(db: Session, username: str, email: str):
    # username collisions are reported before email collisions
    existing = db.query(User).filter(or_(User.username == username, User.email == email)).all()
    if any(u.username == username for u in existing):
        raise ConflictError("username")
    if existing:
        raise ConflictError("email")


def register(db: Session, username: str, email: str, password: str):
    """Create a user and return ``(token, user)``.

    A concurrent registration that wins the race for the same username or
    email still yields a Conflict, not a store error.
    """
    _raise_if_taken(db, username, email)

    try:
        hashed = hash_password(password)
    except ValueError as e:
        raise BadRequestError(str(e))

    user = User(username=username, email=email, password=hashed)
    try:
        db.add(user)
        db.commit()
        db.refresh(user)
    except IntegrityError:
        db.rollback()
        _raise_if_taken(db, username, email)
        logger.exception("registration failed for %r", username)
        raise InternalError("Registration failed")
    except SQLAlchemyError:
        db.rollback()
        logger.exception("registration failed for %r", username)
        raise InternalError("Registration failed")

    logger.info("registered user %s (%s)", user.id, username)
    return create_token(user), user


def login(db: Session, username: str, password: str):
    """Return ``(token, user)``; unknown user and wrong password are indistinguishable."""
    user = db.query(User).filter(User.username == username).first()
    if not user or not verify_password(password, user.password):
        logger.info("failed login for %r", username)
        raise UnauthorizedError("Invalid credentials")

    logger.info("user %s logged in", user.id)
    return create_token(user), user


def verify_token(db: Session, token: str) -> User:
    claims = decode_token(token)
    return resolve_user(db, claims)


def resolve_user(db: Session, claims: dict) -> User:
    """Load the user a verified token was issued for."""
    user = db.get(User, claims["sub"])
    if user is None:
        raise NotFoundError("User not found")
    return user

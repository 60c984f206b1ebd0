"""Email / password accounts with bcrypt hashes and a simple login throttle."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import List, Optional

import bcrypt
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database import User
from errors import AuthError
from logging_setup import get_logger

logger = get_logger("expense_tracker.auth")

MIN_PASSWORD_LENGTH = 6
ATTEMPT_WINDOW_SECONDS = 300
MAX_FAILED_ATTEMPTS = 5
LOCKOUT_SECONDS = 60


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def check_password(password: str, password_hash: str) -> bool:
    return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))


def _clean_email(email: str) -> str:
    return (email or "").strip().lower()


def sign_up(db: Session, email: str, password: str) -> User:
    email = _clean_email(email)
    if not email or not password:
        raise AuthError("Email and password are required")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise AuthError(f"Password should be at least {MIN_PASSWORD_LENGTH} characters")
    if db.query(User).filter(User.email == email).first():
        raise AuthError("User already registered")

    user = User(email=email, password_hash=hash_password(password))
    try:
        db.add(user)
        db.commit()
        db.refresh(user)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Sign up failed for %s: %s", email, e)
        raise AuthError("Could not create account. Please try again.") from e
    logger.info("Registered user %s", user.id)
    return user


def sign_in(db: Session, email: str, password: str) -> User:
    email = _clean_email(email)
    user = db.query(User).filter(User.email == email).first() if email else None
    if user is None or not password or not check_password(password, user.password_hash):
        logger.warning("Failed login attempt for %s", email or "<blank>")
        raise AuthError("Invalid login credentials")
    return user


@dataclass
class LoginThrottle:
    """Locks sign-in for a minute after repeated failures."""

    failed_attempts: List[float] = field(default_factory=list)
    lock_until: Optional[float] = None

    def is_locked(self, now: Optional[float] = None) -> bool:
        now = time.time() if now is None else now
        return self.lock_until is not None and now < self.lock_until

    def seconds_left(self, now: Optional[float] = None) -> int:
        now = time.time() if now is None else now
        if not self.is_locked(now):
            return 0
        return int(self.lock_until - now)

    def record_failure(self, now: Optional[float] = None) -> bool:
        """Note a failed attempt; returns True when this locks the form."""
        now = time.time() if now is None else now
        self.failed_attempts = [t for t in self.failed_attempts if now - t < ATTEMPT_WINDOW_SECONDS]
        self.failed_attempts.append(now)
        if len(self.failed_attempts) >= MAX_FAILED_ATTEMPTS:
            self.lock_until = now + LOCKOUT_SECONDS
            logger.warning("Login locked for %s seconds after %s failures", LOCKOUT_SECONDS, len(self.failed_attempts))
            return True
        return False

    def reset(self) -> None:
        self.failed_attempts = []
        self.lock_until = None

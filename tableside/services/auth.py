import logging
import secrets
from dataclasses import dataclass
from datetime import timedelta
from functools import lru_cache
from typing import Optional

from fastapi import Depends, Request
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from tableside.core.config import settings
from tableside.core.errors import AuthError
from tableside.core.timezone_utils import as_utc, utcnow
from tableside.db.session import get_db
from tableside.models.admin_session import AdminSession
from tableside.models.user import User, RoleEnum

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

SESSION_KEY = "admin_session_id"
SHARED_PRINCIPAL = "admin"


@dataclass(frozen=True)
class AdminContext:
    """Who is calling an admin route; handed to handlers explicitly."""

    principal: str
    role: str
    session_id: str


def verify_password(plain_password, hashed_password):
    if not plain_password or not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # malformed or unknown hash format
        return False


def get_password_hash(password):
    return pwd_context.hash(password)


@lru_cache(maxsize=1)
def shared_password_hash() -> Optional[str]:
    """Hash of the shared admin credential, or None when none is configured."""
    if settings.ADMIN_PASSWORD_HASH:
        return settings.ADMIN_PASSWORD_HASH
    if settings.ADMIN_PASSWORD:
        return get_password_hash(settings.ADMIN_PASSWORD)
    return None


def authenticate(db: Session, password: str, username: Optional[str] = None):
    """Return (principal, role) for valid credentials, else raise AuthError."""
    if username:
        user = db.query(User).filter(User.username == username).first()
        if not user or not user.is_active or not verify_password(password, user.password_hash):
            logger.info("admin login rejected username=%r", username)
            raise AuthError("Invalid username or password")
        role = user.role.value if hasattr(user.role, "value") else str(user.role)
        return user.username, role
    if not verify_password(password, shared_password_hash()):
        logger.info("admin login rejected for shared credential")
        raise AuthError("Invalid password")
    return SHARED_PRINCIPAL, RoleEnum.admin.value


def open_session(db: Session, principal: str, role: str) -> AdminSession:
    ses = AdminSession(
        session_id=secrets.token_urlsafe(32),
        principal=principal,
        role=role,
        expires_at=utcnow() + timedelta(minutes=settings.ADMIN_SESSION_TTL_MINUTES),
    )
    db.add(ses)
    db.commit()
    db.refresh(ses)
    logger.info("admin session opened principal=%r role=%s", principal, role)
    return ses


def login(db: Session, request: Request, password: str, username: Optional[str] = None) -> AdminContext:
    principal, role = authenticate(db, password, username)
    ses = open_session(db, principal, role)
    request.session.clear()
    request.session[SESSION_KEY] = ses.session_id
    return AdminContext(principal=principal, role=role, session_id=ses.session_id)


def lookup_session(db: Session, session_id: Optional[str]) -> Optional[AdminSession]:
    if not session_id:
        return None
    ses = db.query(AdminSession).filter(AdminSession.session_id == session_id).first()
    if ses is None or ses.revoked:
        return None
    if as_utc(ses.expires_at) < utcnow():
        return None
    return ses


def current_context(request: Request, db: Session) -> Optional[AdminContext]:
    ses = lookup_session(db, request.session.get(SESSION_KEY))
    if ses is None:
        return None
    return AdminContext(principal=ses.principal, role=ses.role, session_id=ses.session_id)


def logout(db: Session, request: Request) -> None:
    session_id = request.session.get(SESSION_KEY)
    if session_id:
        ses = db.query(AdminSession).filter(AdminSession.session_id == session_id).first()
        if ses and not ses.revoked:
            ses.revoked = True
            db.add(ses)
            db.commit()
            logger.info("admin session closed principal=%r", ses.principal)
    request.session.clear()


def get_admin_context(request: Request, db: Session = Depends(get_db)) -> AdminContext:
    ctx = current_context(request, db)
    if ctx is None:
        raise AuthError("Admin authentication required")
    return ctx


def require_roles(*roles: str):
    """Return a dependency that yields the AdminContext when its role is allowed.

    Usage in a route:
        @router.get('/analytics/today')
        def today(admin: AdminContext = Depends(require_roles('admin'))):
            ...
    """
    def role_checker(ctx: AdminContext = Depends(get_admin_context)) -> AdminContext:
        if ctx.role not in roles:
            raise AuthError("Insufficient privileges")
        return ctx

    return role_checker


require_admin = require_roles(RoleEnum.admin.value)


def create_or_reset_user(db: Session, username: str, password: str, role: str = RoleEnum.admin.value) -> User:
    user = db.query(User).filter(User.username == username).first()
    if user is None:
        user = User(username=username)
    user.password_hash = get_password_hash(password)
    user.role = RoleEnum(role)
    user.is_active = True
    db.add(user)
    db.commit()
    db.refresh(user)
    return user

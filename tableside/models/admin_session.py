from sqlalchemy import Column, Integer, String, DateTime, Boolean
from tableside.core.timezone_utils import utcnow
from tableside.db.session import Base


class AdminSession(Base):
    __tablename__ = "admin_sessions"

    id = Column(Integer, primary_key=True, index=True)
    # random id stored in the signed session cookie
    session_id = Column(String(64), unique=True, index=True, nullable=False)
    principal = Column(String(150), nullable=False)
    role = Column(String(20), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    revoked = Column(Boolean, default=False, nullable=False)

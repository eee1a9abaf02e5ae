from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.sql import func
from tableside.db.session import Base


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    # unique among active categories; enforced in services.catalog
    slug = Column(String(120), nullable=False, index=True)
    display_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func

from leave_tracker.database.base import Base


class User(Base):
    __tablename__ = "users"

    id = Column(String(64), primary_key=True, index=True)
    name = Column(String, unique=True, index=True, nullable=False)

    password_hash = Column(String, nullable=False)

    role = Column(String(20), nullable=False)  # Admin | CoAdmin

    created_at = Column(DateTime(timezone=True), server_default=func.now())

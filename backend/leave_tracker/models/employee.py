from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime

from leave_tracker.database.base import Base


class Employee(Base):
    __tablename__ = "employees"

    id = Column(String(64), primary_key=True, index=True)
    name = Column(String, nullable=False)
    designation = Column(String, nullable=False, default="")
    department = Column(String, nullable=False, default="")
    gender = Column(String(10), nullable=False)  # Male | Female | Other

    last_edited = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    done_by = Column(String(64), nullable=True)

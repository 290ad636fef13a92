from sqlalchemy import Column, Integer, String

from leave_tracker.database.base import Base


class LeaveType(Base):
    __tablename__ = "leave_types"

    id = Column(String(64), primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)

    # NULL means unlimited
    max_days = Column(Integer, nullable=True)

    done_by = Column(String(64), nullable=True)

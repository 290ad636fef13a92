from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, Date, DateTime, Text

from leave_tracker.database.base import Base


class LeaveRequest(Base):
    __tablename__ = "leave_requests"

    id = Column(String(64), primary_key=True, index=True)

    # weak references plus display snapshots taken at submission time
    employee_id = Column(String(64), nullable=False, index=True)
    employee_name = Column(String, nullable=False)
    designation = Column(String, nullable=False, default="")
    department = Column(String, nullable=False, default="")

    leave_type_id = Column(String(64), nullable=False, index=True)
    leave_type_name = Column(String, nullable=False)

    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    approved_days = Column(Integer, nullable=False)

    comments = Column(Text, nullable=False, default="")

    status = Column(String(20), nullable=False, default="Pending")
    # Pending | Approved | Rejected

    timestamp = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    done_by = Column(String(64), nullable=True)
    updated_by = Column(String(64), nullable=True)
    updated_at = Column(DateTime(timezone=True), nullable=True)

    attachment_file_id = Column(String, nullable=True)
    attachment_url = Column(String, nullable=True)
    attachment_file_name = Column(String, nullable=True)

from sqlalchemy import Column, Integer, String, Date

from leave_tracker.database.base import Base


class Holiday(Base):
    __tablename__ = "holidays"

    id = Column(String(64), primary_key=True, index=True)
    name = Column(String, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)

    # inclusive span, derived from start_date/end_date
    total_days = Column(Integer, nullable=False)

    done_by = Column(String(64), nullable=True)

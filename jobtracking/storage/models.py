# jobtracking/storage/models.py
from datetime import datetime

from sqlalchemy import DateTime, Engine, Index, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class TrackingBase(DeclarativeBase):
    pass


class JobTrackingModel(TrackingBase):
    __tablename__ = "job_trackings"
    __table_args__ = (
        Index(
            "ix_job_trackings_owner_method",
            "job_owner_id",
            "job_owner_type",
            "created_by_method_name",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    job_owner_id: Mapped[int] = mapped_column(Integer)
    job_owner_type: Mapped[str] = mapped_column(String(255))
    created_by_method_name: Mapped[str] = mapped_column(String(255))
    job_id: Mapped[str] = mapped_column(String(64), index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))


def create_tracking_tables(engine: Engine) -> None:
    TrackingBase.metadata.create_all(engine)

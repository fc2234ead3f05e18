import uuid

from sqlalchemy import Column, Integer, String, Text, Float, Boolean, DateTime
from sqlalchemy.sql import func
from aish.database import Base


def new_id() -> str:
    return uuid.uuid4().hex


class Case(Base):
    __tablename__ = "cases"

    id = Column(String(64), primary_key=True, default=new_id)
    name = Column(String(200), nullable=False)
    age = Column(Integer, nullable=False)
    location = Column(String(300), nullable=False)
    lat = Column(Float, nullable=True)
    lng = Column(Float, nullable=True)
    symptoms = Column(Text, nullable=False)
    water_source = Column(String(20), nullable=False)
    severity = Column(String(10), nullable=False, index=True)
    status = Column(String(20), nullable=False, default="Active", index=True)
    date = Column(String(20), nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False, index=True)
    synced = Column(Boolean, nullable=False, default=True)
    user_id = Column(String(100))
    reported_by = Column(String(200), nullable=False, default="Unknown")
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

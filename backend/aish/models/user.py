from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from aish.auth import DOCTOR_ROLE
from aish.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=DOCTOR_ROLE)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String

from shoplists.db import Base


class User(Base):
    __tablename__ = "users"

    Id = Column(Integer, primary_key=True, index=True)
    Username = Column(String(120), nullable=False, unique=True, index=True)
    PasswordHash = Column(String(255), nullable=False)
    Email = Column(String(254))
    Role = Column(String(20), nullable=False, default="User")
    CreatedAt = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

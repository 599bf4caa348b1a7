from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String, Text

from shoplists.db import Base


class ShoppingList(Base):
    __tablename__ = "shopping_lists"

    Id = Column(Integer, primary_key=True, index=True)
    OwnerUserName = Column(String(120), nullable=False, index=True)
    Name = Column(String(200), nullable=False)
    Items = Column(Text, nullable=False, default="[]")  # JSON array of encoded item strings
    Version = Column(Integer, nullable=False, default=1)
    CreatedAt = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    UpdatedAt = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    __mapper_args__ = {"version_id_col": Version}

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from shoplists.db import Base


class Category(Base):
    __tablename__ = "categories"

    Id = Column(Integer, primary_key=True, index=True)
    Name = Column(String(100), nullable=False, unique=True)
    Version = Column(Integer, nullable=False, default=1)
    CreatedAt = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    UpdatedAt = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    Products = relationship(
        "Product",
        back_populates="Category",
        cascade="all, delete-orphan",
        order_by="Product.Id",
    )

    __mapper_args__ = {"version_id_col": Version}


class Product(Base):
    __tablename__ = "products"

    Id = Column(Integer, primary_key=True, index=True)
    Name = Column(String(100), nullable=False, unique=True)
    CategoryId = Column(Integer, ForeignKey("categories.Id"), nullable=False, index=True)
    Version = Column(Integer, nullable=False, default=1)
    CreatedAt = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    UpdatedAt = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    Category = relationship("Category", back_populates="Products")

    __mapper_args__ = {"version_id_col": Version}

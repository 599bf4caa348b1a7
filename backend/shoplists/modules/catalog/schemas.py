from datetime import datetime

from pydantic import BaseModel, Field


class CategoryCreate(BaseModel):
    Name: str = Field(min_length=1, max_length=100)


class CategoryUpdate(BaseModel):
    Name: str = Field(min_length=1, max_length=100)


class ProductCreate(BaseModel):
    Name: str = Field(min_length=1, max_length=100)
    CategoryId: int


class ProductUpdate(BaseModel):
    Name: str = Field(min_length=1, max_length=100)
    CategoryId: int


class ProductOut(BaseModel):
    Id: int
    Name: str
    CategoryId: int
    CategoryName: str | None = None
    CreatedAt: datetime
    UpdatedAt: datetime


class CategoryOut(BaseModel):
    Id: int
    Name: str
    CreatedAt: datetime
    UpdatedAt: datetime


class CategoryDetailOut(CategoryOut):
    Products: list[ProductOut]


class CategoryDeleteResponse(BaseModel):
    Id: int
    RemovedProductNames: list[str]


class ProductDeleteResponse(BaseModel):
    Id: int
    Name: str

from datetime import datetime

from pydantic import BaseModel, Field


class ShoppingListCreate(BaseModel):
    Name: str = Field(min_length=1, max_length=200)
    ProductIds: list[int] = Field(default_factory=list)


class ShoppingListUpdate(BaseModel):
    Name: str = Field(min_length=1, max_length=200)


class ShoppingListItemRequest(BaseModel):
    Item: str = Field(min_length=1, max_length=100)


class ShoppingListItemAcquiredRequest(BaseModel):
    Item: str = Field(min_length=1, max_length=100)
    IsAcquired: bool


class ShoppingListItemOut(BaseModel):
    ProductName: str
    IsAcquired: bool


class ShoppingListOut(BaseModel):
    Id: int
    OwnerUserName: str
    Name: str
    Items: list[ShoppingListItemOut]
    CreatedAt: datetime
    UpdatedAt: datetime

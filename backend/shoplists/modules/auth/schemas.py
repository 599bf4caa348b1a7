from datetime import datetime

from pydantic import BaseModel, Field


class TokenResponse(BaseModel):
    AccessToken: str
    TokenType: str = "bearer"
    ExpiresIn: int
    Username: str
    Role: str


class LoginRequest(BaseModel):
    Username: str = Field(..., max_length=120)
    Password: str = Field(..., max_length=200)


class RegisterRequest(BaseModel):
    Username: str = Field(..., min_length=1, max_length=120)
    Password: str = Field(..., max_length=200)
    Email: str | None = Field(default=None, max_length=254)


class UserOut(BaseModel):
    Id: int
    Username: str
    Email: str | None = None
    Role: str
    CreatedAt: datetime

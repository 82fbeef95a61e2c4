from pydantic import BaseModel
from typing import Optional
from uuid import UUID


class BaseSchema(BaseModel):
    class Config:
        from_attributes = True


class UserBase(BaseSchema):
    email: str
    name: Optional[str] = None


class UserCreate(UserBase):
    password: str


class UserOut(UserBase):
    id: UUID


class LoginRequest(BaseSchema):
    email: str
    password: str


class TokenResponse(BaseModel):
    access_token: str
    user: UserOut

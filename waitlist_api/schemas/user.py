from pydantic import BaseModel, Field


class UserBase(BaseModel):
    username: str = Field(..., min_length=1)


class UserCreate(UserBase):
    password: str


class User(UserBase):
    id: str
    password: str

    class Config:
        from_attributes = True

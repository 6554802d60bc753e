from pydantic import BaseModel, Field


class UserCredentials(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class Token(BaseModel):
    token: str


class Message(BaseModel):
    message: str


class UserProfile(BaseModel):
    id: str
    email: str = Field(..., min_length=1)

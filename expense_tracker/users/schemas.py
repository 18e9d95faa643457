from typing import Optional

from pydantic import BaseModel, Field, field_validator


# -------- USERS --------
class UserSchema(BaseModel):
    username: str = Field(..., max_length=50)
    password: str
    role: Optional[str] = Field(None, max_length=50)

    @field_validator("username", "password")
    @classmethod
    def not_blank(cls, v: str, info):
        if not v or not v.strip():
            raise ValueError(f"{info.field_name.capitalize()} is required")
        return v

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str):
        return v.strip()


class UserDisplaySchema(BaseModel):
    id: int
    username: str
    role: str

    class Config:
        from_attributes = True

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator

from tasktracker.utils.auth import BCRYPT_MAX_BYTES


class UserCreate(BaseModel):
    username: str
    email: EmailStr
    password: str

    @field_validator("username")
    @classmethod
    def username_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("username cannot be empty")
        return v.strip()

    @field_validator("password")
    @classmethod
    def password_max_bytes(cls, v: str) -> str:
        """Ensure password does not exceed bcrypt's 72-byte limit when UTF-8 encoded."""
        if not v:
            raise ValueError("password cannot be empty")
        if len(v.encode("utf-8")) > BCRYPT_MAX_BYTES:
            raise ValueError("password too long: must be at most 72 bytes when UTF-8 encoded")
        return v


class UserLogin(BaseModel):
    username: str
    password: str

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str) -> str:
        # usernames are stored stripped at registration
        return v.strip()


class UserOut(BaseModel):
    """Public projection of a user; the password hash has no field here."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    email: str


class AuthResponse(BaseModel):
    token: str
    user: UserOut


class LoginResponse(AuthResponse):
    success: bool = True


class VerifyResponse(BaseModel):
    user: UserOut

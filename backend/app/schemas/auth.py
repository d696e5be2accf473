from typing import Optional

from pydantic import BaseModel


# Fields are optional so missing values surface as the 400 envelope rather than a 422.
class SignupRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class AdminLoginRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class UserOut(BaseModel):
    email: str
    name: str


class AuthResponse(BaseModel):
    success: bool
    user: UserOut


class AuthCheckResponse(BaseModel):
    isAuthenticated: bool
    user: Optional[UserOut] = None

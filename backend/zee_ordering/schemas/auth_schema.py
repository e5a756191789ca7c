from typing import Optional

from pydantic import BaseModel


class LoginIn(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class ForgotIn(BaseModel):
    email: Optional[str] = None

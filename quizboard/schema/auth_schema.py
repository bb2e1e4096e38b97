from typing import Optional

from pydantic import BaseModel, EmailStr


class TokenPayload(BaseModel):
    """Claims of an identity-provider bearer token"""
    sub: str  # external user id
    email: Optional[EmailStr] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    exp: Optional[int] = None

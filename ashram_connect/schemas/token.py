"""
Pydantic schemas for authentication and tokens
"""

from pydantic import BaseModel


class TokenResponse(BaseModel):
    """Token response"""
    access_token: str
    token_type: str = "bearer"
    user_id: str
    role: str

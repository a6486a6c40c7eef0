"""
Database Schemas

Each stored Pydantic model maps to a MongoDB collection named after
the lowercase class name:
- User -> "user" collection
- Video -> "video" collection
- Contact -> "contact" collection

Request models describe the JSON bodies accepted by the API.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, StrictInt


class User(BaseModel):
    """
    Users collection schema
    Collection name: "user"
    """
    name: str = Field(..., min_length=1, description="Display name")
    cartoon: str = Field(..., description="Chosen cartoon avatar")
    # The 8-16 range is a registration rule, not a storage rule.
    age: int = Field(..., description="Age in years")
    nickname: str = Field(..., min_length=1, description="Unique login nickname")
    last_login_date: Optional[datetime] = Field(None, description="Set on every successful login")


class Video(BaseModel):
    """
    Videos collection schema
    Collection name: "video"
    """
    url: str = Field(..., description="Video URL, stored as given")


class Contact(BaseModel):
    """
    Contact submissions collection schema
    Collection name: "contact"
    """
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    message: Optional[str] = None


# -----------------
# Request models
# -----------------
class RegisterRequest(BaseModel):
    # Booleans and numeric strings are not ages
    age: StrictInt
    name: Optional[str] = None
    nickname: Optional[str] = None
    cartoon: Optional[str] = None
    # Used for name and nickname when those are not supplied
    username: Optional[str] = None


class LoginRequest(BaseModel):
    nickname: str


class VideoRequest(BaseModel):
    url: str


class ContactRequest(Contact):
    pass

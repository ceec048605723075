# account_service/schemas.py
from pydantic import BaseModel
from typing import Optional, List

# --- User Schemas ---

class UserBase(BaseModel):
    name: str = ""
    lastname: str = ""
    email: str = ""

class UserCreate(UserBase): # Registration candidate, not yet validated
    # Missing fields decode as "" so the field rules report them
    password: str = ""

class User(UserBase): # Schema for returning user data, never carries the password
    id: int

    class Config:
        from_attributes = True

class Principal(BaseModel):
    id: int
    email: str

# --- Error bodies ---

class ValidationErrors(BaseModel):
    errors: List[str]

class ErrorMessage(BaseModel):
    error: str
    message: str

# --- Tokens ---

class Token(BaseModel):
    access_token: str
    token_type: str

class TokenData(BaseModel):
    email: Optional[str] = None

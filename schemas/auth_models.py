"""
Auth Pydantic Models

Request bodies for local registration/login and Google Identity Services sign-in.
"""

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=6, max_length=100)


class LoginRequest(BaseModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class GoogleCredentialRequest(BaseModel):
    credential: str = Field(min_length=1, description="ID token from Google Identity Services")

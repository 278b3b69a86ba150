from typing import Optional

from pydantic import BaseModel


class LoginRequest(BaseModel):
    token: str


class ContextRequest(BaseModel):
    owner: str
    repo: str
    branch: Optional[str] = None


class PathRequest(BaseModel):
    path: str


class ContentRequest(BaseModel):
    content: str


class SaveRequest(BaseModel):
    message: Optional[str] = None


class PinRequest(BaseModel):
    owner: str
    repo: str

# erp/schemas/auth.py
from typing import List

from pydantic import EmailStr

from erp.schemas.common import CamelModel


class LoginIn(CamelModel):
    email: EmailStr
    password: str


class RefreshIn(CamelModel):
    refresh_token: str


class TokenOut(CamelModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class MeOut(CamelModel):
    id: int
    name: str
    email: str
    is_admin: bool
    roles: List[str] = []
    permissions: List[str] = []

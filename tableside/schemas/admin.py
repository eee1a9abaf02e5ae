from typing import Optional

from tableside.schemas.common import ApiModel


class LoginRequest(ApiModel):
    password: str
    # named staff account; omitted for the shared admin password
    username: Optional[str] = None


class AdminStatus(ApiModel):
    is_authenticated: bool
    principal: Optional[str] = None
    role: Optional[str] = None

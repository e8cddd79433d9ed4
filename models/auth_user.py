from dataclasses import dataclass
from typing import Optional


@dataclass
class AuthUser:
    id: str
    email: str
    role: Optional[str] = None
    exp: Optional[int] = None

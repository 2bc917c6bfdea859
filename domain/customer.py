from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class Customer:
    name: str
    email: str
    address: str
    phone: str
    observation: Optional[str] = None
    id: Optional[int] = None

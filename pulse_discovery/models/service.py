"""
Service directory and venue models.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Service:
    """A local business listed in the services directory."""

    name: str
    category: str = ""
    address: Optional[str] = None
    id: Optional[str] = None


@dataclass
class Venue:
    """A venue referenced by listings and deals."""

    id: str
    name: str
    verified: bool = False

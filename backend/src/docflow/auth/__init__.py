"""Authentication and role handling"""

from .roles import UserRole, Capability, has_capability
from .actor import Actor

__all__ = ["UserRole", "Capability", "has_capability", "Actor"]

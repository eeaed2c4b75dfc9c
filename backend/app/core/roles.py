"""Closed set of user roles."""
from __future__ import annotations

from enum import Enum
from typing import Iterable


class Role(Enum):
    """Application role: database id, wire name and whether it implies every other role."""

    SUPER_ADMIN = (1, "super-admin", True)
    ADMIN = (2, "admin", False)
    PREMIUM = (3, "premium", False)
    USER = (4, "user", False)

    def __init__(self, role_id: int, label: str, implies_all: bool) -> None:
        self.role_id = role_id
        self.label = label
        self.implies_all = implies_all

    @classmethod
    def from_id(cls, role_id: int) -> Role:
        for role in cls:
            if role.role_id == role_id:
                return role
        raise ValueError(f"Unknown role id: {role_id}")

    @classmethod
    def from_label(cls, label: str) -> Role:
        for role in cls:
            if role.label == label:
                return role
        raise ValueError(f"Unknown role: {label}")

    def satisfies(self, allowed: Iterable[Role]) -> bool:
        return self.implies_all or self in set(allowed)

    def __str__(self) -> str:
        return self.label


DEFAULT_ROLE = Role.USER

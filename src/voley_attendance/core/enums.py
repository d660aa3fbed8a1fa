from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Account role used for admin-only operations."""

    ADMIN = "admin"
    USER = "user"


class Category(str, Enum):
    """Age category a player competes in."""

    CADETE = "cadete"
    JUVENIL = "juvenil"
    JUNIOR = "junior"
    SENIOR = "senior"


class ConfirmationStatus(str, Enum):
    """Pre-session RSVP state of a player."""

    CONFIRMED = "confirmed"
    DECLINED = "declined"
    PENDING = "pending"


class EntityKind(str, Enum):
    """Entities reachable through the ownership guard."""

    PLAYER = "player"
    TRAINING = "training"
    SESSION = "session"
    ATTENDANCE = "attendance"
    CONFIRMATION = "confirmation"

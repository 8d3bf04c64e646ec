"""User account model."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class User:
    """An account that owns strength tests and workouts."""

    id: str
    email: str
    first_name: str | None = None
    last_name: str | None = None
    created_at: datetime | None = None

    def get_display_name(self) -> str:
        """Get the name to greet the user with."""
        full_name = " ".join(p for p in (self.first_name, self.last_name) if p)
        return full_name or self.email


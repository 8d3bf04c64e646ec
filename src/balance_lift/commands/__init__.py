"""CLI commands for balance-lift."""

from .init import init
from .plan import plan
from .serve import serve
from .users import users
from .workout import workout

__all__ = [
    "init",
    "plan",
    "serve",
    "users",
    "workout",
]

"""Persistence services."""

from microblog.services.microposts import MicropostService
from microblog.services.users import UserService

__all__ = ["UserService", "MicropostService"]

from .base import Base
from .user import User
from .flight import Flight
from .mission import Mission

__all__ = ["Base", "User", "Flight", "Mission"]

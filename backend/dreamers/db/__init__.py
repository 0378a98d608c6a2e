from .base import Base
from .session import make_engine, make_session_factory

__all__ = ["Base", "make_engine", "make_session_factory"]

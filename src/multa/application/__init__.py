# Application Package
from .profile_service import load, save
from .session import Session, Snapshot, generate_universe

__all__ = ["Session", "Snapshot", "generate_universe", "load", "save"]

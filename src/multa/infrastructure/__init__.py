# Infrastructure Package
from .json_profile import JsonProfileRepository

__all__ = ["JsonProfileRepository"]

"""
Profile Repository Factory
Centralizes the logic for selecting the profile storage adapter.
"""

from multa.domain.ports import ProfileRepository
from multa.infrastructure.json_profile import JsonProfileRepository


def get_profile_repository() -> ProfileRepository:
    """
    Returns the ProfileRepository implementation used by the application.
    """
    return JsonProfileRepository()

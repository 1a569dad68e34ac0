"""
HTTP adapters for the HypertroQ backend REST API.
"""

from infrastructure.api.accounts import AccountsClient
from infrastructure.api.client import ApiClient, normalize_list
from infrastructure.api.exercises import ExercisesClient
from infrastructure.api.programs import ProgramsClient

__all__ = [
    "AccountsClient",
    "ApiClient",
    "ExercisesClient",
    "ProgramsClient",
    "normalize_list",
]

"""
Domain services: pure state logic with no I/O.
"""

from domain.services.session_drafts import SessionDraftOverlay, renumber, reorder

__all__ = [
    "SessionDraftOverlay",
    "renumber",
    "reorder",
]

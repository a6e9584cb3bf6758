"""Draft error taxonomy.

Commit errors are raised synchronously by the draft state machine and never
auto-corrected. Scoring does not raise for eligibility problems; it reports
them as sentinel scores with an ``ineligible`` category instead.
"""

from typing import Optional


class DraftError(ValueError):
    """Base class for rejected draft operations."""

    def __init__(self, message: str, hero_id: Optional[str] = None, step_index: Optional[int] = None):
        super().__init__(message)
        self.hero_id = hero_id
        self.step_index = step_index


class InvalidStateError(DraftError):
    """An action was attempted on a draft that is already finished."""


class HeroUnavailableError(DraftError):
    """The hero is unknown, or already banned or picked in this draft."""


class RoleExhaustedError(DraftError):
    """A pick cannot be slotted: no open role matches, or the side already has five picks."""

"""Utility modules for rov_draft."""

from rov_draft.utils.role_normalizer import (
    CANONICAL_ROLES,
    DEFAULT_ROLE,
    ROLE_ALIASES,
    ROLE_ORDER,
    is_valid_role,
    missing_roles,
    normalize_role,
    normalize_role_strict,
    normalize_roles,
    sort_roles,
)
from rov_draft.utils.draft_sequence import (
    DRAFT_SEQUENCE,
    TOTAL_STEPS,
    next_step_for,
    phase_of,
    step_at,
)

__all__ = [
    "CANONICAL_ROLES",
    "DEFAULT_ROLE",
    "ROLE_ALIASES",
    "ROLE_ORDER",
    "is_valid_role",
    "missing_roles",
    "normalize_role",
    "normalize_role_strict",
    "normalize_roles",
    "sort_roles",
    "DRAFT_SEQUENCE",
    "TOTAL_STEPS",
    "next_step_for",
    "phase_of",
    "step_at",
]

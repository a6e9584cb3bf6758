"""Static 18-step global ban-pick sequence.

Ordering is the tournament format and must not be reordered:
bans 1-4 (B, R, B, R), picks 1-6 (B, R, R, B, B, R),
bans 5-8 (R, B, R, B), picks 7-10 (R, B, B, R).
"""

from typing import Optional

from rov_draft.models.draft import ActionType, DraftStepSpec, Side

TOTAL_STEPS = 18

# (side, action, phase) in draft order; slots are derived
_ORDER = [
    (Side.BLUE, ActionType.BAN, 1),
    (Side.RED, ActionType.BAN, 1),
    (Side.BLUE, ActionType.BAN, 1),
    (Side.RED, ActionType.BAN, 1),
    (Side.BLUE, ActionType.PICK, 1),
    (Side.RED, ActionType.PICK, 1),
    (Side.RED, ActionType.PICK, 1),
    (Side.BLUE, ActionType.PICK, 1),
    (Side.BLUE, ActionType.PICK, 1),
    (Side.RED, ActionType.PICK, 1),
    (Side.RED, ActionType.BAN, 2),
    (Side.BLUE, ActionType.BAN, 2),
    (Side.RED, ActionType.BAN, 2),
    (Side.BLUE, ActionType.BAN, 2),
    (Side.RED, ActionType.PICK, 2),
    (Side.BLUE, ActionType.PICK, 2),
    (Side.BLUE, ActionType.PICK, 2),
    (Side.RED, ActionType.PICK, 2),
]


def _build_sequence() -> tuple[DraftStepSpec, ...]:
    counts: dict[tuple[Side, ActionType], int] = {}
    steps = []
    for order, (side, action, phase) in enumerate(_ORDER, start=1):
        slot = counts.get((side, action), 0) + 1
        counts[(side, action)] = slot
        label = f"{side.value.title()} {action.value.title()} {slot}"
        steps.append(DraftStepSpec(order=order, side=side, action=action, slot=slot, label=label, phase=phase))
    return tuple(steps)


DRAFT_SEQUENCE: tuple[DraftStepSpec, ...] = _build_sequence()


def step_at(index: int) -> Optional[DraftStepSpec]:
    """Return the step at a 0-based index, or None once the draft is complete."""
    if 0 <= index < TOTAL_STEPS:
        return DRAFT_SEQUENCE[index]
    return None


def phase_of(index: int) -> Optional[int]:
    """Return 1 or 2 for a step index, None outside the sequence."""
    step = step_at(index)
    return step.phase if step else None


def next_step_for(side: Side, action: ActionType, from_index: int = 0) -> Optional[DraftStepSpec]:
    """Find the next step at or after ``from_index`` where ``side`` performs ``action``.

    Used to evaluate a side's next ban while picks are still ongoing. If the side
    has no such step left, the last one of that kind is returned so scoring can
    still run against a sensible slot.
    """
    matching = [s for s in DRAFT_SEQUENCE if s.side == side and s.action == action]
    for step in matching:
        if step.index >= from_index:
            return step
    return matching[-1] if matching else None

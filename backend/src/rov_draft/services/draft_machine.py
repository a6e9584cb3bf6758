"""Draft state machine: sequencing, countdown and rehydration."""

import copy
import logging
import threading
from typing import Iterable, Optional

from rov_draft.exceptions import HeroUnavailableError, InvalidStateError, RoleExhaustedError
from rov_draft.models.draft import ActionType, DraftAction, DraftState, DraftStepSpec, Side
from rov_draft.models.hero import Hero
from rov_draft.models.reference import TeamProfile
from rov_draft.models.scoring import ScoringContext
from rov_draft.services.availability import MAX_PICKS, AvailabilityTracker
from rov_draft.utils.draft_sequence import TOTAL_STEPS, step_at

logger = logging.getLogger(__name__)

DEFAULT_BAN_SECONDS = 30
DEFAULT_PICK_SECONDS = 30


class DraftMachine:
    """Owns one DraftState and advances it one committed action at a time.

    ``commit`` and ``tick`` are the only mutators of the countdown and lists
    and are serialised by an internal lock. A new machine starts paused.
    """

    def __init__(
        self,
        heroes: dict[str, Hero],
        ban_seconds: int = DEFAULT_BAN_SECONDS,
        pick_seconds: int = DEFAULT_PICK_SECONDS,
    ):
        self.heroes = heroes
        self.timers = {ActionType.BAN: ban_seconds, ActionType.PICK: pick_seconds}
        self._lock = threading.RLock()
        self.tracker = AvailabilityTracker(heroes)
        self.state = DraftState(timer=self._duration_for(0))

    def _duration_for(self, step_index: int) -> int:
        step = step_at(step_index)
        return self.timers[step.action] if step else 0

    @property
    def current_step(self) -> Optional[DraftStepSpec]:
        return step_at(self.state.step_index)

    @property
    def finished(self) -> bool:
        return self.state.finished

    def is_expired(self) -> bool:
        """True when the countdown for the current step has reached zero.

        Expiry is advisory; the machine never commits on its own.
        """
        with self._lock:
            return not self.state.finished and self.state.timer <= 0

    def commit(self, hero_id: str, enforce_roles: bool = True, role_hint: Optional[str] = None) -> DraftAction:
        """Commit the current step's ban or pick.

        Raises:
            InvalidStateError: the draft is finished
            HeroUnavailableError: the hero is unknown or already used
            RoleExhaustedError: a pick cannot be slotted for the acting side

        A rejected commit leaves the state untouched.
        """
        with self._lock:
            step = self.current_step
            if self.state.finished or step is None:
                raise InvalidStateError("Draft is already finished", hero_id=hero_id, step_index=self.state.step_index)
            if hero_id not in self.heroes:
                raise HeroUnavailableError(f"Unknown hero: {hero_id}", hero_id=hero_id, step_index=step.index)
            if not self.tracker.is_available(hero_id):
                raise HeroUnavailableError(
                    f"{hero_id} is already banned or picked", hero_id=hero_id, step_index=step.index
                )

            action = self._record(step.side, step.action, hero_id, None, enforce_roles, role_hint)
            self._advance()
            logger.debug(f"Committed {step.label}: {hero_id}")
            return action

    def _record(
        self,
        side: Side,
        action_type: ActionType,
        hero_id: str,
        slot_index: Optional[int],
        enforce_roles: bool,
        role_hint: Optional[str] = None,
    ) -> DraftAction:
        if action_type == ActionType.BAN:
            slot = len(self.state.bans_for(side))
            self.tracker.record_ban(side, hero_id)
            self.state.bans_for(side).append(hero_id)
        else:
            picks = self.state.picks_for(side)
            if len(picks) >= MAX_PICKS:
                raise RoleExhaustedError(f"{side.value} already has {MAX_PICKS} picks", hero_id=hero_id)
            slot = slot_index if slot_index is not None else next(i for i in range(MAX_PICKS) if i not in picks)
            try:
                self.tracker.record_pick(side, hero_id, role_hint=role_hint, enforce_roles=enforce_roles)
            except RoleExhaustedError as e:
                e.step_index = self.state.step_index
                raise
            picks[slot] = hero_id

        action = DraftAction(side=side, action=action_type, hero_id=hero_id, slot_index=slot)
        self.state.actions.append(action)
        return action

    def _advance(self) -> None:
        self.state.step_index += 1
        if self.state.step_index >= TOTAL_STEPS:
            self.state.finished = True
            self.state.timer = 0
            logger.info("Draft finished")
        else:
            self.state.timer = self._duration_for(self.state.step_index)

    def tick(self) -> int:
        """Advance the countdown by one unit. Floors at zero, never auto-commits."""
        with self._lock:
            if not self.state.paused and not self.state.finished and self.state.timer > 0:
                self.state.timer -= 1
            return self.state.timer

    def toggle_pause(self) -> bool:
        with self._lock:
            if not self.state.finished:
                self.state.paused = not self.state.paused
            return self.state.paused

    def rehydrate(self, actions: Iterable[DraftAction]) -> DraftState:
        """Rebuild state from a persisted action list.

        Persisted actions are authoritative for roles, which are not enforced.
        Each action must match its step in the draft sequence, pick slots must
        be free and within 0-4, and a hero appearing twice is rejected. On failure the current state is kept.
        """
        actions = list(actions)
        if len(actions) > TOTAL_STEPS:
            raise InvalidStateError(f"Cannot rehydrate {len(actions)} actions; a draft has {TOTAL_STEPS} steps")

        with self._lock:
            previous_state, previous_tracker = self.state, self.tracker
            self.state = DraftState(paused=previous_state.paused)
            self.tracker = AvailabilityTracker(self.heroes)
            try:
                for i, action in enumerate(actions):
                    self._check_persisted(i, action)
                    if not self.tracker.is_available(action.hero_id):
                        raise HeroUnavailableError(
                            f"{action.hero_id} appears twice in persisted actions",
                            hero_id=action.hero_id,
                            step_index=i,
                        )
                    self._record(action.side, action.action, action.hero_id, action.slot_index, enforce_roles=False)
            except Exception:
                self.state, self.tracker = previous_state, previous_tracker
                raise

            self.state.step_index = len(actions)
            self.state.finished = self.state.step_index >= TOTAL_STEPS
            self.state.timer = self._duration_for(self.state.step_index)
            logger.info(f"Rehydrated draft at step {self.state.step_index}")
            return self.snapshot()

    def _check_persisted(self, index: int, action: DraftAction) -> None:
        step = step_at(index)
        if step.side != action.side or step.action != action.action:
            raise InvalidStateError(
                f"Persisted action {index} is {action.side.value} {action.action.value}, expected {step.label}",
                hero_id=action.hero_id,
                step_index=index,
            )
        if action.action == ActionType.PICK and action.slot_index is not None:
            picks = self.state.picks_for(action.side)
            if not 0 <= action.slot_index < MAX_PICKS or action.slot_index in picks:
                raise InvalidStateError(
                    f"Invalid pick slot {action.slot_index} for {step.label}",
                    hero_id=action.hero_id,
                    step_index=index,
                )

    def snapshot(self) -> DraftState:
        """Deep copy of the current state, safe to hand to other tasks."""
        with self._lock:
            return copy.deepcopy(self.state)

    def scoring_context(self, teams: dict[Side, TeamProfile], perspective_side: Side) -> ScoringContext:
        with self._lock:
            return self.tracker.scoring_context(teams, perspective_side)

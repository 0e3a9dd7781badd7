"""Funnel transition policy for leads moving through the sales pipeline.

The policy is a pure function of the stage list, the administrator override
rules and the requested move. It never touches the database; callers load a
consistent snapshot and apply the accepted move themselves.

Blocked moves are ordinary :class:`Verdict` values. Exceptions are reserved
for inconsistent input data (unknown stage ids, duplicate override rules).
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from operator import attrgetter
from typing import Any, TypeVar

from realty_crm.core.enums import GateAction
from realty_crm.core.exceptions import DataIntegrityError, DuplicateTransitionRuleError, StageNotFoundError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_QUALIFICATION_FRAGMENT = "qualif"
DEFAULT_MIN_ORDER = 2

ALREADY_IN_STAGE = "Lead is already in this stage."
BLOCKED_BY_RULE = "This transition is blocked by the funnel rules."
NO_STAGE_SKIPPING = "Cannot skip stages. Advance sequentially."

_GATE_WORDING = {
    GateAction.VISIT: "schedule a visit",
    GateAction.PROPOSAL: "create a proposal",
}


@dataclass(frozen=True)
class StageRecord:
    """A funnel stage as seen by the policy."""

    id: str
    name: str
    order: int


@dataclass(frozen=True)
class TransitionRuleRecord:
    """Administrator override for one ordered (origin, destination) pair."""

    origin_stage_id: str
    destination_stage_id: str
    allowed: bool
    justification: str | None = None


@dataclass(frozen=True)
class Verdict:
    """Outcome of a policy check.

    ``reason`` is only set on blocked verdicts. ``justification`` carries the
    administrator text of an override that allowed the move.
    """

    allowed: bool
    reason: str | None = None
    justification: str | None = None

    @classmethod
    def allow(cls, justification: str | None = None) -> "Verdict":
        return cls(allowed=True, justification=justification)

    @classmethod
    def block(cls, reason: str) -> "Verdict":
        return cls(allowed=False, reason=reason)


def _clean_text(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def _index_stages(stages: Iterable[StageRecord]) -> dict[str, StageRecord]:
    index: dict[str, StageRecord] = {}
    for stage in stages:
        if stage.id in index:
            raise DataIntegrityError(f"Duplicate funnel stage id: {stage.id}")
        index[stage.id] = stage
    return index


def duplicate_rule_pairs(rules: Iterable[TransitionRuleRecord]) -> dict[tuple[str, str], int]:
    """Map every (origin, destination) pair defined more than once to its rule count."""
    counts = Counter((rule.origin_stage_id, rule.destination_stage_id) for rule in rules)
    return {pair: count for pair, count in counts.items() if count > 1}


class FunnelPolicy:
    """Transition and eligibility checks bound to one stage/rule snapshot."""

    def __init__(
        self,
        stages: Iterable[StageRecord],
        rules: Iterable[TransitionRuleRecord] = (),
        qualification_fragment: str = DEFAULT_QUALIFICATION_FRAGMENT,
        default_min_order: int = DEFAULT_MIN_ORDER,
    ) -> None:
        self._stages = tuple(stages)
        self._rules = tuple(rules)
        self._index = _index_stages(self._stages)
        self.qualification_fragment = qualification_fragment
        self.default_min_order = default_min_order

    @property
    def stages(self) -> tuple[StageRecord, ...]:
        return self._stages

    @property
    def rules(self) -> tuple[TransitionRuleRecord, ...]:
        return self._rules

    def stage(self, stage_id: str) -> StageRecord:
        try:
            return self._index[stage_id]
        except KeyError as exc:
            raise StageNotFoundError(stage_id) from exc

    def entry_stage(self) -> StageRecord:
        """Stage with the lowest order; new and reactivated leads start here."""
        if not self._stages:
            raise DataIntegrityError("Funnel has no stages; cannot resolve the entry stage.")
        return min(self._stages, key=attrgetter("order"))

    def find_rule(self, origin_stage_id: str, destination_stage_id: str) -> TransitionRuleRecord | None:
        matches = [
            rule
            for rule in self._rules
            if rule.origin_stage_id == origin_stage_id and rule.destination_stage_id == destination_stage_id
        ]
        if len(matches) > 1:
            raise DuplicateTransitionRuleError(origin_stage_id, destination_stage_id, len(matches))
        return matches[0] if matches else None

    def evaluate_transition(self, origin_stage_id: str, destination_stage_id: str) -> Verdict:
        origin = self.stage(origin_stage_id)
        destination = self.stage(destination_stage_id)

        if origin.id == destination.id:
            return Verdict.block(ALREADY_IN_STAGE)

        rule = self.find_rule(origin.id, destination.id)
        if rule is not None:
            justification = _clean_text(rule.justification)
            if rule.allowed:
                return Verdict.allow(justification=justification)
            return Verdict.block(justification or BLOCKED_BY_RULE)

        # Backward moves and single-step advances are free; only skips are blocked.
        if destination.order - origin.order > 1:
            return Verdict.block(NO_STAGE_SKIPPING)
        return Verdict.allow()

    def threshold_stage(self) -> StageRecord | None:
        """First stage, in snapshot order, whose name contains the qualification fragment."""
        needle = self.qualification_fragment.casefold()
        for stage in self._stages:
            if needle in stage.name.casefold():
                return stage
        return None

    def minimum_order(self) -> int:
        threshold = self.threshold_stage()
        if threshold is None:
            return self.default_min_order
        return threshold.order

    def _threshold_label(self) -> str:
        threshold = self.threshold_stage()
        if threshold is None:
            threshold = next((s for s in self._stages if s.order == self.default_min_order), None)
        if threshold is None:
            return f"order {self.default_min_order}"
        return threshold.name

    def meets_minimum_stage(self, lead_stage_id: str, action: GateAction | str = GateAction.VISIT) -> Verdict:
        current = self.stage(lead_stage_id)
        if current.order >= self.minimum_order():
            return Verdict.allow()
        wording = _GATE_WORDING[GateAction(action)]
        return Verdict.block(f"Lead must be at least in '{self._threshold_label()}' stage to {wording}.")

    def can_schedule_visit(self, lead_stage_id: str) -> Verdict:
        return self.meets_minimum_stage(lead_stage_id, GateAction.VISIT)

    def can_create_proposal(self, lead_stage_id: str) -> Verdict:
        return self.meets_minimum_stage(lead_stage_id, GateAction.PROPOSAL)

    def filter_eligible(
        self,
        items: Iterable[T],
        stage_id_of: Callable[[T], Any] = attrgetter("stage_id"),
    ) -> list[T]:
        """Keep items whose stage has reached the minimum order.

        Items pointing at a stage missing from the snapshot are dropped.
        """
        min_order = self.minimum_order()
        eligible: list[T] = []
        for item in items:
            stage_id = stage_id_of(item)
            stage = self._index.get(stage_id)
            if stage is None:
                logger.warning(
                    "funnel.eligibility.unknown_stage",
                    extra={"event": "funnel.eligibility.unknown_stage", "stage_id": stage_id},
                )
                continue
            if stage.order >= min_order:
                eligible.append(item)
        return eligible


def evaluate_transition(
    origin_stage_id: str,
    destination_stage_id: str,
    stages: Iterable[StageRecord],
    rules: Iterable[TransitionRuleRecord] = (),
) -> Verdict:
    """Decide whether a lead may move from ``origin_stage_id`` to ``destination_stage_id``."""
    return FunnelPolicy(stages, rules).evaluate_transition(origin_stage_id, destination_stage_id)


def meets_minimum_stage(
    lead_stage_id: str,
    stages: Iterable[StageRecord],
    required_stage_name_fragment: str = DEFAULT_QUALIFICATION_FRAGMENT,
    action: GateAction | str = GateAction.VISIT,
    default_min_order: int = DEFAULT_MIN_ORDER,
) -> Verdict:
    """Check that a lead sits at or beyond the stage named by the fragment."""
    policy = FunnelPolicy(
        stages,
        qualification_fragment=required_stage_name_fragment,
        default_min_order=default_min_order,
    )
    return policy.meets_minimum_stage(lead_stage_id, action)


def filter_eligible(
    items: Iterable[T],
    stages: Iterable[StageRecord],
    required_stage_name_fragment: str = DEFAULT_QUALIFICATION_FRAGMENT,
    default_min_order: int = DEFAULT_MIN_ORDER,
    stage_id_of: Callable[[T], Any] = attrgetter("stage_id"),
) -> list[T]:
    policy = FunnelPolicy(
        stages,
        qualification_fragment=required_stage_name_fragment,
        default_min_order=default_min_order,
    )
    return policy.filter_eligible(items, stage_id_of=stage_id_of)


def entry_stage(stages: Iterable[StageRecord]) -> StageRecord:
    return FunnelPolicy(stages).entry_stage()

"""Lifecycle of a single drag gesture from pick-up to commit or rejection."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from schema_mapper.mapping.compatibility import resolve_value_mapping
from schema_mapper.mapping.ledger import ValidationLedger
from schema_mapper.mapping.types import (
    ColumnDescriptor,
    DragPhase,
    DropFeedback,
    SchemaTarget,
    ValidationIssue,
    ValueMapping,
)
from schema_mapper.mapping.validator import MappingValidator, is_well_formed

logger = logging.getLogger(__name__)

TransitionListener = Callable[[DragPhase, DragPhase], None]

# Ledger source for issues recorded while hovering.
HOVER_SOURCE = "drag-hover"


class InvalidTransitionError(RuntimeError):
    """Raised when a caller drives the gesture out of sequence."""


@dataclass(slots=True)
class DragSession:
    """Ephemeral state of one gesture; cleared at the end of every gesture."""

    dragged_column: ColumnDescriptor | None = None
    phase: DragPhase = "idle"
    hovered_path: str | None = None
    valid_target_paths: frozenset[str] = field(default_factory=frozenset)

    def clear(self) -> None:
        self.dragged_column = None
        self.phase = "idle"
        self.hovered_path = None
        self.valid_target_paths = frozenset()


@dataclass(frozen=True, slots=True)
class DropResult:
    """Outcome of a commit attempt."""

    accepted: bool
    feedback: DropFeedback
    column: ColumnDescriptor | None = None
    target: SchemaTarget | None = None
    issue: ValidationIssue | None = None

    def build_mapping(self) -> ValueMapping:
        if not self.accepted or self.column is None or self.target is None:
            raise InvalidTransitionError("only accepted drops produce a value mapping")
        return resolve_value_mapping(self.column, self.target)


class DragInteraction:
    """Drag state machine for one editing surface.

    Phases: ``idle -> dragging -> dropping -> idle`` on success, and
    ``dropping -> invalid -> idle`` on rejection. Every method returns after
    the transition is applied; nothing is deferred.
    """

    def __init__(
        self,
        validator: MappingValidator,
        ledger: ValidationLedger,
        targets: Iterable[SchemaTarget] = (),
        *,
        record_hover_issues: bool = True,
        on_transition: TransitionListener | None = None,
    ) -> None:
        self.validator = validator
        self.ledger = ledger
        self.record_hover_issues = record_hover_issues
        self.on_transition = on_transition
        self.session = DragSession()
        self.feedback: DropFeedback | None = None
        self._targets: dict[str, SchemaTarget] = {}
        self._load_targets(targets)

    @property
    def phase(self) -> DragPhase:
        return self.session.phase

    @property
    def is_dragging(self) -> bool:
        return self.session.phase == "dragging"

    @property
    def is_dropping(self) -> bool:
        return self.session.phase == "dropping"

    @property
    def available_targets(self) -> list[SchemaTarget]:
        return list(self._targets.values())

    @property
    def valid_targets(self) -> list[SchemaTarget]:
        valid = self.session.valid_target_paths
        return [target for path, target in self._targets.items() if path in valid]

    @property
    def has_valid_targets(self) -> bool:
        return bool(self.session.valid_target_paths)

    @property
    def hovered_target(self) -> SchemaTarget | None:
        if self.session.hovered_path is None:
            return None
        return self._targets.get(self.session.hovered_path)

    @property
    def is_valid_drop(self) -> bool:
        column = self.session.dragged_column
        target = self.hovered_target
        if column is None or target is None:
            return False
        return self.validator.validate(column, target).is_valid

    def target_for(self, path: str) -> SchemaTarget | None:
        return self._targets.get(path)

    def set_available_targets(self, targets: Iterable[SchemaTarget]) -> None:
        """Replace the registered targets wholesale; an in-flight gesture is cancelled."""

        if self.session.phase != "idle":
            logger.info("Target set replaced mid-gesture; cancelling drag of %s", self._column_name())
            self.cancel()
        self._load_targets(targets)

    def pick_up(self, column: ColumnDescriptor) -> frozenset[str]:
        """Start a gesture and freeze the valid target paths for ``column``."""

        if self.session.phase != "idle":
            logger.debug("Pick-up during %s gesture; restarting session", self.session.phase)
            self.cancel()
        self.feedback = None
        self.session.dragged_column = column
        self.session.valid_target_paths = self.validator.compatible_target_paths(
            column, self._targets.values()
        )
        self._set_phase("dragging")
        logger.debug(
            "Picked up column %s with %d valid targets",
            column.name,
            len(self.session.valid_target_paths),
        )
        return self.session.valid_target_paths

    def hover(self, path: str | None) -> DropFeedback | None:
        """Select the hovered target and compute its full validation as live feedback."""

        if self.session.phase != "dragging":
            logger.debug("Ignoring hover over %s while %s", path, self.session.phase)
            return None
        if path is None:
            self.leave()
            return None

        self._forget_hover_issues()
        self.session.hovered_path = path
        column = self.session.dragged_column
        target = self._targets.get(path)
        if column is None or target is None:
            self.feedback = None
            return None

        if self.record_hover_issues:
            outcome = self.validator.validate(column, target)
            self.ledger.replace_from(HOVER_SOURCE, [outcome.issue] if outcome.issue is not None else [])
        self.feedback = self.validator.get_validation_feedback(column, target)
        return self.feedback

    def leave(self) -> None:
        if self.session.phase != "dragging":
            return
        self._forget_hover_issues()
        self.session.hovered_path = None
        self.feedback = None

    def request_drop(self) -> DropResult:
        """Attempt to commit the dragged column onto the hovered target."""

        if self.session.phase != "dragging":
            raise InvalidTransitionError(f"cannot drop while {self.session.phase}")

        column = self.session.dragged_column
        target = self.hovered_target
        self._set_phase("dropping")

        if column is None or target is None:
            feedback = DropFeedback(kind="error", message="No drop target selected")
            self._reject(feedback)
            return DropResult(accepted=False, feedback=feedback, column=column)

        outcome = self.validator.validate(column, target)
        if outcome.is_valid:
            self._forget_hover_issues()
            self.ledger.clear_for_path(target.path)
            self.feedback = DropFeedback(
                kind="success",
                message=f"Successfully mapped '{column.name}' to {target.kind}",
            )
            return DropResult(accepted=True, feedback=self.feedback, column=column, target=target)

        issue = outcome.issue
        self._forget_hover_issues()
        self.ledger.replace(target.path, [issue] if issue is not None else [])
        feedback = DropFeedback(kind="error", message=issue.message if issue else "Drop operation failed")
        logger.info("Rejected drop of column %s onto %s: %s", column.name, target.path, feedback.message)
        self._reject(feedback)
        return DropResult(accepted=False, feedback=feedback, column=column, target=target, issue=issue)

    def complete(self) -> None:
        """Finish an accepted drop after the caller has stored the mapping."""

        if self.session.phase != "dropping":
            raise InvalidTransitionError(f"cannot complete a drop while {self.session.phase}")
        self._end_session()

    def cancel(self) -> None:
        """Abandon the gesture without committing anything."""

        self._forget_hover_issues()
        self.feedback = None
        if self.session.phase != "idle":
            logger.debug("Cancelled drag of %s", self._column_name())
        self._end_session()

    def _reject(self, feedback: DropFeedback) -> None:
        self._set_phase("invalid")
        self._end_session()
        self.feedback = feedback

    def _end_session(self) -> None:
        previous = self.session.phase
        self.session.clear()
        if previous != "idle":
            self._notify(previous, "idle")

    def _forget_hover_issues(self) -> None:
        self.ledger.replace_from(HOVER_SOURCE, [])

    def _set_phase(self, phase: DragPhase) -> None:
        previous = self.session.phase
        self.session.phase = phase
        if previous != phase:
            self._notify(previous, phase)

    def _notify(self, previous: DragPhase, current: DragPhase) -> None:
        logger.debug("Drag phase %s -> %s", previous, current)
        if self.on_transition is not None:
            self.on_transition(previous, current)

    def _load_targets(self, targets: Iterable[SchemaTarget]) -> None:
        self._targets = {}
        for target in targets:
            if not is_well_formed(target):
                logger.warning("Ignoring misconfigured drop target %s", target.path)
                continue
            if target.path in self._targets:
                logger.warning("Duplicate target path %s; keeping the last definition", target.path)
            self._targets[target.path] = target

    def _column_name(self) -> str | None:
        column = self.session.dragged_column
        return column.name if column is not None else None

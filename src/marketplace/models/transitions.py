"""Transition tables for the project, request and proposal state machines.

Each table has exactly one entry per status. Terminal statuses map to an
empty set. The tables are read-only mappings so they cannot be patched at
runtime.
"""

from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType
from typing import TypeVar

from src.marketplace.core.exceptions import InvalidStateError
from src.marketplace.models.enums import ProjectStatus, ProposalStatus, RequestStatus

S = TypeVar("S", bound=Enum)

PROJECT_TRANSITIONS: Mapping[ProjectStatus, frozenset[ProjectStatus]] = MappingProxyType(
    {
        ProjectStatus.DRAFT: frozenset(
            {ProjectStatus.SEEKING_DESIGNER, ProjectStatus.CANCELLED}
        ),
        ProjectStatus.SEEKING_DESIGNER: frozenset(
            {ProjectStatus.IN_PROGRESS, ProjectStatus.CANCELLED}
        ),
        ProjectStatus.IN_PROGRESS: frozenset(
            {ProjectStatus.COMPLETED, ProjectStatus.CANCELLED}
        ),
        ProjectStatus.COMPLETED: frozenset(),
        ProjectStatus.CANCELLED: frozenset(),
    }
)

REQUEST_TRANSITIONS: Mapping[RequestStatus, frozenset[RequestStatus]] = MappingProxyType(
    {
        RequestStatus.PENDING: frozenset(
            {RequestStatus.PROPOSAL_SUBMITTED, RequestStatus.REJECTED}
        ),
        RequestStatus.PROPOSAL_SUBMITTED: frozenset(
            {RequestStatus.ACCEPTED, RequestStatus.REJECTED}
        ),
        RequestStatus.ACCEPTED: frozenset(),
        RequestStatus.REJECTED: frozenset(),
    }
)

PROPOSAL_TRANSITIONS: Mapping[ProposalStatus, frozenset[ProposalStatus]] = MappingProxyType(
    {
        ProposalStatus.SUBMITTED: frozenset(
            {ProposalStatus.ACCEPTED, ProposalStatus.REJECTED}
        ),
        ProposalStatus.ACCEPTED: frozenset(),
        ProposalStatus.REJECTED: frozenset(),
    }
)

_TABLES: Mapping[type[Enum], Mapping] = MappingProxyType(
    {
        ProjectStatus: PROJECT_TRANSITIONS,
        RequestStatus: REQUEST_TRANSITIONS,
        ProposalStatus: PROPOSAL_TRANSITIONS,
    }
)


def _table_for(status: Enum) -> Mapping:
    table = _TABLES.get(type(status))
    if table is None:
        raise TypeError(f"No transition table for {type(status).__name__}")
    return table


def allowed_transitions(status: S) -> frozenset[S]:
    """Statuses reachable from `status` in one step."""
    return _table_for(status)[status]


def can_transition(current: S, target: S) -> bool:
    """Whether `current -> target` is a legal edge.

    Both statuses must belong to the same state machine.
    """
    if type(current) is not type(target):
        raise TypeError(
            f"Cannot compare {type(current).__name__} with {type(target).__name__}"
        )
    return target in _table_for(current)[current]


def is_terminal(status: Enum) -> bool:
    return not _table_for(status)[status]


def ensure_transition(current: S, target: S) -> None:
    """Raise InvalidStateError unless `current -> target` is legal."""
    if not can_transition(current, target):
        raise InvalidStateError(
            f"Cannot transition from {current.value} to {target.value}"
        )

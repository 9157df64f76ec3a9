"""Complaint workflow and role visibility rules.

This is the single home for "who may do what" so the complaint store, the
dashboard derivations and any presentation layer agree.

Workflow graph (direct edges)::

    pending   -> reviewing | rejected
    reviewing -> escalated | resolved | rejected
    escalated -> resolved  | rejected

``resolved`` and ``rejected`` are terminal.  A status change is allowed
when the target is reachable from the current status through these edges,
so a representative may skip an intermediate stage but never move a
complaint backwards or out of a terminal state.
"""

from __future__ import annotations

from typing import Final

from janvani.models.complaint import Complaint
from janvani.models.enums import ComplaintStatus, Role
from janvani.models.user import User

_EDGES: Final[dict[ComplaintStatus, frozenset[ComplaintStatus]]] = {
    ComplaintStatus.PENDING: frozenset({ComplaintStatus.REVIEWING, ComplaintStatus.REJECTED}),
    ComplaintStatus.REVIEWING: frozenset(
        {ComplaintStatus.ESCALATED, ComplaintStatus.RESOLVED, ComplaintStatus.REJECTED}
    ),
    ComplaintStatus.ESCALATED: frozenset({ComplaintStatus.RESOLVED, ComplaintStatus.REJECTED}),
    ComplaintStatus.RESOLVED: frozenset(),
    ComplaintStatus.REJECTED: frozenset(),
}

TERMINAL_STATUSES: Final[frozenset[ComplaintStatus]] = frozenset(
    status for status, targets in _EDGES.items() if not targets
)

_DASHBOARD_ROLES: Final[frozenset[Role]] = frozenset({Role.MLA, Role.DISTRICT, Role.CENTRAL})


def _reachable_from(status: ComplaintStatus) -> frozenset[ComplaintStatus]:
    seen: set[ComplaintStatus] = set()
    frontier = list(_EDGES[status])
    while frontier:
        nxt = frontier.pop()
        if nxt not in seen:
            seen.add(nxt)
            frontier.extend(_EDGES[nxt])
    return frozenset(seen)


_REACHABLE: Final[dict[ComplaintStatus, frozenset[ComplaintStatus]]] = {
    status: _reachable_from(status) for status in ComplaintStatus
}


def next_statuses(current: ComplaintStatus) -> frozenset[ComplaintStatus]:
    """Direct successors of *current* in the workflow graph."""
    return _EDGES[current]


def is_transition_allowed(
    current: ComplaintStatus,
    target: ComplaintStatus,
    *,
    strict: bool = True,
) -> bool:
    """Return True if a complaint may move from *current* to *target*.

    With ``strict=False`` any change is accepted.
    """
    if current == target:
        return True
    if not strict:
        return True
    return target in _REACHABLE[current]


def can_change_status(user: User | None, complaint: Complaint) -> bool:
    """Role gate for status updates, independent of the target status.

    MLA and central users may always act; district users only while the
    complaint is escalated; voters never.
    """
    if user is None:
        return False
    if user.role in (Role.MLA, Role.CENTRAL):
        return True
    if user.role == Role.DISTRICT:
        return complaint.status == ComplaintStatus.ESCALATED
    return False


def allowed_status_targets(
    user: User | None,
    complaint: Complaint,
    *,
    strict: bool = True,
) -> list[ComplaintStatus]:
    """Statuses *user* could set on *complaint*, in workflow order.

    The current status is included when the user may act at all, so a
    status picker can show it as the selected value.
    """
    if not can_change_status(user, complaint):
        return []
    return [
        status
        for status in ComplaintStatus
        if is_transition_allowed(complaint.status, status, strict=strict)
    ]


def can_view_dashboard(user: User | None) -> bool:
    return user is not None and user.role in _DASHBOARD_ROLES

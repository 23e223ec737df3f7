r"""
Order lifecycle states and the transitions offered to an operator.

    pending -> in_progress -> delivered
       \            \
        +------------+-> cancelled

delivered and cancelled are terminal. Which transitions an account may
actually persist is decided by the permission layer, not here.
"""

PENDING = 'pending'
IN_PROGRESS = 'in_progress'
DELIVERED = 'delivered'
CANCELLED = 'cancelled'

STATUS_CHOICES = [
    (PENDING, 'Pending'),
    (IN_PROGRESS, 'In Progress'),
    (DELIVERED, 'Delivered'),
    (CANCELLED, 'Cancelled'),
]

ALL_STATUSES = tuple(value for value, _ in STATUS_CHOICES)
TERMINAL_STATUSES = frozenset({DELIVERED, CANCELLED})
OPEN_STATUSES = tuple(s for s in ALL_STATUSES if s not in TERMINAL_STATUSES)

# Once work has started or concluded an order never returns to pending
_STARTED_STATUSES = frozenset({IN_PROGRESS, DELIVERED, CANCELLED})


class InvalidStatusTransition(Exception):
    """Raised when a requested status change is not in the offered set."""

    def __init__(self, current, target):
        self.current = current
        self.target = target
        super().__init__(f"Cannot change order status from '{current}' to '{target}'")


def get_status_label(status):
    return dict(STATUS_CHOICES).get(status, status)


def is_terminal(status):
    return status in TERMINAL_STATUSES


def offered_transitions(current):
    """
    Statuses an operator may pick for an order currently in `current`,
    in lifecycle order.
    """
    if current not in ALL_STATUSES:
        raise ValueError(f"Unknown order status: {current!r}")
    if current in TERMINAL_STATUSES:
        return []

    offered = []
    for status in ALL_STATUSES:
        if status == current:
            continue
        if status == PENDING and current in _STARTED_STATUSES:
            continue
        offered.append(status)
    return offered


def can_transition(current, target):
    return target in offered_transitions(current)


def ensure_transition(current, target):
    if not can_transition(current, target):
        raise InvalidStatusTransition(current, target)

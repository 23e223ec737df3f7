"""
Delivery urgency classification.

An order's urgency is derived on read from its latest acceptable delivery
date and is never stored. Overdue orders are classified as urgent; there is
no separate overdue tier.
"""
from dataclasses import dataclass
from datetime import date, datetime

from django.conf import settings
from django.utils import timezone


URGENT = 'urgent'
SOON = 'soon'
NORMAL = 'normal'

TIER_ORDER = (URGENT, SOON, NORMAL)


@dataclass(frozen=True)
class Urgency:
    tier: str
    label: str
    advisory: str
    # Badge style used by clients
    variant: str

    def as_dict(self):
        return {
            'tier': self.tier,
            'label': self.label,
            'advisory': self.advisory,
            'variant': self.variant,
        }


URGENCY_LEVELS = {
    URGENT: Urgency(
        tier=URGENT,
        label='Urgent',
        advisory='Urgent delivery. Confirm supplier availability as soon as possible.',
        variant='destructive',
    ),
    SOON: Urgency(
        tier=SOON,
        label='Soon',
        advisory='Moderate lead time. Plan the delivery with your suppliers.',
        variant='default',
    ),
    NORMAL: Urgency(
        tier=NORMAL,
        label='Normal',
        advisory='Flexible schedule. Standard shipping can be used to optimize costs.',
        variant='secondary',
    ),
}


def _as_local_date(value):
    if isinstance(value, datetime):
        if timezone.is_aware(value):
            value = timezone.localtime(value)
        return value.date()
    if isinstance(value, date):
        return value
    raise TypeError(f"Expected a date or datetime, got {type(value).__name__}")


def days_remaining(deadline, today=None):
    """
    Whole calendar days from `today` until `deadline`. Time of day is ignored
    on both sides, so a deadline later today is 0 and yesterday is -1.
    """
    today = _as_local_date(today) if today is not None else timezone.localdate()
    return (_as_local_date(deadline) - today).days


def classify_days(days):
    if days <= getattr(settings, 'ORDER_URGENT_THRESHOLD_DAYS', 3):
        return URGENCY_LEVELS[URGENT]
    if days <= getattr(settings, 'ORDER_SOON_THRESHOLD_DAYS', 10):
        return URGENCY_LEVELS[SOON]
    return URGENCY_LEVELS[NORMAL]


def classify_urgency(deadline, today=None):
    """
    Classify a delivery deadline into urgent / soon / normal.

    Args:
        deadline: latest acceptable delivery date (date or datetime)
        today: reference day, defaults to the current local date

    Returns:
        Urgency
    """
    return classify_days(days_remaining(deadline, today))


def group_by_urgency(orders, today=None):
    """Bucket orders by the urgency of their delivery window end."""
    today = today if today is not None else timezone.localdate()
    groups = {tier: [] for tier in TIER_ORDER}
    for order in orders:
        groups[classify_urgency(order.delivery_window_end, today).tier].append(order)
    return groups

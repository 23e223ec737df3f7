import pytest

from orders.status_machine import (
    ALL_STATUSES,
    CANCELLED,
    DELIVERED,
    IN_PROGRESS,
    PENDING,
    InvalidStatusTransition,
    can_transition,
    ensure_transition,
    get_status_label,
    is_terminal,
    offered_transitions,
)


def test_pending_offers_every_other_status():
    assert offered_transitions(PENDING) == [IN_PROGRESS, DELIVERED, CANCELLED]


def test_in_progress_never_goes_back_to_pending():
    assert offered_transitions(IN_PROGRESS) == [DELIVERED, CANCELLED]


@pytest.mark.parametrize("status", [DELIVERED, CANCELLED])
def test_terminal_statuses_offer_nothing(status):
    assert is_terminal(status)
    assert offered_transitions(status) == []


@pytest.mark.parametrize("status", ALL_STATUSES)
def test_current_status_is_never_offered(status):
    assert status not in offered_transitions(status)


@pytest.mark.parametrize("status", [IN_PROGRESS, DELIVERED, CANCELLED])
def test_pending_is_never_offered_once_started(status):
    assert PENDING not in offered_transitions(status)


def test_unknown_status_is_rejected():
    with pytest.raises(ValueError):
        offered_transitions('on_hold')


def test_ensure_transition_raises_for_unoffered_target():
    ensure_transition(PENDING, IN_PROGRESS)
    with pytest.raises(InvalidStatusTransition) as exc_info:
        ensure_transition(DELIVERED, PENDING)
    assert exc_info.value.current == DELIVERED
    assert exc_info.value.target == PENDING
    assert not can_transition(CANCELLED, IN_PROGRESS)


def test_labels():
    assert get_status_label(IN_PROGRESS) == 'In Progress'
    assert get_status_label('unknown') == 'unknown'


def test_module_source_compiles_without_warnings():
    import inspect
    import warnings
    from orders import status_machine

    source = inspect.getsource(status_machine)
    with warnings.catch_warnings():
        warnings.simplefilter('error')
        compile(source, status_machine.__file__, 'exec')

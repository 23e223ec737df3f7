from rest_framework.test import APIClient

from notifications.models import Notification
from notifications.services import NotificationService


def _notify(user, count=1, is_read=False):
    return [
        Notification.objects.create(
            user=user,
            notification_type='status_changed',
            title='Order Status Updated',
            message=f'message {i}',
            order_label='Torre Norte',
            status='in_progress',
            is_read=is_read,
        )
        for i in range(count)
    ]


def test_list_is_limited_and_newest_first(customer_client, customer, settings):
    settings.NOTIFICATION_LIST_LIMIT = 3
    _notify(customer, count=5)

    response = customer_client.get('/api/notifications/')

    assert response.status_code == 200
    assert len(response.data['notifications']) == 3
    assert response.data['unread_count'] == 5
    ids = [n['id'] for n in response.data['notifications']]
    assert ids == sorted(ids, reverse=True)


def test_unread_only_filter(customer_client, customer):
    _notify(customer, count=2)
    _notify(customer, count=1, is_read=True)

    response = customer_client.get('/api/notifications/', {'unread_only': 'true'})

    assert len(response.data['notifications']) == 2
    assert all(not n['is_read'] for n in response.data['notifications'])


def test_mark_one_read(customer_client, customer):
    notification = _notify(customer)[0]

    response = customer_client.post(f'/api/notifications/{notification.id}/mark-read/')

    assert response.status_code == 200
    notification.refresh_from_db()
    assert notification.is_read


def test_cannot_mark_someone_elses_notification(customer_client, other_customer):
    notification = _notify(other_customer)[0]

    response = customer_client.post(f'/api/notifications/{notification.id}/mark-read/')

    assert response.status_code == 404
    notification.refresh_from_db()
    assert not notification.is_read


def test_mark_many_read_ignores_foreign_ids(customer_client, customer, other_customer):
    mine = _notify(customer, count=2)
    theirs = _notify(other_customer)[0]

    response = customer_client.post(
        '/api/notifications/mark-read/', {'ids': [n.id for n in mine] + [theirs.id]}, format='json'
    )

    assert response.status_code == 200
    assert response.data['count'] == 2
    theirs.refresh_from_db()
    assert not theirs.is_read


def test_mark_all_read(customer_client, customer, other_customer):
    _notify(customer, count=3)
    _notify(other_customer)

    response = customer_client.post('/api/notifications/mark-all-read/')

    assert response.data['count'] == 3
    assert NotificationService.get_unread_count(customer) == 0
    assert NotificationService.get_unread_count(other_customer) == 1


def test_notifications_require_authentication():
    assert APIClient().get('/api/notifications/').status_code in (401, 403)


def test_notification_survives_order_deletion(make_order, customer):
    order = make_order()
    notification = NotificationService.notify_owner_status_changed(order, 'in_progress')

    order.delete()

    notification.refresh_from_db()
    assert notification.order is None
    assert notification.order_label == 'Torre Norte'


def test_fan_out_without_admins_creates_nothing(make_order):
    assert NotificationService.notify_admins_new_order(make_order()) == 0

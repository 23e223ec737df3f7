from notifications.models import Notification
from orders.models import Order, OrderStatusHistory


def test_admin_endpoints_reject_customers(customer_client, make_order):
    order = make_order()
    assert customer_client.get('/api/admin/orders/').status_code == 403
    assert customer_client.get('/api/admin/statistics/').status_code == 403
    response = customer_client.post(f'/api/admin/orders/{order.id}/update-status/', {'status': 'in_progress'})
    assert response.status_code == 403


def test_order_list_filters_and_search(admin_client, make_order):
    make_order(site_name='Torre Norte')
    make_order(site_name='Plaza Sur', status='delivered')

    response = admin_client.get('/api/admin/orders/')
    assert len(response.data) == 2
    assert response.data[0]['user']['email'] == 'customer@example.com'

    response = admin_client.get('/api/admin/orders/', {'search': 'torre'})
    assert [o['site_name'] for o in response.data] == ['Torre Norte']

    response = admin_client.get('/api/admin/orders/', {'status': 'delivered'})
    assert [o['site_name'] for o in response.data] == ['Plaza Sur']


def test_status_change_records_history_and_notifies_owner_once(admin_client, admin_user, customer, make_order):
    order = make_order()

    response = admin_client.post(
        f'/api/admin/orders/{order.id}/update-status/', {'status': 'in_progress', 'reason': 'Supplier confirmed'}
    )

    assert response.status_code == 200
    order.refresh_from_db()
    assert order.status == 'in_progress'

    history = OrderStatusHistory.objects.get(order=order)
    assert (history.old_status, history.new_status, history.changed_by) == ('pending', 'in_progress', admin_user)

    notifications = Notification.objects.filter(order=order, notification_type='status_changed')
    assert notifications.count() == 1
    assert notifications[0].user == customer
    assert notifications[0].status == 'in_progress'
    assert 'In Progress' in notifications[0].message


def test_invalid_transition_is_rejected(admin_client, make_order):
    order = make_order(status='delivered')

    response = admin_client.post(f'/api/admin/orders/{order.id}/update-status/', {'status': 'pending'})

    assert response.status_code == 400
    order.refresh_from_db()
    assert order.status == 'delivered'
    assert not Notification.objects.filter(order=order).exists()


def test_owner_notification_failure_keeps_status_change(admin_client, make_order, monkeypatch):
    from notifications.services import NotificationService

    def _boom(order, new_status):
        raise RuntimeError('notification store down')

    monkeypatch.setattr(NotificationService, 'notify_owner_status_changed', staticmethod(_boom))
    order = make_order()

    response = admin_client.post(f'/api/admin/orders/{order.id}/update-status/', {'status': 'cancelled'})

    assert response.status_code == 200
    order.refresh_from_db()
    assert order.status == 'cancelled'


def test_order_detail_includes_history(admin_client, make_order):
    order = make_order()
    admin_client.post(f'/api/admin/orders/{order.id}/update-status/', {'status': 'in_progress'})

    response = admin_client.get(f'/api/admin/orders/{order.id}/')

    assert response.status_code == 200
    assert [h['new_status'] for h in response.data['status_history']] == ['in_progress']
    assert response.data['status_history'][0]['changed_by'] == 'admin@example.com'


def test_urgency_board_groups_open_orders(admin_client, make_order):
    urgent = make_order(end_in_days=2)
    overdue = make_order(end_in_days=-1, status='in_progress')
    soon = make_order(end_in_days=7)
    normal = make_order(end_in_days=30)
    make_order(end_in_days=1, status='delivered')
    make_order(end_in_days=1, status='cancelled')

    response = admin_client.get('/api/admin/orders/urgency/')

    assert response.status_code == 200
    assert response.data['urgent']['count'] == 2
    assert [o['id'] for o in response.data['urgent']['orders']] == [str(overdue.id), str(urgent.id)]
    assert [o['id'] for o in response.data['soon']['orders']] == [str(soon.id)]
    assert [o['id'] for o in response.data['normal']['orders']] == [str(normal.id)]


def test_delete_order(admin_client, make_order):
    order = make_order()

    response = admin_client.delete(f'/api/admin/orders/{order.id}/delete/')

    assert response.status_code == 200
    assert not Order.objects.filter(id=order.id).exists()


def test_admin_pdf(admin_client, make_order):
    order = make_order(payment_type='credit')
    response = admin_client.get(f'/api/admin/orders/{order.id}/pdf/')
    assert response.status_code == 200
    assert response.content.startswith(b'%PDF')


def test_statistics(admin_client, make_order, other_customer):
    make_order()
    make_order(status='delivered')
    make_order(user=other_customer, status='cancelled')

    response = admin_client.get('/api/admin/statistics/')

    assert response.status_code == 200
    assert response.data['total_customers'] == 2
    assert response.data['total_orders'] == 3
    assert response.data['status_counts']['delivered']['count'] == 1
    assert response.data['status_counts']['in_progress']['count'] == 0
    assert response.data['monthly_totals'][-1]['order_count'] == 3


def test_rejected_transition_offers_statuses_of_current_row(admin_client, make_order, monkeypatch):
    from admin_panel import views

    order = make_order()
    loaded = Order.objects.get(pk=order.pk)
    Order.objects.filter(pk=order.pk).update(status='delivered')
    monkeypatch.setattr(views, 'get_object_or_404', lambda model, **kwargs: loaded)

    response = admin_client.post(f'/api/admin/orders/{order.id}/update-status/', {'status': 'in_progress'})

    assert response.status_code == 400
    assert response.data['available_statuses'] == []
    assert not OrderStatusHistory.objects.filter(order=order).exists()

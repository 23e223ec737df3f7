from django.core.cache import cache


def test_health_check(client, db):
    response = client.get('/health/')

    assert response.status_code == 200
    body = response.json()
    assert body['status'] == 'healthy'
    assert body['database'] == 'connected'
    assert 'memory_mb' in body


def test_health_check_database_down(client, db, monkeypatch):
    from orderflow import health

    class _BrokenConnection:
        def cursor(self):
            raise RuntimeError('database unreachable')

    monkeypatch.setattr(health, 'connection', _BrokenConnection())

    response = client.get('/health/')

    assert response.status_code == 503
    assert response.json()['database'] == 'disconnected'


def test_login_is_rate_limited(api_client, customer, settings):
    settings.RATELIMIT_ENABLE = True
    cache.clear()

    statuses = [
        api_client.post('/api/auth/login/', {'email': 'customer@example.com', 'password': 'wrong'}, format='json').status_code
        for _ in range(6)
    ]

    assert statuses[:5] == [401] * 5
    assert statuses[5] == 429
    cache.clear()

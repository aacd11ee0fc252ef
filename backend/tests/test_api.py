def test_index_route(client):
    res = client.get('/')
    assert res.status_code == 200
    data = res.get_json()
    assert data['message'] == 'Drawing relay is running'
    assert data['rooms'] == 0


def test_index_counts_rooms(client, make_client):
    a, b = make_client(), make_client()
    a.emit('join-room', 'r1')
    b.emit('join-room', 'r2')
    assert client.get('/').get_json()['rooms'] == 2
    a.disconnect()
    assert client.get('/').get_json()['rooms'] == 1


def test_cors_allows_configured_origin(client):
    res = client.get('/', headers={'Origin': 'http://localhost:3000'})
    assert res.headers.get('Access-Control-Allow-Origin') == 'http://localhost:3000'


def test_cors_ignores_unknown_origin(client):
    res = client.get('/', headers={'Origin': 'http://evil.example'})
    assert 'Access-Control-Allow-Origin' not in res.headers

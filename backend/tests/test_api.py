from datetime import datetime, timedelta

from minigame.services.accounts.guests import sweep_expired_guests


def _auth(token):
    return {'Authorization': f'Bearer {token}'}


def test_health(client):
    res = client.get('/api/health')
    assert res.status_code == 200
    assert res.get_json()['status'] == 'ok'


def test_unknown_api_path_is_json_404(client):
    res = client.get('/api/nope')
    assert res.status_code == 404
    assert 'error' in res.get_json()


def test_guest_login(client):
    res = client.post('/api/guest-login', json={'nickname': 'Speedy'})
    assert res.status_code == 201
    data = res.get_json()
    assert data['isGuest'] is True
    assert data['nickname'] == 'Speedy'
    assert data['username'].startswith('guest_')
    assert data['token']
    assert data['expires_in'] == 24 * 3600


def test_guest_login_validates_nickname(client):
    res = client.post('/api/guest-login', json={'nickname': 'x'})
    assert res.status_code == 400
    assert 'Nickname' in res.get_json()['error']
    assert client.post('/api/guest-login').status_code == 400


def test_register_and_login(client):
    res = client.post('/api/register', json={'username': 'alice', 'password': 'secret123'})
    assert res.status_code == 201
    assert res.get_json()['isGuest'] is False

    res = client.post('/api/login', json={'username': 'alice', 'password': 'secret123'})
    assert res.status_code == 200
    data = res.get_json()
    assert data['username'] == 'alice'
    assert data['coins'] == 0
    assert data['expires_in'] == 7 * 24 * 3600


def test_register_duplicate_username_conflicts(client, user_session):
    res = client.post('/api/register', json={'username': 'alice', 'password': 'another1'})
    assert res.status_code == 409
    assert res.get_json()['error'] == 'Username already taken'


def test_register_validation(client):
    assert client.post('/api/register', json={'username': 'al', 'password': 'secret123'}).status_code == 400
    assert client.post('/api/register', json={'username': 'alice', 'password': '123'}).status_code == 400
    assert client.post('/api/register', json={}).status_code == 400


def test_login_failures(client, user_session, guest_session):
    assert client.post('/api/login', json={'username': 'alice', 'password': 'wrong-one'}).status_code == 401
    assert client.post('/api/login', json={'username': 'nobody', 'password': 'secret123'}).status_code == 401
    res = client.post('/api/login', json={'username': guest_session['username'], 'password': 'whatever'})
    assert res.status_code == 401
    assert 'Guest' in res.get_json()['error']


def test_protected_routes_require_token(client):
    assert client.get('/api/user/profile').status_code == 401
    assert client.post('/api/scores', json={'game': 'reaction', 'score': 1}).status_code == 401
    res = client.get('/api/user/profile', headers=_auth('not-a-token'))
    assert res.status_code == 401
    assert res.get_json()['error'] == 'Authentication required'


def test_profile(client, guest_session):
    res = client.get('/api/user/profile', headers=_auth(guest_session['token']))
    assert res.status_code == 200
    profile = res.get_json()
    assert profile['is_guest'] is True
    assert profile['nickname'] == 'Speedy'
    assert profile['display_name'] == 'Speedy'
    assert profile['coins'] == 0
    assert profile['avatar'] is None


def test_upgrade_guest(client, guest_session):
    res = client.post('/api/upgrade', json={'username': 'bob', 'password': 'secret123'},
                      headers=_auth(guest_session['token']))
    assert res.status_code == 200
    data = res.get_json()
    assert data['isGuest'] is False
    assert data['username'] == 'bob'
    assert data['nickname'] is None
    assert data['userId'] == guest_session['userId']

    profile = client.get('/api/user/profile', headers=_auth(data['token'])).get_json()
    assert profile['is_guest'] is False
    assert profile['username'] == 'bob'

    # The upgraded account can now log in with its password
    assert client.post('/api/login', json={'username': 'bob', 'password': 'secret123'}).status_code == 200


def test_upgrade_to_taken_username(client, user_session, guest_session):
    res = client.post('/api/upgrade', json={'username': 'alice', 'password': 'secret123'},
                      headers=_auth(guest_session['token']))
    assert res.status_code == 409

    profile = client.get('/api/user/profile', headers=_auth(guest_session['token'])).get_json()
    assert profile['is_guest'] is True
    assert profile['username'] == guest_session['username']


def test_registered_user_cannot_upgrade(client, user_session):
    res = client.post('/api/upgrade', json={'username': 'alice_two', 'password': 'secret123'},
                      headers=_auth(user_session['token']))
    assert res.status_code == 409
    assert 'already registered' in res.get_json()['error']


def test_swept_guest_token_is_rejected(flask_app, client, frozen_now):
    start = frozen_now(datetime(2025, 6, 1, 8, 0, 0))
    session = client.post('/api/guest-login', json={'nickname': 'Speedy'}).get_json()
    assert client.get('/api/user/profile', headers=_auth(session['token'])).status_code == 200

    with flask_app.app_context():
        assert sweep_expired_guests(now=start + timedelta(days=8)) == 1
    assert client.get('/api/user/profile', headers=_auth(session['token'])).status_code == 401
    assert client.post('/api/scores', json={'game': 'reaction', 'score': 10},
                       headers=_auth(session['token'])).status_code == 401


def test_avatar(client, user_session):
    headers = _auth(user_session['token'])
    avatar = 'data:image/png;base64,iVBORw0KGgo='
    assert client.post('/api/user/avatar', json={'avatar': avatar}, headers=headers).status_code == 200
    assert client.get('/api/user/profile', headers=headers).get_json()['avatar'] == avatar

    assert client.post('/api/user/avatar', json={'avatar': 'http://example.com/a.png'}, headers=headers).status_code == 400
    too_big = 'data:image/png;base64,' + 'A' * 6000
    assert client.post('/api/user/avatar', json={'avatar': too_big}, headers=headers).status_code == 400


def test_change_username(client, user_session):
    headers = _auth(user_session['token'])
    client.post('/api/register', json={'username': 'carol', 'password': 'secret123'})

    assert client.put('/api/user/username', json={'newUsername': 'carol'}, headers=headers).status_code == 409
    assert client.put('/api/user/username', json={'newUsername': 'a'}, headers=headers).status_code == 400

    res = client.put('/api/user/username', json={'newUsername': 'alice2'}, headers=headers)
    assert res.status_code == 200
    assert res.get_json()['username'] == 'alice2'
    # Sessions are bound to the user id, so the old token keeps working
    assert client.get('/api/user/profile', headers=headers).get_json()['username'] == 'alice2'


def test_guest_cannot_change_username_or_password(client, guest_session):
    headers = _auth(guest_session['token'])
    assert client.put('/api/user/username', json={'newUsername': 'speedy'}, headers=headers).status_code == 403
    res = client.put('/api/user/password', json={'oldPassword': 'x', 'newPassword': 'secret123'}, headers=headers)
    assert res.status_code == 403


def test_change_password(client, user_session):
    headers = _auth(user_session['token'])
    res = client.put('/api/user/password', json={'oldPassword': 'wrong-one', 'newPassword': 'newsecret1'}, headers=headers)
    assert res.status_code == 400
    res = client.put('/api/user/password', json={'oldPassword': 'secret123', 'newPassword': 'newsecret1'}, headers=headers)
    assert res.status_code == 200

    assert client.post('/api/login', json={'username': 'alice', 'password': 'secret123'}).status_code == 401
    assert client.post('/api/login', json={'username': 'alice', 'password': 'newsecret1'}).status_code == 200


def test_submit_scores_awards_coins(client, user_session):
    headers = _auth(user_session['token'])
    res = client.post('/api/scores', json={'game': 'reaction', 'score': 250}, headers=headers)
    assert res.status_code == 200
    assert res.get_json()['coins'] == 25

    res = client.post('/api/scores', json={'game': 'reaction', 'score': 400}, headers=headers)
    data = res.get_json()
    assert data['coins'] == 40
    assert data['coin_balance'] == 65
    assert client.get('/api/user/profile', headers=headers).get_json()['coins'] == 65


def test_submit_score_validation(client, user_session):
    headers = _auth(user_session['token'])
    for body in (
        {'game': 'reaction', 'score': 'lots'},
        {'game': 'reaction', 'score': -5},
        {'game': 'reaction', 'score': 10 ** 9},
        {'game': 'reaction', 'score': True},
        {'game': 'reaction', 'score': 12.5},
        {'game': '', 'score': 10},
        {'score': 10},
    ):
        assert client.post('/api/scores', json=body, headers=headers).status_code == 400
    assert client.get('/api/user/profile', headers=headers).get_json()['coins'] == 0


def test_leaderboard_scenario(client):
    a = client.post('/api/register', json={'username': 'player_a', 'password': 'secret123'}).get_json()
    b = client.post('/api/guest-login', json={'nickname': 'Player B'}).get_json()
    client.post('/api/scores', json={'game': 'reaction', 'score': 250}, headers=_auth(a['token']))
    client.post('/api/scores', json={'game': 'reaction', 'score': 400}, headers=_auth(a['token']))
    client.post('/api/scores', json={'game': 'reaction', 'score': 100}, headers=_auth(b['token']))

    res = client.get('/api/leaderboard/reaction/alltime')
    assert res.status_code == 200
    board = res.get_json()
    assert [(e['username'], e['score']) for e in board] == [('player_a', 400), ('Player B', 100)]
    assert [e['rank'] for e in board] == [1, 2]
    assert board[1]['is_guest'] is True

    daily = client.get('/api/leaderboard/reaction/daily').get_json()
    assert [(e['username'], e['score']) for e in daily] == [('player_a', 400), ('Player B', 100)]


def test_leaderboard_rejects_unknown_window(client):
    res = client.get('/api/leaderboard/reaction/monthly')
    assert res.status_code == 400
    assert 'monthly' in res.get_json()['error']

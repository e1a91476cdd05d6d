from datetime import datetime, timedelta, timezone

import jwt

from odontoforense.auth import jwt_handler
from odontoforense.models.user import Role

TEST_PASSWORD = 'segredo123'


def test_hash_password_round_trip() -> None:
    hashed = jwt_handler.hash_password('abc12345')

    assert hashed != 'abc12345'
    assert jwt_handler.verify_password('abc12345', hashed)
    assert not jwt_handler.verify_password('wrong', hashed)


def test_verify_password_rejects_non_hash_value() -> None:
    assert jwt_handler.verify_password('abc12345', 'plain-text') is False


def test_access_token_carries_subject_and_role(test_settings) -> None:
    token = jwt_handler.create_access_token(test_settings, subject='7', role='perito')

    payload = jwt_handler.decode_access_token(test_settings, token)

    assert payload['sub'] == '7'
    assert payload['role'] == 'perito'
    assert payload['exp'] > payload['iat']


def test_protected_route_without_token_returns_401(client) -> None:
    response = client.get('/api/caso')

    assert response.status_code == 401
    assert response.json() == {'error': 'Authentication token is required'}


def test_protected_route_with_garbage_token_returns_401(client) -> None:
    response = client.get('/api/caso', headers={'Authorization': 'Bearer not-a-jwt'})

    assert response.status_code == 401
    assert response.json() == {'error': 'Invalid token'}


def test_expired_token_returns_401(client, make_user, test_settings) -> None:
    user = make_user(Role.ADMIN)
    past = datetime.now(timezone.utc) - timedelta(hours=2)
    token = jwt.encode(
        {'sub': str(user.id), 'role': user.role, 'iat': past, 'exp': past + timedelta(minutes=5)},
        test_settings.jwt_secret_key,
        algorithm=test_settings.jwt_algorithm,
    )

    response = client.get('/api/caso', headers={'Authorization': f'Bearer {token}'})

    assert response.status_code == 401


def test_token_signed_with_other_secret_returns_401(client, make_user, test_settings) -> None:
    user = make_user(Role.ADMIN)
    token = jwt.encode({'sub': str(user.id), 'role': user.role}, 'another-secret', algorithm='HS256')

    response = client.get('/api/caso', headers={'Authorization': f'Bearer {token}'})

    assert response.status_code == 401


def test_token_for_deleted_user_returns_401(client, make_user, headers_for, db_session) -> None:
    user = make_user(Role.ADMIN)
    headers = headers_for(user)
    db_session.delete(user)
    db_session.commit()

    response = client.get('/api/caso', headers=headers)

    assert response.status_code == 401
    assert response.json() == {'error': 'User not found'}


def test_role_outside_allow_list_returns_403(client, assistente_headers) -> None:
    response = client.delete('/api/caso', headers=assistente_headers)

    assert response.status_code == 403
    assert response.json() == {'error': 'Access denied for this role'}


def test_perito_cannot_manage_users(client, perito_headers) -> None:
    response = client.get('/api/user', headers=perito_headers)

    assert response.status_code == 403


def test_login_returns_bearer_token(client, make_user) -> None:
    make_user(Role.PERITO, email='perita@odonto.test')

    response = client.post('/api/user/login', json={'email': ' PERITA@odonto.test ', 'password': TEST_PASSWORD})

    assert response.status_code == 200
    body = response.json()
    assert body['token_type'] == 'bearer'
    assert body['user']['role'] == 'perito'

    me = client.get('/api/user/me', headers={'Authorization': f"Bearer {body['access_token']}"})
    assert me.status_code == 200
    assert me.json()['email'] == 'perita@odonto.test'


def test_login_with_wrong_password_returns_401(client, make_user) -> None:
    make_user(Role.PERITO, email='perita@odonto.test')

    response = client.post('/api/user/login', json={'email': 'perita@odonto.test', 'password': 'errada'})

    assert response.status_code == 401
    assert response.json() == {'error': 'Invalid email or password'}

import pytest

from app import create_app
from config import TestConfig
from utils.extensions import db


def test_pages_redirect_to_login(client):
    response = client.get('/students/')
    assert response.status_code == 302
    assert '/login' in response.headers['Location']
    assert 'next=' in response.headers['Location']


def test_wrong_password(client):
    response = client.post('/login', data={'password': 'nope'})
    assert response.status_code == 401
    assert b'Invalid password.' in response.data


def test_login_redirects_to_next(client):
    response = client.post('/login', data={'password': TestConfig.ADMIN_PASSWORD, 'next': '/reports/'})
    assert response.status_code == 302
    assert response.headers['Location'].endswith('/reports/')
    assert client.get('/reports/').status_code == 200


def test_login_ignores_external_next(client):
    response = client.post('/login', data={'password': TestConfig.ADMIN_PASSWORD, 'next': 'https://evil.example'})
    assert response.headers['Location'].endswith('/')


def test_session_cookie_name(client):
    client.post('/login', data={'password': TestConfig.ADMIN_PASSWORD})
    assert client.get_cookie('mat-tracker-session') is not None


def test_logout(auth_client):
    assert auth_client.get('/').status_code == 200
    auth_client.get('/logout')
    assert auth_client.get('/').status_code == 302


@pytest.fixture
def open_app(tmp_path):
    class NoPasswordConfig(TestConfig):
        ADMIN_PASSWORD = ''

    app = create_app(NoPasswordConfig)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


def test_login_disabled_without_password(open_app):
    assert open_app.config['LOGIN_DISABLED'] is True
    assert open_app.test_client().get('/students/').status_code == 200

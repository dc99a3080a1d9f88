import pytest

from app import create_app
from app.extensions import db
from app.models import User
from app.services.config_service import ConfigService

PASSWORD = 'password'

# username -> (email, name, role)
USERS = {
    'admin': ('admin@example.com', 'Ada Admin', User.ROLE_ADMIN),
    'alice': ('alice@example.com', 'Alice Author', User.ROLE_USER),
    'bob': ('bob@example.com', 'Bob Writer', User.ROLE_USER),
}


@pytest.fixture
def app():
    app = create_app('testing')
    with app.app_context():
        db.create_all()
        ConfigService.ensure_initialized(app.config['APP_NAME'])
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def users(app):
    """写入测试用户，返回 username -> id"""
    with app.app_context():
        for username, (email, name, role) in USERS.items():
            db.session.add(User(email=email, username=username, name=name,
                                password=PASSWORD, role=role))
        db.session.commit()
        return {u.username: u.id for u in User.query.all()}


@pytest.fixture
def ctx(app, users):
    """服务层测试使用的请求上下文"""
    with app.test_request_context():
        yield


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login(app, users):
    """返回一个已登录指定用户的独立 test client"""
    def _login(username):
        client = app.test_client()
        response = client.post('/api/sessions', json={
            'username': USERS[username][0],
            'password': PASSWORD,
        })
        assert response.status_code == 200
        return client
    return _login


@pytest.fixture
def make_payload():
    def _make(author='alice', title='T', publication_date='', blocks=None):
        if blocks is None:
            blocks = [
                {'type': 'header', 'content': 'H', 'position': 1},
                {'type': 'paragraph', 'content': 'P', 'position': 2},
            ]
        return {
            'title': title,
            'authorUsername': author,
            'publicationDate': publication_date,
            'blocks': blocks,
        }
    return _make

import os

import pytest

os.environ['DATABASE_URL'] = 'sqlite://'
os.environ['APP_ENV'] = 'test'

from fastapi.testclient import TestClient  # noqa: E402

from odontoforense.auth import jwt_handler  # noqa: E402
from odontoforense.core.config import Settings, get_settings  # noqa: E402
from odontoforense.database import Base, SessionLocal, engine  # noqa: E402
from odontoforense.main import app  # noqa: E402
from odontoforense.models.user import Role, User  # noqa: E402

TEST_PASSWORD = 'segredo123'


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        app_env='test',
        database_url='sqlite://',
        jwt_secret_key='test-secret',
        gemini_api_key='test-gemini-key',
        upload_dir=str(tmp_path / 'uploads'),
        public_base_url='http://testserver',
        max_upload_size_bytes=1024,
    )


@pytest.fixture
def db_session():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session, test_settings):
    app.dependency_overrides[get_settings] = lambda: test_settings
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    def _make_user(role: Role = Role.ADMIN, email: str | None = None, name: str = 'Usuário Teste') -> User:
        user = User(
            name=name,
            email=email or f'{role.value}@odonto.test',
            hashed_password=jwt_handler.hash_password(TEST_PASSWORD),
            role=role.value,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def headers_for(test_settings):
    def _headers_for(user: User) -> dict[str, str]:
        token = jwt_handler.create_access_token(test_settings, subject=str(user.id), role=user.role)
        return {'Authorization': f'Bearer {token}'}

    return _headers_for


@pytest.fixture
def admin_headers(make_user, headers_for):
    return headers_for(make_user(Role.ADMIN))


@pytest.fixture
def perito_headers(make_user, headers_for):
    return headers_for(make_user(Role.PERITO))


@pytest.fixture
def assistente_headers(make_user, headers_for):
    return headers_for(make_user(Role.ASSISTENTE))

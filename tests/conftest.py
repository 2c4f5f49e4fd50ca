# tests/conftest.py

import mongomock
import pytest

import data_seed
from edumanage.app import create_app
from edumanage.config import database
from edumanage.services.auth_service import AuthService
from edumanage.services.configuration_service import ConfigurationService

TEST_CONFIG = {
    "TESTING": True,
    "REDIS_ENABLED": False,
    "JWT_SECRET": "test-secret",
    "JWT_EXPIRES_IN": 3600,
}


@pytest.fixture
def mongo_db():
    return mongomock.MongoClient()["edumanage_test"]


@pytest.fixture
def app(mongo_db):
    app = create_app(TEST_CONFIG, mongo_db=mongo_db)
    yield app
    database.use_redis(None)


@pytest.fixture
def app_context(app):
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    return app.test_client()


def _headers(app, user):
    with app.app_context():
        token = AuthService.generate_token(user["_id"])
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_user(app):
    with app.app_context():
        return AuthService.create_user(
            {"firstName": "Ada", "lastName": "Admin", "email": "ada@edumanage.com", "password": "secret123"},
            "admin",
        )


@pytest.fixture
def admin_headers(app, admin_user):
    return _headers(app, admin_user)


@pytest.fixture
def student_headers(app):
    with app.app_context():
        student = AuthService.create_user(
            {"firstName": "Sam", "lastName": "Student", "email": "sam@edumanage.com", "password": "secret123"},
            "student",
        )
    return _headers(app, student)


@pytest.fixture
def seeded(app, admin_user):
    with app.app_context():
        data_seed.seed_configurations(admin_user["_id"])
    return admin_user


@pytest.fixture
def locked_entry(app, admin_user, mongo_db):
    with app.app_context():
        ConfigurationService.create({
            "key": "platform_id",
            "value": "edumanage-main",
            "type": "string",
            "category": "system",
            "description": "Identifier of this installation",
            "isEditable": False,
            "defaultValue": "edumanage-main",
        }, admin_user["_id"])
    return "platform_id"

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from mock_api.api_server import create_app
from mock_api.config import MockServerConfig

VALID_BODY = {"users": [{"login": "alice"}, {"login": "bob", "name": "Bob"}]}


@pytest.fixture
def config(tmp_path):
    config = MockServerConfig()
    config.LOG_FILE = str(tmp_path / "simple-mock.log")
    return config


@pytest.fixture
def app(config):
    return create_app(config)


@pytest.fixture
def client(app):
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def log_path(config):
    return Path(config.LOG_FILE)


@pytest.fixture
def valid_body():
    return {"users": [dict(user) for user in VALID_BODY["users"]]}

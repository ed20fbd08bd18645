import os

os.environ.setdefault("APP_ENV", "test")

import pytest  # noqa: E402
from tortoise import Tortoise  # noqa: E402

TEST_TORTOISE_ORM = {
    "connections": {"default": os.environ.get("TEST_DATABASE_URL", "sqlite://:memory:")},
    "apps": {
        "models": {
            "models": ["app.models", "app.tests.test_models"],
            "default_connection": "default",
        },
    },
}


@pytest.fixture(autouse=True)
async def db_session():
    await Tortoise.init(config=TEST_TORTOISE_ORM)
    await Tortoise.generate_schemas()

    yield
    for app in Tortoise.apps.values():
        for model in app.values():
            await model.all().delete()
    await Tortoise.close_connections()


@pytest.fixture
def documents_dir(tmp_path):
    """Managed storage directory for one test."""
    return tmp_path / "documents"


@pytest.fixture
def write_file(tmp_path):
    """Write bytes to a source file under a per-test directory and return its path."""
    source_dir = tmp_path / "source"
    source_dir.mkdir()

    def _write(name: str, content: bytes):
        path = source_dir / name
        path.write_bytes(content)
        return path

    return _write


@pytest.fixture
async def owner():
    from app.models import User

    return await User.create(email="owner@example.com", full_name="Test Owner")

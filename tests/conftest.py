import pytest
from httpx import ASGITransport, AsyncClient

from bucketstore import api
from bucketstore.auth import get_user
from bucketstore.models import UserData
from bucketstore.storage import UserDir
from tests.tools import bucketstore_settings

TEST_USERS = {
    "user1": UserData(key="mysecret", folder="user1"),
    "user2": UserData(key="othersecret", folder="home2"),
}


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
def storage_root(tmp_path):
    """Every test gets an empty storage root and a known credential table"""
    root = tmp_path / "store"
    root.mkdir()
    with bucketstore_settings(storage_folder=root, users=TEST_USERS, default_user="user1"):
        yield root


@pytest.fixture()
async def client():
    async with AsyncClient(transport=ASGITransport(app=api.app), base_url="http://test", follow_redirects=False) as client:
        yield client


@pytest.fixture()
def user():
    return get_user("user1")


@pytest.fixture()
def user_dir(storage_root, user):
    return UserDir(storage_root, user)

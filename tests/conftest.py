import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.orm import sessionmaker

from waitlist_api.core.database import build_engine, init_models
from waitlist_api.main import app
from waitlist_api.services.database_storage import DatabaseStorage
from waitlist_api.services.memory_storage import MemStorage
from waitlist_api.services.storage import get_storage


@pytest.fixture
def memory_storage():
    return MemStorage()


@pytest.fixture
def database_storage():
    engine = build_engine("sqlite://")
    init_models(bind=engine)
    yield DatabaseStorage(sessionmaker(autocommit=False, autoflush=False, bind=engine))
    engine.dispose()


@pytest.fixture(params=["memory", "database"])
def storage(request):
    """Run a test once per storage backend."""
    return request.getfixturevalue(f"{request.param}_storage")


@pytest_asyncio.fixture
async def client(storage):
    app.dependency_overrides[get_storage] = lambda: storage
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()

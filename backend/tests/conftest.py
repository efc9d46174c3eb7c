"""
Campus Records - Test Configuration and Fixtures
"""
import os
import tempfile
from typing import AsyncGenerator, Dict

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool
from faker import Faker

# Set testing environment
os.environ['ENVIRONMENT'] = 'testing'
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite:///./test.db'
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing'
os.environ['USE_MOCK_DATA'] = 'false'
os.environ['STORAGE_MODE'] = 'local'
os.environ['UPLOAD_DIR'] = tempfile.mkdtemp(prefix='campus-records-uploads-')
os.environ['PUBLIC_BASE_URL'] = 'http://test'

from app.main import app
from app.core.database import Base, get_db
from app.core.security import create_access_token
from app.db.fixtures import build_fixtures
from app.db.seed_data import seed_fixtures
from app.gateway import InMemoryRecordStore, SQLRecordStore
from app.gateway import memory_store as memory_store_module
from app.services.processing_guard import ProcessingGuard

fake = Faker()

# Test database setup
TEST_DATABASE_URL = 'sqlite+aiosqlite:///./test.db'
test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)
TestSessionLocal = async_sessionmaker(
    bind=test_engine,
    class_=AsyncSession,
    expire_on_commit=False
)


def auth_for(profile_id: str) -> Dict[str, str]:
    """Authorization header for a profile id"""
    token = create_access_token({'sub': profile_id})
    return {'Authorization': f'Bearer {token}'}


def make_certificate(student_id: str, status: str = 'pending', category: str = 'academic', **fields) -> dict:
    record = {
        'student_id': student_id,
        'title': fake.catch_phrase(),
        'category': category,
        'status': status,
        'file_url': fake.url(),
        'file_name': 'certificate.pdf',
    }
    record.update(fields)
    return record


@pytest.fixture(scope='function')
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database session for each test"""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session
        await session.rollback()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def seeded_db(db_session: AsyncSession) -> AsyncSession:
    """Database session with the demo fixtures loaded"""
    await seed_fixtures(db_session)
    await db_session.commit()
    return db_session


@pytest.fixture
async def sql_store(seeded_db: AsyncSession) -> SQLRecordStore:
    return SQLRecordStore(seeded_db)


@pytest.fixture
def memory_store() -> InMemoryRecordStore:
    """Fresh in-memory store holding the demo fixtures"""
    return InMemoryRecordStore(build_fixtures())


@pytest.fixture
def guard() -> ProcessingGuard:
    return ProcessingGuard()


@pytest.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database override"""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def seeded_client(seeded_db: AsyncSession, client: AsyncClient) -> AsyncClient:
    """Test client over a database holding the demo fixtures"""
    return client


@pytest.fixture
def fresh_mock_store(monkeypatch) -> InMemoryRecordStore:
    """Replace the process-wide mock-mode store with a fresh copy of the fixtures"""
    store = InMemoryRecordStore(build_fixtures())
    monkeypatch.setattr(memory_store_module, '_memory_store', store)
    return store


@pytest.fixture
def student_headers() -> Dict[str, str]:
    return auth_for('stu-1')


@pytest.fixture
def junior_headers() -> Dict[str, str]:
    return auth_for('fac-2')


@pytest.fixture
def senior_headers() -> Dict[str, str]:
    return auth_for('fac-1')


@pytest.fixture
def admin_headers() -> Dict[str, str]:
    return auth_for('admin-1')


@pytest.fixture
def headers_for():
    return auth_for


@pytest.fixture
def certificate_factory():
    return make_certificate

import os
import uuid
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio

from docaudit.config.settings import Settings
from docaudit.database.connection import close_pool, get_connection, init_pool
from docaudit.database.models import DocumentRecord
from docaudit.database.repositories.document_repository import DocumentRepository

SCHEMA_PATH = Path(__file__).resolve().parents[2] / "sql" / "schema.sql"


def _test_settings() -> Settings:
    # Apply defaults only while building Settings so they don't leak into other tests.
    with pytest.MonkeyPatch.context() as mp:
        mp.setenv("DB_DATABASE", os.environ.get("DB_DATABASE", "docaudit_test"))
        mp.setenv("REASONING_PROVIDER", os.environ.get("REASONING_PROVIDER", "example"))
        return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest_asyncio.fixture
async def integration_pool(test_settings: Settings) -> AsyncGenerator[None, None]:
    try:
        await init_pool(test_settings, timeout=5.0)
    except Exception as e:
        pytest.skip(
            f"PostgreSQL test DB not available: {e}. "
            "Set DB_* env to point at a disposable database"
        )
    try:
        async with get_connection() as conn:
            await conn.execute(SCHEMA_PATH.read_text())
            await conn.commit()
        yield
    finally:
        await close_pool()


@pytest.fixture
def user_id() -> str:
    return f"it-{uuid.uuid4()}"


@pytest_asyncio.fixture
async def integration_cleanup(
    integration_pool: None, user_id: str
) -> AsyncGenerator[list[int], None]:
    """Collects job IDs; documents are removed by user, findings cascade."""
    job_ids: list[int] = []
    yield job_ids
    async with get_connection() as conn:
        if job_ids:
            await conn.execute("DELETE FROM processing_jobs WHERE id = ANY(%s)", (job_ids,))
        await conn.execute("DELETE FROM documents WHERE user_id = %s", (user_id,))
        await conn.commit()


@pytest.fixture
def files_root(tmp_path: Path) -> Path:
    return tmp_path


@pytest.fixture
def write_file(files_root: Path):
    def write(name: str, content: str | bytes) -> str:
        path = files_root / name
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
        return name

    return write


@pytest.fixture
def seed_document(integration_cleanup: list[int], user_id: str):
    async def seed(file_path: str, file_type: str = "text/plain") -> DocumentRecord:
        return await DocumentRepository().create(
            user_id=user_id,
            file_name=file_path,
            original_name=file_path,
            file_type=file_type,
            file_size=0,
            file_path=file_path,
        )

    return seed

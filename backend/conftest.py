"""Test-wide setup: .env.tests, structlog routed into caplog, and a shared in-memory gateway."""

from pathlib import Path

import pytest
import structlog
from dotenv import load_dotenv

from scoreboard.persistence import StoragePersistenceGateway
from shared.storage import MemoryStateStorage

load_dotenv(Path(__file__).resolve().parent.parent / ".env.tests")

# Domain events go through stdlib logging so caplog records carry the event dict.
structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ],
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=False,
)


@pytest.fixture(autouse=True)
def _clear_log_context():
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def memory_storage() -> MemoryStateStorage:
    return MemoryStateStorage()


@pytest.fixture
def memory_gateway(memory_storage: MemoryStateStorage) -> StoragePersistenceGateway:
    """Gateway saving into ``memory_storage``, for asserting what a session persisted."""
    return StoragePersistenceGateway(memory_storage)

"""
Pytest configuration and fixtures for ibackup-devkit tests

This module provides shared fixtures for unit, integration, and E2E tests.
"""
from datetime import datetime, timedelta, timezone
from typing import Generator

import pytest
from testcontainers.postgres import PostgresContainer

from ibackup_devkit.core.models import SourceSet
from ibackup_devkit.core.transform import (
    META_KEY_REASON,
    META_KEY_REMOVAL,
    META_KEY_REVIEW,
)
from ibackup_devkit.observability.logger import setup_logger
from ibackup_devkit.stores import SourceStore
from ibackup_devkit.warehouse import DatabaseSettings


# =======================
# PYTEST CONFIGURATION
# =======================

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests that don't require external services"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests that require Docker containers"
    )
    config.addinivalue_line(
        "markers", "e2e: End-to-end tests that run the CLI against temporary databases"
    )


# =======================
# LOGGING
# =======================

@pytest.fixture(autouse=True)
def fresh_log_handler():
    """Bind the log handler to the stdout of the current test"""
    setup_logger(level="DEBUG", format_type="json")


# =======================
# SET FIXTURES
# =======================

REVIEW = "2025-01-01T00:00:00Z"
REMOVAL = "2025-06-01T00:00:00Z"


def make_source_set(
    name: str = "set-0",
    transformer: str = "humgen",
    reason: str = "backup",
    review: str = REVIEW,
    removal: str = REMOVAL,
    **fields,
) -> SourceSet:
    """Build a migratable SourceSet with the reserved metadata filled in."""
    extra_metadata = fields.pop("metadata", {})
    metadata = {
        META_KEY_REASON: reason,
        META_KEY_REVIEW: review,
        META_KEY_REMOVAL: removal,
        **extra_metadata,
    }
    fields.setdefault("requester", "test-user")

    return SourceSet(name=name, transformer=transformer, metadata=metadata, **fields)


@pytest.fixture
def source_set_factory():
    """Factory for migratable SourceSets"""
    return make_source_set


@pytest.fixture
def sample_sets() -> list[SourceSet]:
    """
    Five sets with every transformer form; even-numbered sets are read-only
    and set-4 is also hidden.
    """
    transformers = ["humgen", "gengen", "prefix=/lustre:/humgen", "humgen", "gengen"]
    base = datetime(2025, 1, 1, tzinfo=timezone.utc)

    return [
        make_source_set(
            name=f"set-{i}",
            transformer=transformers[i],
            reason=["backup", "archive", "quarantine"][i % 3],
            review=(base + timedelta(days=i)).isoformat(),
            removal=(base + timedelta(days=180 + i)).isoformat(),
            read_only=i % 2 == 0,
            hide=i == 4,
            description=f"description {i}",
            monitor_time=3600 * i,
            size_uploaded=1024 * i,
            metadata={"project": f"project-{i}"},
        )
        for i in range(5)
    ]


@pytest.fixture
def source_db_path(tmp_path, sample_sets) -> str:
    """Path to a key-value store file holding sample_sets"""
    path = tmp_path / "ibackup.db"
    with SourceStore.create(path) as store:
        for s in sample_sets:
            store.add_or_update(s)

    return str(path)


# =======================
# DATABASE FIXTURES (Testcontainers)
# =======================

@pytest.fixture(scope="session")
def postgres_container() -> Generator[PostgresContainer, None, None]:
    """
    Start PostgreSQL container for integration tests

    Yields:
        PostgresContainer instance
    """
    with PostgresContainer(
        image="postgres:16.2-alpine",
        username="test_devkit",
        password="test_password",
        dbname="test_ibackup",
    ) as postgres:
        yield postgres


@pytest.fixture
def postgres_settings(postgres_container) -> DatabaseSettings:
    """DatabaseSettings pointing at the test container"""
    return DatabaseSettings(
        host=postgres_container.get_container_host_ip(),
        port=int(postgres_container.get_exposed_port(5432)),
        database="test_ibackup",
        user="test_devkit",
        password="test_password",
    )

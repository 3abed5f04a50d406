# @TASK S0-T0.3 - Test configuration
import os
from unittest.mock import AsyncMock

import pytest

# Set test environment variables before importing app modules
os.environ.setdefault("DATABASE_URL", "postgresql+asyncpg://linkstash:linkstash@db:5432/linkstash_test")


@pytest.fixture
def repository() -> AsyncMock:
    """Provide a NoteRepository double with no notes and no links.

    Tests set ``fetch_scorable_notes.return_value`` /
    ``fetch_scorable_links.return_value`` (or ``side_effect``) as needed.
    """
    repo = AsyncMock()
    repo.fetch_scorable_notes = AsyncMock(return_value=[])
    repo.fetch_scorable_links = AsyncMock(return_value=[])
    return repo

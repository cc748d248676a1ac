from pathlib import Path

import pytest

from squad_rating_tool.models import RosterEntry
from tests.helpers import standard_pool


@pytest.fixture
def pool() -> list[RosterEntry]:
    return standard_pool()


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "squad.db"

import os

# before golftrip is imported: no SQLite file, no tables created at import
os.environ.setdefault("GOLFTRIP_STORAGE", "memory")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ["ADMIN_KEY"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from golftrip import schemas
from golftrip.crud import DatabaseStorage
from golftrip.db import Base, make_engine
from golftrip.deps import get_storage
from golftrip.main import app
from golftrip.storage import MemStorage


@pytest.fixture
def mem_storage():
    return MemStorage()


@pytest.fixture
def db_storage():
    engine = make_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield DatabaseStorage(session)
    finally:
        session.close()
        engine.dispose()


@pytest.fixture(params=["memory", "database"])
def storage(request):
    return request.getfixturevalue("mem_storage" if request.param == "memory" else "db_storage")


@pytest.fixture
def client(mem_storage):
    app.dependency_overrides[get_storage] = lambda: mem_storage
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def two_teams(storage):
    """Eight players in two teams of four; returns (team_a, team_b, players_a, players_b)."""
    team_a = storage.create_team(schemas.TeamCreate(name="Team A"))
    team_b = storage.create_team(schemas.TeamCreate(name="Team B"))

    players_a = [
        storage.create_player(schemas.PlayerCreate(first_name="A", last_name=str(i), handicap=10, team_id=team_a.id))
        for i in range(4)
    ]
    players_b = [
        storage.create_player(schemas.PlayerCreate(first_name="B", last_name=str(i), handicap=10, team_id=team_b.id))
        for i in range(4)
    ]
    return team_a, team_b, players_a, players_b

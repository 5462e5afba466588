"""Datastore failures become a logged, generic 500."""

import pytest
from sqlalchemy.exc import OperationalError

from toolboard.db.engine import get_db
from toolboard.main import app


class _BrokenSession:
    async def execute(self, *args, **kwargs):
        raise OperationalError("SELECT tools", {}, Exception("database is down"))

    async def close(self):
        pass


@pytest.mark.asyncio
async def test_storage_failure_is_generic_500(client, make_user):
    _, headers = await make_user("ada@example.com")

    async def broken_db():
        yield _BrokenSession()

    app.dependency_overrides[get_db] = broken_db

    r = await client.get("/api/user/tools", headers=headers)
    assert r.status_code == 500
    assert r.json() == {"message": "Internal server error"}
    assert "database is down" not in r.text

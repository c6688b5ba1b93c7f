"""
Tests for the asset repositories (SQLAlchemy and in-memory).
"""
import uuid
from datetime import date

import pytest

from asset_inventory.domain.entities.asset import AssetDraft
from asset_inventory.domain.errors import StorageUnavailable, StorageWriteError
from asset_inventory.domain.repositories.asset_repository import PatchOutcome, RemoveOutcome
from asset_inventory.infrastructure.database.base import configure_engine, dispose_engine, get_session_factory
from asset_inventory.infrastructure.init_data import DEMO_ASSETS, init_demo_assets
from asset_inventory.infrastructure.repositories.asset_repository_db import AssetRepositoryDB, WorkAbandoned, WorkTicket
from asset_inventory.infrastructure.repositories.asset_repository_impl import AssetRepositoryImpl

pytestmark = pytest.mark.anyio


def make_draft(**overrides):
    values = dict(
        name="Projector",
        category="Electronics",
        status="Active",
        purchase_date=date(2024, 1, 1),
        value=750.5,
    )
    values.update(overrides)
    return AssetDraft(**values)


@pytest.fixture(params=["db", "memory"])
def repository(request, db_session):
    if request.param == "memory":
        return AssetRepositoryImpl()
    return AssetRepositoryDB(db_session)


async def test_insert_assigns_uuid_string(repository):
    asset = await repository.insert(make_draft())
    assert isinstance(asset.id, str)
    uuid.UUID(asset.id)
    assert asset.name == "Projector"
    assert asset.value == 750.5
    assert asset.location == "Not specified"


async def test_list_all_returns_every_asset(repository):
    assert await repository.list_all() == []
    first = await repository.insert(make_draft())
    second = await repository.insert(make_draft(name="Laptop"))
    ids = {asset.id for asset in await repository.list_all()}
    assert ids == {first.id, second.id}


async def test_patch_updates_only_given_fields(repository):
    asset = await repository.insert(make_draft(assigned_to="Jane"))
    outcome = await repository.patch(asset.id, {"status": "Maintenance"})
    assert outcome == PatchOutcome.UPDATED

    stored = await repository.get(asset.id)
    assert stored.status == "Maintenance"
    assert stored.assigned_to == "Jane"
    assert stored.value == 750.5


async def test_patch_without_changes_is_no_op(repository):
    asset = await repository.insert(make_draft())
    before = await repository.get(asset.id)
    outcome = await repository.patch(asset.id, {"name": "Projector", "value": 750.5})
    assert outcome == PatchOutcome.NO_OP
    after = await repository.get(asset.id)
    assert after.updated_at == before.updated_at


async def test_patch_ignores_id_and_unknown_fields(repository):
    asset = await repository.insert(make_draft())
    outcome = await repository.patch(asset.id, {"id": "other", "colour": "red"})
    assert outcome == PatchOutcome.NO_OP
    assert (await repository.get(asset.id)).id == asset.id


async def test_patch_unknown_id(repository):
    await repository.insert(make_draft())
    assert await repository.patch(str(uuid.uuid4()), {"name": "Ghost"}) == PatchOutcome.NOT_FOUND
    assert await repository.patch("not-a-uuid", {"name": "Ghost"}) == PatchOutcome.NOT_FOUND
    assert [a.name for a in await repository.list_all()] == ["Projector"]


async def test_remove_then_remove_again(repository):
    asset = await repository.insert(make_draft())
    assert await repository.remove(asset.id) == RemoveOutcome.DELETED
    assert await repository.get(asset.id) is None
    assert await repository.remove(asset.id) == RemoveOutcome.NOT_FOUND


async def test_history_round_trips(repository):
    history = [{"action": "Created", "date": "2024-01-01", "user": "Admin", "details": None}]
    asset = await repository.insert(make_draft(history=history))
    stored = await repository.get(asset.id)
    assert stored.history == history


async def test_db_write_not_acknowledged(db_session):
    repository = AssetRepositoryDB(db_session)
    with pytest.raises(StorageWriteError):
        await repository.insert(make_draft(name=None))
    # session stays usable after the rollback
    assert await repository.list_all() == []


async def test_db_unreachable(tmp_path):
    configure_engine(f"sqlite:///{tmp_path / 'missing' / 'assets.db'}")
    session = get_session_factory()()
    try:
        with pytest.raises(StorageUnavailable):
            await AssetRepositoryDB(session).list_all()
    finally:
        session.close()
        dispose_engine()


@pytest.mark.parametrize("spelling", [str.upper, lambda i: "{" + i + "}", lambda i: "urn:uuid:" + i])
async def test_only_the_issued_id_spelling_resolves(repository, spelling):
    asset = await repository.insert(make_draft())
    other = spelling(asset.id)

    assert await repository.get(other) is None
    assert await repository.patch(other, {"name": "Beamer"}) == PatchOutcome.NOT_FOUND
    assert await repository.remove(other) == RemoveOutcome.NOT_FOUND
    assert (await repository.get(asset.id)).name == "Projector"


async def test_abandoned_write_is_rolled_back(db_session):
    repository = AssetRepositoryDB(db_session)
    ticket = WorkTicket()
    assert ticket.abandon() is True

    with pytest.raises(WorkAbandoned):
        repository._insert_sync(ticket, make_draft())
    assert await repository.list_all() == []


async def test_commit_under_way_cannot_be_abandoned():
    ticket = WorkTicket()
    assert ticket.begin_commit() is True
    assert ticket.abandon() is False

    abandoned = WorkTicket()
    assert abandoned.abandon() is True
    assert abandoned.begin_commit() is False


async def test_demo_data_seeds_empty_inventory_once(repository):
    assert await init_demo_assets(repository) == len(DEMO_ASSETS)
    assert await init_demo_assets(repository) == 0
    assert len(await repository.list_all()) == len(DEMO_ASSETS)

"""SQLAlchemy implementation of AssetRepository"""
import asyncio
import logging
import threading
import uuid
from contextlib import contextmanager
from typing import Any, Callable, Dict, List, Optional, TypeVar

from sqlalchemy.exc import DBAPIError, DisconnectionError, OperationalError, SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session

from asset_inventory.domain.entities.asset import MUTABLE_FIELDS, Asset, AssetDraft, utcnow
from asset_inventory.domain.errors import StorageUnavailable, StorageWriteError
from asset_inventory.domain.repositories.asset_repository import AssetRepository, PatchOutcome, RemoveOutcome
from asset_inventory.infrastructure.database.models import AssetModel

logger = logging.getLogger(__name__)

_CONNECTION_ERRORS = (OperationalError, DisconnectionError, PoolTimeoutError)

T = TypeVar("T")


def _normalize_id(asset_id: str) -> Optional[str]:
    """The id itself if it is one we issued, else None.

    Ids are compared as opaque strings: upper case, braced or urn spellings of
    a stored UUID do not resolve to it.
    """
    try:
        canonical = str(uuid.UUID(str(asset_id)))
    except (TypeError, ValueError, AttributeError):
        return None
    return canonical if canonical == asset_id else None


class WorkAbandoned(Exception):
    """Raised in a worker whose caller stopped waiting before it committed"""


class WorkTicket:
    """Shared between a waiting caller and the worker thread running its call.

    Whichever side moves first wins: once the caller abandons the call the
    worker rolls back instead of committing, and once the worker has started
    committing the call can no longer be abandoned.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._state = "running"

    def abandon(self) -> bool:
        """Mark the call abandoned. False if a commit is already under way."""
        with self._lock:
            if self._state == "running":
                self._state = "abandoned"
            return self._state == "abandoned"

    def begin_commit(self) -> bool:
        with self._lock:
            if self._state == "running":
                self._state = "committing"
            return self._state == "committing"


class AssetRepositoryDB(AssetRepository):
    """SQLAlchemy implementation of AssetRepository.

    The session is synchronous; every call runs in a worker thread so the
    event loop stays free. A caller that stops waiting (store timeout) still
    waits for the worker to release the session, and a write it abandoned
    before commit is rolled back.
    """

    def __init__(self, db: Session):
        self.db = db

    def _asset_model_to_entity(self, model: AssetModel) -> Asset:
        """Convert AssetModel to Asset entity"""
        return Asset(
            id=str(model.id),
            name=model.name,
            category=model.category,
            status=model.status,
            purchase_date=model.purchase_date,
            value=float(model.value) if model.value is not None else 0.0,
            location=model.location,
            assigned_to=model.assigned_to,
            serial_number=model.serial_number,
            manufacturer=model.manufacturer,
            model=model.model,
            description=model.description,
            warranty_end_date=model.warranty_end_date,
            history=list(model.history or []),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    @contextmanager
    def _read_errors(self, action: str):
        try:
            yield
        except SQLAlchemyError as e:
            logger.error("Store read failed (%s): %s", action, e)
            raise StorageUnavailable(f"Storage unavailable while trying to {action}") from e

    @contextmanager
    def _write_errors(self, action: str):
        try:
            yield
        except SQLAlchemyError as e:
            logger.error("Store write failed (%s): %s", action, e)
            try:
                self.db.rollback()
            except SQLAlchemyError as rollback_error:
                logger.warning("Rollback after failed %s also failed: %s", action, rollback_error)
            if isinstance(e, _CONNECTION_ERRORS) or (
                isinstance(e, DBAPIError) and e.connection_invalidated
            ):
                raise StorageUnavailable(f"Storage unavailable while trying to {action}") from e
            raise StorageWriteError(f"Storage did not acknowledge {action}") from e

    def _commit(self, ticket: WorkTicket) -> None:
        if not ticket.begin_commit():
            self.db.rollback()
            raise WorkAbandoned("Caller stopped waiting before commit")
        self.db.commit()

    def _find(self, asset_id: str) -> Optional[AssetModel]:
        internal_id = _normalize_id(asset_id)
        if internal_id is None:
            return None
        return self.db.query(AssetModel).filter(AssetModel.id == internal_id).first()

    # synchronous bodies

    def _list_all_sync(self) -> List[Asset]:
        with self._read_errors("list assets"):
            models = self.db.query(AssetModel).order_by(AssetModel.created_at.asc()).all()
            return [self._asset_model_to_entity(model) for model in models]

    def _get_sync(self, asset_id: str) -> Optional[Asset]:
        with self._read_errors("load asset"):
            model = self._find(asset_id)
            return self._asset_model_to_entity(model) if model else None

    def _insert_sync(self, ticket: WorkTicket, draft: AssetDraft) -> Asset:
        asset = Asset.from_draft(str(uuid.uuid4()), draft)
        with self._write_errors("insert asset"):
            asset_model = AssetModel(
                id=asset.id,
                name=asset.name,
                category=asset.category,
                status=asset.status,
                purchase_date=asset.purchase_date,
                value=asset.value,
                location=asset.location,
                assigned_to=asset.assigned_to,
                serial_number=asset.serial_number,
                manufacturer=asset.manufacturer,
                model=asset.model,
                description=asset.description,
                warranty_end_date=asset.warranty_end_date,
                history=asset.history,
                created_at=asset.created_at,
                updated_at=asset.updated_at,
            )
            self.db.add(asset_model)
            self._commit(ticket)
            self.db.refresh(asset_model)
            return self._asset_model_to_entity(asset_model)

    def _patch_sync(self, ticket: WorkTicket, asset_id: str, changes: Dict[str, Any]) -> PatchOutcome:
        with self._write_errors("update asset"):
            asset_model = self._find(asset_id)
            if not asset_model:
                return PatchOutcome.NOT_FOUND

            changed = False
            for name, value in changes.items():
                if name not in MUTABLE_FIELDS:
                    continue
                if getattr(asset_model, name) != value:
                    setattr(asset_model, name, value)
                    changed = True

            if not changed:
                return PatchOutcome.NO_OP

            asset_model.updated_at = utcnow()
            self._commit(ticket)
            return PatchOutcome.UPDATED

    def _remove_sync(self, ticket: WorkTicket, asset_id: str) -> RemoveOutcome:
        with self._write_errors("delete asset"):
            asset_model = self._find(asset_id)
            if not asset_model:
                return RemoveOutcome.NOT_FOUND

            self.db.delete(asset_model)
            self._commit(ticket)
            return RemoveOutcome.DELETED

    async def _in_worker(self, body: Callable[..., T], *args, write: bool = False) -> T:
        """Run a synchronous body in a worker thread"""
        ticket = WorkTicket()
        work = asyncio.ensure_future(asyncio.to_thread(body, *((ticket, *args) if write else args)))
        try:
            return await asyncio.shield(work)
        except asyncio.CancelledError:
            if not ticket.abandon():
                # commit already under way, its outcome stands
                logger.warning("Store call outlived its caller, waiting for %s to commit", body.__name__)
                return await work
            # the worker owns the session until it returns
            await asyncio.wait([work])
            if not work.cancelled() and work.exception() is not None:
                logger.info("Abandoned store call %s ended with: %r", body.__name__, work.exception())
            raise

    # AssetRepository

    async def list_all(self) -> List[Asset]:
        """Get every stored asset, oldest first"""
        return await self._in_worker(self._list_all_sync)

    async def get(self, asset_id: str) -> Optional[Asset]:
        return await self._in_worker(self._get_sync, asset_id)

    async def insert(self, draft: AssetDraft) -> Asset:
        return await self._in_worker(self._insert_sync, draft, write=True)

    async def patch(self, asset_id: str, changes: Dict[str, Any]) -> PatchOutcome:
        return await self._in_worker(self._patch_sync, asset_id, changes, write=True)

    async def remove(self, asset_id: str) -> RemoveOutcome:
        return await self._in_worker(self._remove_sync, asset_id, write=True)

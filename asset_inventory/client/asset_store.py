"""Client-side asset store.

Keeps a local copy of the asset collection for a UI and routes every write
through the asset service. The cache changes only after the service accepted a
call, so a rejected mutation leaves ``assets`` exactly as it was.

Overlapping ``refresh()`` calls are ordered by a request token: a response that
was issued before the one already applied is dropped.
"""
import logging
from typing import Any, Dict, List, Mapping, Optional, Union
from urllib.parse import quote

import httpx
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel, ValidationError

from asset_inventory.application.dto.asset_dto import AssetCreateDTO, AssetResponseDTO, InventorySummaryDTO
from asset_inventory.application.services.inventory_summary import summarize_assets
from asset_inventory.domain.errors import AssetError, InvalidArgument, NotFound, ServiceError, error_from_kind

logger = logging.getLogger(__name__)

Payload = Union[BaseModel, Mapping[str, Any]]


class AssetStore:
    """Cache and mutation mediator for assets held by a client"""

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        base_url: str = "http://localhost:8000",
        assets_path: str = "/assets",
        timeout: float = 10.0,
    ):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)
        self.assets_path = assets_path
        self.assets: List[AssetResponseDTO] = []
        self.loading = False
        self._issued_token = 0
        self._applied_token = 0
        self._refreshes_in_flight = 0

    async def __aenter__(self) -> "AssetStore":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client if this store created it"""
        if self._owns_client:
            await self._client.aclose()

    # transport

    async def _request(self, method: str, path: str = "", **kwargs) -> httpx.Response:
        try:
            response = await self._client.request(method, self.assets_path + path, **kwargs)
        except httpx.HTTPError as e:
            raise ServiceError(f"Asset service unreachable: {e}") from e
        if response.is_error:
            raise self._error_from_response(response)
        return response

    @staticmethod
    def _error_from_response(response: httpx.Response) -> AssetError:
        try:
            body = response.json()
        except ValueError:
            body = None
        if not isinstance(body, dict):
            body = {}

        message = body.get("message") or body.get("detail") or f"Asset service returned {response.status_code}"
        if body.get("error"):
            return error_from_kind(body["error"], str(message))
        if response.status_code == 404:
            return NotFound(str(message))
        if response.status_code < 500:
            return InvalidArgument(str(message))
        return ServiceError(str(message))

    @staticmethod
    def _parse_asset(data: Any) -> AssetResponseDTO:
        try:
            return AssetResponseDTO.model_validate(data)
        except ValidationError as e:
            raise ServiceError(f"Malformed asset in service response: {e}") from e

    @staticmethod
    def _encode(payload: Payload) -> Dict[str, Any]:
        if isinstance(payload, BaseModel):
            return payload.model_dump(mode="json", by_alias=True, exclude_unset=True)
        return jsonable_encoder(dict(payload))

    # reads from the service

    async def refresh(self) -> List[AssetResponseDTO]:
        """Replace the local collection with the service's current list"""
        self._issued_token += 1
        token = self._issued_token
        self._refreshes_in_flight += 1
        self.loading = True
        try:
            response = await self._request("GET")
            body = response.json()
            if not isinstance(body, list):
                raise ServiceError("Asset service returned a non-list body")
            assets = [self._parse_asset(item) for item in body]

            if token < self._applied_token:
                logger.debug("Discarding stale refresh %d, %d already applied", token, self._applied_token)
                return list(self.assets)
            self._applied_token = token
            self.assets = assets
            return list(self.assets)
        finally:
            self._refreshes_in_flight -= 1
            self.loading = self._refreshes_in_flight > 0

    async def fetch(self, asset_id: str) -> AssetResponseDTO:
        """Load one asset from the service and put it in the cache"""
        response = await self._request("GET", f"/{quote(asset_id, safe='')}")
        asset = self._parse_asset(response.json())
        if self.find_by_id(asset.id) is None:
            self.assets = [*self.assets, asset]
        else:
            self.assets = [asset if cached.id == asset.id else cached for cached in self.assets]
        return asset

    # mutations

    async def create(self, draft: Union[AssetCreateDTO, Mapping[str, Any]]) -> AssetResponseDTO:
        """Create an asset and append the stored record (with its id)"""
        response = await self._request("POST", json=self._encode(draft))
        asset = self._parse_asset(response.json())
        self.assets = [*self.assets, asset]
        return asset

    async def update(self, asset_id: str, patch: Payload) -> Optional[AssetResponseDTO]:
        """Patch an asset and merge the service's record into the cache"""
        payload = {k: v for k, v in self._encode(patch).items() if k not in ("id", "_id")}
        payload["id"] = asset_id
        response = await self._request("PUT", json=payload)
        body = response.json()

        if isinstance(body, dict) and body.get("asset"):
            updated = self._parse_asset(body["asset"])
            self.assets = [updated if asset.id == asset_id else asset for asset in self.assets]
            return updated
        # nothing changed on the service side
        return self.find_by_id(asset_id)

    async def remove(self, asset_id: str) -> None:
        """Delete an asset and drop it from the cache"""
        await self._request("DELETE", params={"id": asset_id})
        self.assets = [asset for asset in self.assets if asset.id != asset_id]

    # local projections

    def find_by_id(self, asset_id: str) -> Optional[AssetResponseDTO]:
        return next((asset for asset in self.assets if asset.id == asset_id), None)

    def find_by_category(self, category: str) -> List[AssetResponseDTO]:
        return [asset for asset in self.assets if asset.category == category]

    def find_by_status(self, status: str) -> List[AssetResponseDTO]:
        return [asset for asset in self.assets if asset.status == status]

    def search(self, query: str) -> List[AssetResponseDTO]:
        """Case-insensitive substring match on name, id, category and assignee"""
        needle = query.strip().lower()
        if not needle:
            return list(self.assets)
        return [
            asset
            for asset in self.assets
            if needle in asset.name.lower()
            or needle in asset.id.lower()
            or needle in asset.category.lower()
            or needle in (asset.assigned_to or "").lower()
        ]

    def summary(self) -> InventorySummaryDTO:
        """Same aggregates as GET /assets/summary, computed from the cache"""
        return summarize_assets(self.assets)

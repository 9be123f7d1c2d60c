"""
Dealership API Client

Async client for the dealership REST API, used by the storefront-side
catalog cache. Responses are converted back into domain models so the
catalog aggregation rules can run on them unchanged.
"""
import logging
from typing import Any, Dict, List, Optional

import httpx

from dealership.core.config import settings
from dealership.models.offer import Offer
from dealership.models.vehicle import Vehicle
from dealership.utils.casing import snake_keys

logger = logging.getLogger(__name__)

PAGE_SIZE = 100


class CatalogClientError(Exception):
    """The API could not be reached or answered with an error."""


class DealershipApiClient:
    """Client for the dealership REST API"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self.token = token
        self.timeout = timeout
        self.transport = transport

    def _get_headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """GET a JSON document, raising CatalogClientError on any failure."""
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(url, params=params, headers=self._get_headers())
                response.raise_for_status()
                return response.json()
        except httpx.ConnectError:
            logger.error(f"Cannot connect to dealership API at {url}")
            raise CatalogClientError("Dealership API not available")
        except httpx.TimeoutException:
            logger.error(f"Timeout calling dealership API: {path}")
            raise CatalogClientError("Dealership API timeout")
        except httpx.HTTPStatusError as e:
            logger.error(f"Dealership API returned {e.response.status_code} for {path}")
            raise CatalogClientError(f"Dealership API error {e.response.status_code}")
        except httpx.HTTPError as e:
            logger.error(f"Dealership API error: {e}")
            raise CatalogClientError(str(e))

    async def fetch_vehicles(self, **filters) -> List[Vehicle]:
        """Every vehicle matching `filters`, walking all pages."""
        vehicles: List[Vehicle] = []
        page = 1
        while True:
            body = await self._get("/vehicles", {**filters, "page": page, "limit": PAGE_SIZE})
            vehicles.extend(Vehicle.model_validate(snake_keys(v)) for v in body["vehicles"])
            if not body["pagination"]["hasNextPage"]:
                return vehicles
            page += 1

    async def fetch_offers(self, active_only: bool = True, limit: Optional[int] = None) -> List[Offer]:
        params: Dict[str, Any] = {"active": str(active_only).lower()}
        if limit is not None:
            params["limit"] = limit
        body = await self._get("/offers", params)
        return [Offer.model_validate(snake_keys(o)) for o in body]

    async def fetch_active_offers_for_vehicle(self, vehicle_id: str) -> List[Offer]:
        body = await self._get(f"/offers/vehicle/{vehicle_id}/active")
        return [Offer.model_validate(snake_keys(o)) for o in body]

    async def health_check(self) -> dict:
        """Check if the API is healthy"""
        try:
            return await self._get("/health")
        except CatalogClientError as e:
            return {"status": "unreachable", "error": str(e)}

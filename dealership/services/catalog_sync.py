"""
Catalog Sync - storefront-side catalog cache

Keeps vehicles and currently valid offers fetched from the API:
- One in-flight fetch per resource key; concurrent refreshes share it
- force=True starts a fresh fetch whose result supersedes older ones
- Optional timer-driven refresh, skipped while the cache is fresh
- Fetch errors are recorded per key; the timer loop never raises
"""
import asyncio
import logging
from datetime import datetime
from typing import Awaitable, Callable, Dict, List, Optional

from dealership.core.config import settings
from dealership.domain.pricing import find_offer_for_vehicle
from dealership.models.offer import Offer
from dealership.models.vehicle import Vehicle
from dealership.services.catalog_service import (
    OfferView,
    build_offer_view,
    enrich_offers_with_vehicles,
    select_featured_offers,
    select_featured_vehicles,
)
from dealership.utils.api_client import DealershipApiClient
from dealership.utils.time_utils import as_utc, utcnow

logger = logging.getLogger(__name__)

VEHICLES = "vehicles"
OFFERS = "offers"


class CatalogSync:
    """Cache of vehicles and offers with de-duplicated refreshes."""

    def __init__(self, client: DealershipApiClient, clock: Callable[[], datetime] = utcnow):
        self.client = client
        self.clock = clock

        self.vehicles: List[Vehicle] = []
        self.offers: List[Offer] = []
        self.last_fetched: Dict[str, datetime] = {}
        self.errors: Dict[str, str] = {}

        self._in_flight: Dict[str, asyncio.Task] = {}
        self._timer: Optional[asyncio.Task] = None

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------

    def _start(self, key: str, loader: Callable[[], Awaitable[list]], force: bool) -> asyncio.Task:
        task = self._in_flight.get(key)
        if task is not None and not task.done() and not force:
            return task

        task = asyncio.create_task(self._run(key, loader))
        self._in_flight[key] = task
        return task

    async def _run(self, key: str, loader: Callable[[], Awaitable[list]]) -> list:
        me = asyncio.current_task()
        try:
            items = await loader()
        except Exception as e:
            if self._in_flight.get(key) is me:
                self.errors[key] = str(e)
            logger.warning(f"Catalog refresh of {key} failed: {e}")
            raise

        # A forced refresh started after this one owns the cache now
        if self._in_flight.get(key) is me:
            setattr(self, key, items)
            self.last_fetched[key] = self.clock()
            self.errors.pop(key, None)
            logger.info(f"Catalog {key} refreshed ({len(items)} items)")
        return items

    async def _refresh(self, key: str, loader: Callable[[], Awaitable[list]], force: bool) -> list:
        task = self._start(key, loader, force)
        # Shield so one cancelled caller does not cancel the shared fetch
        await asyncio.shield(task)
        return getattr(self, key)

    async def refresh_vehicles(self, force: bool = False) -> List[Vehicle]:
        return await self._refresh(VEHICLES, self.client.fetch_vehicles, force)

    async def refresh_offers(self, force: bool = False) -> List[Offer]:
        return await self._refresh(OFFERS, lambda: self.client.fetch_offers(active_only=True), force)

    async def refresh(self, force: bool = False) -> None:
        """
        Refresh vehicles and offers together.

        Raises:
            CatalogClientError: If either fetch failed (also recorded in `errors`)
        """
        await asyncio.gather(
            self.refresh_vehicles(force=force),
            self.refresh_offers(force=force),
        )

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    def offer_views(self, now: Optional[datetime] = None) -> List[OfferView]:
        now = now or self.clock()
        pairs = enrich_offers_with_vehicles(self.offers, self.vehicles)
        return [build_offer_view(offer, vehicle, now) for offer, vehicle in pairs]

    def featured_vehicles(self) -> List[Vehicle]:
        return select_featured_vehicles(self.vehicles)

    def featured_offers(self, limit: Optional[int] = None) -> List[OfferView]:
        now = self.clock()
        return select_featured_offers(self.offer_views(now), now, limit)

    def offer_for_vehicle(self, vehicle_id: str) -> Optional[Offer]:
        return find_offer_for_vehicle(self.offers, vehicle_id, self.clock())

    # ------------------------------------------------------------------
    # Periodic refresh
    # ------------------------------------------------------------------

    def is_fresh(self, max_age: float) -> bool:
        """Both resources fetched within the last `max_age` seconds."""
        now = as_utc(self.clock())
        for key in (VEHICLES, OFFERS):
            fetched = self.last_fetched.get(key)
            if fetched is None or (now - as_utc(fetched)).total_seconds() >= max_age:
                return False
        return True

    def start_auto_refresh(self, interval: Optional[float] = None) -> None:
        """Refetch every `interval` seconds until stop(). No-op if already running."""
        if self._timer is not None and not self._timer.done():
            return
        interval = settings.CATALOG_REFRESH_SECONDS if interval is None else interval
        self._timer = asyncio.create_task(self._auto_refresh_loop(interval))
        logger.info(f"Catalog auto refresh every {interval}s")

    async def _auto_refresh_loop(self, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            if self.is_fresh(interval):
                continue
            try:
                await self.refresh()
            except Exception as e:
                # Already recorded in self.errors; keep the timer alive
                logger.debug(f"Auto refresh failed: {e}")

    async def stop(self) -> None:
        """Cancel the timer and any fetch still in flight."""
        tasks = [t for t in [self._timer, *self._in_flight.values()] if t is not None and not t.done()]
        for task in tasks:
            task.cancel()
        for task in tasks:
            try:
                await task
            except asyncio.CancelledError:
                pass
            except Exception as e:
                logger.debug(f"Catalog task ended with error during stop: {e}")
        self._timer = None
        self._in_flight.clear()

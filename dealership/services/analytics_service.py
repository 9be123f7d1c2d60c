"""
Analytics Service - admin console reporting

Read-only roll-ups across the catalog and CRM:
- Dashboard (headline numbers plus every resource's stats)
- Sales grouped by day, month or year
- Inventory by category and brand, low and empty stock
- Customer engagement and top buyers
"""
import asyncio
import logging
from collections import Counter
from datetime import datetime
from decimal import Decimal
from typing import Callable, Dict, List, Optional

from dealership.core.config import settings
from dealership.core.exceptions import ValidationError
from dealership.domain.inventory import summarize_inventory
from dealership.domain.pricing import quantize, to_decimal
from dealership.models.customer import Customer
from dealership.models.vehicle import Vehicle
from dealership.repositories import RecordStore
from dealership.schemas.analytics import (
    CustomerAnalyticsSchema,
    DashboardOverviewSchema,
    DashboardSchema,
    InventoryAnalyticsSchema,
    SalesPointSchema,
    TopCustomerSchema,
)
from dealership.services.customer_service import CustomerService
from dealership.services.inquiry_service import InquiryService
from dealership.services.offer_service import OfferService
from dealership.services.vehicle_service import VehicleService
from dealership.utils.time_utils import as_utc, utcnow

logger = logging.getLogger(__name__)

# Zero-padded so that bucket keys sort chronologically as strings
SALES_PERIOD_FORMATS = {
    "day": "%Y-%m-%d",
    "month": "%Y-%m",
    "year": "%Y",
}


class AnalyticsService:
    """Service for admin analytics (Async)"""

    def __init__(self, store: RecordStore, clock: Callable[[], datetime] = utcnow):
        self.store = store
        self.clock = clock

    async def dashboard(self) -> DashboardSchema:
        vehicles, offers, customers, inquiries = await asyncio.gather(
            VehicleService(self.store, self.clock).vehicle_stats(),
            OfferService(self.store, self.clock).offer_stats(),
            CustomerService(self.store, self.clock).customer_stats(),
            InquiryService(self.store, self.clock).inquiry_stats(),
        )
        return DashboardSchema(
            overview=DashboardOverviewSchema(
                totalVehicles=vehicles.total,
                activeOffers=offers.currentlyValid,
                totalCustomers=customers.total,
                newInquiries=inquiries.new,
            ),
            vehicles=vehicles,
            offers=offers,
            customers=customers,
            inquiries=inquiries,
        )

    async def sales(self, period: str = "month") -> List[SalesPointSchema]:
        """
        Purchases bucketed by calendar period (UTC), oldest bucket first.

        Args:
            period: "day", "month" or "year"

        Raises:
            ValidationError: Unknown period
        """
        fmt = SALES_PERIOD_FORMATS.get(period)
        if fmt is None:
            raise ValidationError.from_problems([{
                "param": "period",
                "msg": f"Unknown period '{period}'. Allowed: {', '.join(SALES_PERIOD_FORMATS)}",
            }])

        totals: Dict[str, Decimal] = {}
        counts: Counter = Counter()
        for customer in await self.store.list(Customer):
            for purchase in customer.purchase_history:
                key = as_utc(purchase.purchase_date).strftime(fmt)
                totals[key] = totals.get(key, Decimal("0")) + to_decimal(purchase.amount)
                counts[key] += 1

        logger.debug(f"Sales by {period}: {len(totals)} buckets, {sum(counts.values())} purchases")
        return [
            SalesPointSchema(date=key, sales=float(quantize(totals[key])), count=counts[key])
            for key in sorted(totals)
        ]

    async def inventory(self) -> InventoryAnalyticsSchema:
        """Stock totals; available is floored per vehicle, so overcommitment never offsets other stock."""
        vehicles = await self.store.list(Vehicle)
        totals = summarize_inventory(vehicles)

        by_category: Counter = Counter()
        by_brand: Counter = Counter()
        for vehicle in vehicles:
            by_category[vehicle.category.value] += vehicle.inventory.stock
            by_brand[vehicle.brand] += vehicle.inventory.stock

        return InventoryAnalyticsSchema(
            totalStock=totals.stock,
            totalReserved=totals.reserved,
            available=totals.available,
            lowStock=sum(1 for v in vehicles if v.inventory.stock < settings.LOW_STOCK_THRESHOLD),
            outOfStock=sum(1 for v in vehicles if v.inventory.stock == 0),
            overcommitted=totals.overcommitted,
            byCategory=dict(by_category),
            byBrand=dict(by_brand),
        )

    async def customers(self, limit: Optional[int] = None) -> CustomerAnalyticsSchema:
        """
        Engagement counts plus the top buyers by number of purchases.
        Ties keep store order.
        """
        limit = settings.TOP_CUSTOMERS_LIMIT if limit is None else limit
        customers = await self.store.list(Customer)
        buyers = [c for c in customers if c.purchase_history]
        buyers.sort(key=lambda c: len(c.purchase_history), reverse=True)

        purchases = sum(len(c.purchase_history) for c in customers)
        return CustomerAnalyticsSchema(
            total=len(customers),
            withPurchases=len(buyers),
            withTestDrives=sum(1 for c in customers if c.test_drive_history),
            averagePurchases=round(purchases / len(customers), 2) if customers else 0.0,
            topCustomers=[
                TopCustomerSchema(
                    id=c.id,
                    name=c.full_name,
                    email=c.email,
                    purchases=len(c.purchase_history),
                    totalSpent=float(quantize(sum(
                        (to_decimal(p.amount) for p in c.purchase_history), Decimal("0")
                    ))),
                )
                for c in buyers[:limit]
            ],
        )

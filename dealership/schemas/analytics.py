from pydantic import BaseModel, Field
from typing import Dict, List

from dealership.schemas.customer import CustomerStatsSchema
from dealership.schemas.inquiry import InquiryStatsSchema
from dealership.schemas.offer import OfferStatsSchema
from dealership.schemas.vehicle import VehicleStatsSchema


# ============================================================================
# Dashboard
# ============================================================================

class DashboardOverviewSchema(BaseModel):
    totalVehicles: int
    activeOffers: int = Field(..., description="Offers currently valid")
    totalCustomers: int
    newInquiries: int


class DashboardSchema(BaseModel):
    """Admin console landing page: headline numbers plus per-resource stats."""
    overview: DashboardOverviewSchema
    vehicles: VehicleStatsSchema
    offers: OfferStatsSchema
    customers: CustomerStatsSchema
    inquiries: InquiryStatsSchema


# ============================================================================
# Sales / inventory / customers
# ============================================================================

class SalesPointSchema(BaseModel):
    date: str = Field(..., description="Bucket key: YYYY-MM-DD, YYYY-MM or YYYY")
    sales: float = Field(..., description="Sum of purchase amounts")
    count: int = Field(..., description="Number of purchases")


class InventoryAnalyticsSchema(BaseModel):
    totalStock: int
    totalReserved: int
    available: int
    lowStock: int = Field(..., description="Vehicles with stock below the low-stock threshold")
    outOfStock: int = Field(..., description="Vehicles with zero stock")
    overcommitted: int
    byCategory: Dict[str, int] = Field(..., description="Stock per category")
    byBrand: Dict[str, int] = Field(..., description="Stock per brand")


class TopCustomerSchema(BaseModel):
    id: str
    name: str
    email: str
    purchases: int
    totalSpent: float


class CustomerAnalyticsSchema(BaseModel):
    total: int
    withPurchases: int
    withTestDrives: int
    averagePurchases: float
    topCustomers: List[TopCustomerSchema]

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from dealership.core.security import decode_access_token
from dealership.models.user import CurrentUser, UserRole
from dealership.repositories import RecordStore, get_record_store
from dealership.services.analytics_service import AnalyticsService
from dealership.services.customer_service import CustomerService
from dealership.services.inquiry_service import InquiryService
from dealership.services.offer_service import OfferService
from dealership.services.vehicle_service import VehicleService

# OAuth2 scheme for token authentication (tokens are issued by the auth service)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")


async def get_current_user(
    token: str = Depends(oauth2_scheme)
) -> CurrentUser:
    """
    Dependency to get the current authenticated user.

    Usage in routes:
        current_user: CurrentUser = Depends(get_current_user)
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = decode_access_token(token)
    if payload is None:
        raise credentials_exception

    user_id = payload.get("sub")
    if user_id is None:
        raise credentials_exception

    role = payload.get("role", UserRole.CUSTOMER.value)
    if role not in {r.value for r in UserRole}:
        raise credentials_exception

    return CurrentUser(id=str(user_id), role=role, email=payload.get("email"))


async def require_admin(
    current_user: CurrentUser = Depends(get_current_user)
) -> CurrentUser:
    """
    Dependency to ensure user has admin role.
    """
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden"
        )
    return current_user


# ============================================================================
# Service dependencies
# ============================================================================

def get_vehicle_service(store: RecordStore = Depends(get_record_store)) -> VehicleService:
    return VehicleService(store)


def get_offer_service(store: RecordStore = Depends(get_record_store)) -> OfferService:
    return OfferService(store)


def get_customer_service(store: RecordStore = Depends(get_record_store)) -> CustomerService:
    return CustomerService(store)


def get_inquiry_service(store: RecordStore = Depends(get_record_store)) -> InquiryService:
    return InquiryService(store)


def get_analytics_service(store: RecordStore = Depends(get_record_store)) -> AnalyticsService:
    return AnalyticsService(store)

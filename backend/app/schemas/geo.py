"""Pydantic models for the map data endpoints."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Region(BaseModel):
    """Nation-level aggregate for one state."""

    state: str = Field(description="State identifier as stored in the warehouse")
    store_count: int = Field(default=0, ge=0, description="Stores with GMV last month")
    total_gmv: float = Field(default=0.0, ge=0, description="Last-month GMV")


class SubRegion(BaseModel):
    """State-level aggregate for one city or DMA."""

    city: str = Field(description="City or DMA display name")
    store_count: int = Field(default=0, ge=0)
    total_gmv: float = Field(default=0.0, ge=0)
    avg_gmv_per_store: float = Field(default=0.0, ge=0)
    total_lifetime_gmv: float = Field(default=0.0, ge=0)
    total_lifetime_orders: float = Field(default=0.0, ge=0)
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @model_validator(mode="after")
    def _derive_average(self) -> "SubRegion":
        # Always derived, never trusted from the source row.
        self.avg_gmv_per_store = (
            self.total_gmv / self.store_count if self.store_count > 0 else 0.0
        )
        return self

    @property
    def has_coordinates(self) -> bool:
        return bool(self.latitude) and bool(self.longitude)


class _WarehouseRow(BaseModel):
    """Warehouse rows keep any extra columns they came with."""

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class StoreLocation(_WarehouseRow):
    store_id: int
    store_location_name: Optional[str] = None
    store_address: Optional[str] = None
    store_city: Optional[str] = None
    store_state: Optional[str] = None
    store_zip_code: Optional[str] = None
    store_lifetime_gmv: float = 0.0
    store_lifetime_orders: float = 0.0
    gmv_last_month: float = 0.0
    gmv_current_month: float = 0.0
    latest_seller_id: Optional[int] = None
    seller_full_name: Optional[str] = None


class SellerEntity(_WarehouseRow):
    seller_id: int
    seller_full_name: Optional[str] = None
    seller_first_name: Optional[str] = None
    seller_last_name: Optional[str] = None
    seller_address: Optional[str] = None
    seller_city: Optional[str] = None
    seller_state: Optional[str] = None
    seller_zip_code: Optional[str] = None
    seller_total_gmv: float = 0.0
    gmv_last_month: float = 0.0
    gmv_mtd: float = 0.0
    active_stores_count: float = 0.0
    orders_mtd_count: float = 0.0

    @property
    def display_name(self) -> str:
        if self.seller_full_name:
            return self.seller_full_name
        parts = [p for p in (self.seller_first_name, self.seller_last_name) if p]
        return " ".join(parts) or f"Seller #{self.seller_id}"


class NetworkEdge(BaseModel):
    """A store/seller pair with their shared order history."""

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    store_id: int
    store_location_name: Optional[str] = None
    store_lat: float
    store_lng: float
    seller_id: int
    seller_full_name: Optional[str] = None
    seller_lat: float
    seller_lng: float
    connection_count: float = 0.0
    connection_gmv: float = 0.0


class UserInfo(BaseModel):
    username: str
    role: str


def dump_records(items: list[BaseModel]) -> list[dict[str, Any]]:
    return [item.model_dump(mode="json") for item in items]

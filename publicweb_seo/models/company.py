from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict


class GeoPoint(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    latitude: Optional[float] = None
    longitude: Optional[float] = None


class CompanyRecord(BaseModel):
    """Public business profile as exposed by the company directory."""

    model_config = ConfigDict(allow_inf_nan=False)

    id: str
    name: str
    slug: str
    public_enabled: bool = False
    address: Optional[str] = None
    comuna: Optional[str] = None
    region: Optional[str] = None
    whatsapp: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    location: Optional[GeoPoint] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    weekday_days: Optional[List[str]] = None
    weekday_open_time: Optional[str] = None
    weekday_close_time: Optional[str] = None
    weekend_days: Optional[List[str]] = None
    weekend_open_time: Optional[str] = None
    weekend_close_time: Optional[str] = None
    social_links: Optional[List[str]] = None
    category_id: Optional[str] = None
    updated_at: Optional[datetime] = None


class ServiceRecord(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    id: str
    name: str
    description: Optional[str] = None
    price: Optional[Union[int, float]] = None
    estimated_duration_minutes: Optional[int] = None
    status: Optional[str] = None
    tags: Optional[List[str]] = None
    slug: Optional[str] = None
    updated_at: Optional[datetime] = None
    popularity: Optional[int] = None
    bookings_count: Optional[int] = None

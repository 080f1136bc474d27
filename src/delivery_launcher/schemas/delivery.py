"""Pydantic request/response models for delivery endpoints."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator


class ShippingOptionInput(BaseModel):
    option_id: str
    carrier_id: str
    carrier_name: str = ""
    service_level: str = ""
    price: float
    lead_time_days: int


class ShippingOptionModel(BaseModel):
    option_id: str
    carrier_id: str
    carrier_name: str
    service_level: str
    price: float
    lead_time_days: int
    summary: str = Field(..., description="Human readable line, e.g. 'Colissimo (12€, 2 jours)'.")
    label: str = Field(..., description="Radio-group label with service level.")


class SelectionModel(BaseModel):
    source: Literal["fastest", "cheapest"]
    option_id: str


class NoticeModel(BaseModel):
    title: str
    message: str
    variant: Literal["success", "info", "warning", "error"]


class TransportOptionsRequest(BaseModel):
    zone_code: Optional[str] = Field(default=None, description="Delivery zone (FR, BE, CH, LU).")
    shipping_country: Optional[str] = Field(
        default=None,
        description="Shipping country name or ISO code, used to derive the zone when zone_code is omitted.",
    )


class TransportOptionsResponse(BaseModel):
    order_id: str
    zone_code: Optional[str]
    compatible: List[ShippingOptionModel]
    cheapest: List[ShippingOptionModel]
    fastest: List[ShippingOptionModel]
    best_cheapest: Optional[ShippingOptionModel] = None
    best_fastest: Optional[ShippingOptionModel] = None
    best_cheapest_label: str
    best_fastest_label: str
    selection: Optional[SelectionModel] = None
    classifier_version: str
    metadata: dict
    notice: NoticeModel


class LaunchRequest(BaseModel):
    selection: Optional[SelectionModel] = Field(
        default=None,
        description="Chosen option; defaults to the preselected option of the last refresh.",
    )
    tracking_number: Optional[str] = Field(default=None, max_length=255)

    @field_validator("tracking_number")
    @classmethod
    def strip_tracking_number(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        return value or None


class LaunchResponse(BaseModel):
    order_id: str
    shipment_id: str
    option_id: str
    tracking_number: Optional[str] = None
    notice: NoticeModel


class ClassifyRequest(BaseModel):
    options: List[ShippingOptionInput] = Field(default_factory=list)
    lead_time_tolerance_days: Optional[int] = Field(default=None, ge=0)
    rebalance_min_distinct_carriers: Optional[int] = Field(default=None, ge=1)


class ClassifyResponse(BaseModel):
    cheapest: List[ShippingOptionModel]
    fastest: List[ShippingOptionModel]
    best_cheapest: Optional[ShippingOptionModel] = None
    best_fastest: Optional[ShippingOptionModel] = None
    classifier_version: str

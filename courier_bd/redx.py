import logging
from typing import Final

import requests

from . import payload
from .base import Courier, CourierError, Order, RequestHandler
from .config import RedxConfig
from .enums import Provider
from .geo import ApiGeoResolver, GeoResolver, StaticGeoResolver

PARCEL_WEIGHT: Final = 500  # grams, no real weight data on orders
INSTRUCTION_LIMIT: Final = 150

# Placeholder ids, superseded by GET /areas when REDX_LIVE_GEO is set
AREA_IDS: Final = {
    "dhaka": 1,
    "chittagong": 2,
    "sylhet": 58,
    "rajshahi": 46,
    "khulna": 30,
    "barisal": 6,
    "rangpur": 48,
    "mymensingh": 38,
    "cumilla": 15,
    "gazipur": 23,
    "narayanganj": 39,
}


class RedxCourier(Courier):
    provider = Provider.Redx

    def __init__(
        self,
        config: RedxConfig,
        session: requests.Session | None = None,
        timeout: float | None = None,
    ):
        self.config = config
        kwargs = {"timeout": timeout} if timeout is not None else {}
        self.handler = RedxRequestHandler(config, session=session, **kwargs)

        static_areas = StaticGeoResolver(AREA_IDS, default=1)
        if config.live_geo:
            self.area_resolver: GeoResolver = ApiGeoResolver(
                self._area_rows, static_areas, tag="Redx"
            )
        else:
            self.area_resolver = static_areas

    def create_order(self, order: Order) -> dict:
        area_id = self.area_resolver.resolve(payload.recipient_city(order))
        body = RedxPayloadAdapter.convert(order, area_id)

        logging.info(f"[Redx] Creating parcel for order {order.id}")
        return self.handler.checked("POST", "/parcel", "Failed to create Redx parcel", json=body)

    def get_order_status(self, tracking_id: str) -> dict:
        return self.handler.checked(
            "GET",
            "/parcel/track",
            "Failed to get parcel status",
            params={"tracking_id": tracking_id},
        )

    def cancel_order(self, tracking_id: str) -> dict:
        return self.handler.checked(
            "POST",
            "/parcel/cancel",
            "Failed to cancel parcel",
            json={"tracking_id": tracking_id},
        )

    def get_areas(self) -> dict:
        return self.handler.request("GET", "/areas", "Failed to fetch areas: ")

    def get_bulk_status(self, tracking_ids: list[str]) -> dict:
        return self.handler.request(
            "POST",
            "/parcel/track/bulk",
            "Failed to get bulk status: ",
            json={"tracking_ids": tracking_ids},
        )

    def get_delivery_charge(self, area_id: int, weight: int, cod_amount: int = 0) -> dict:
        return self.handler.request(
            "GET",
            "/delivery-charge",
            "Failed to get delivery charge: ",
            params={"area_id": area_id, "weight": weight, "cod_amount": cod_amount},
        )

    def _area_rows(self) -> list[tuple[str, int]]:
        return [(row["name"], row["id"]) for row in self.get_areas().get("areas") or []]


class RedxRequestHandler(RequestHandler):
    tag = "Redx"

    def __init__(self, config: RedxConfig, **kwargs):
        super().__init__(config.base_url, **kwargs)
        self.config = config

    def headers(self) -> dict:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.config.api_key}",
        }

    def checked(self, method: str, path: str, failure: str, **kwargs) -> dict:
        """Send the request and treat `success: false` in the body as failure"""
        data = self.request(method, path, f"{failure}: ", **kwargs)
        if not isinstance(data, dict) or not data.get("success"):
            message = data.get("message") if isinstance(data, dict) else None
            raise CourierError(message or failure, body=data)
        return data


class RedxPayloadAdapter:
    @staticmethod
    def convert(order: Order, area_id: int) -> dict:
        address = order.shipping_address
        instruction = (
            f"E-commerce Order #{payload.short_id(order)} - Handle with care. "
            f"Items: {payload.describe_items(order)}"
        )
        return {
            "customer_name": address.full_name,
            "customer_phone": payload.recipient_phone(order),
            "delivery_area": payload.recipient_city(order),
            "delivery_area_id": area_id,
            "customer_address": f"{address.address}, {address.district} - {address.postal_code}",
            "merchant_invoice_id": order.id,
            "cash_collection_amount": payload.collect_amount(order),
            "parcel_weight": PARCEL_WEIGHT,
            "instruction": payload.clip(instruction, INSTRUCTION_LIMIT),
            "value": payload.round_amount(order.total_price),
        }

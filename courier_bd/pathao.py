import logging
import time
from dataclasses import dataclass
from typing import Final

import requests

from . import payload
from .base import AuthenticationError, Courier, CourierError, Order, RequestHandler
from .config import PathaoConfig
from .enums import Provider
from .geo import ApiGeoResolver, GeoResolver, StaticGeoResolver

DELIVERY_TYPE: Final = 48  # 48 hours
ITEM_TYPE: Final = 2  # parcel
ITEM_WEIGHT: Final = 0.5  # kg, no real weight data on orders
DESCRIPTION_LIMIT: Final = 250

# Placeholder ids, superseded by the live lists when PATHAO_LIVE_GEO is set
CITY_IDS: Final = {
    "dhaka": 1,
    "chittagong": 2,
    "sylhet": 3,
    "rajshahi": 4,
    "barisal": 5,
    "khulna": 6,
    "rangpur": 7,
    "mymensingh": 8,
}
ZONE_IDS: Final = {
    "dhanmondi": 1,
    "gulshan": 2,
    "uttara": 3,
    "motijheel": 4,
    "olddhaka": 5,
}


@dataclass(frozen=True)
class PathaoToken:
    token: str
    obtained_at: float

    def expired(self, ttl: float | None, now: float | None = None) -> bool:
        if ttl is None:
            return False
        return (now if now is not None else time.time()) - self.obtained_at >= ttl


class PathaoCourier(Courier):
    provider = Provider.Pathao

    def __init__(
        self,
        config: PathaoConfig,
        session: requests.Session | None = None,
        timeout: float | None = None,
    ):
        self.config = config
        kwargs = {"timeout": timeout} if timeout is not None else {}
        self.handler = PathaoRequestHandler(config, session=session, **kwargs)

        static_cities = StaticGeoResolver(CITY_IDS, default=1)
        if config.live_geo:
            self.city_resolver: GeoResolver = ApiGeoResolver(
                self._city_rows, static_cities, tag="Pathao"
            )
        else:
            self.city_resolver = static_cities
        self._zone_resolvers: dict[int, GeoResolver] = {}

    def zone_resolver(self, city_id: int) -> GeoResolver:
        if city_id not in self._zone_resolvers:
            static_zones = StaticGeoResolver(ZONE_IDS, default=1)
            if self.config.live_geo:
                self._zone_resolvers[city_id] = ApiGeoResolver(
                    lambda: self._zone_rows(city_id), static_zones, tag="Pathao"
                )
            else:
                self._zone_resolvers[city_id] = static_zones
        return self._zone_resolvers[city_id]

    def create_order(self, order: Order) -> dict:
        city_id = self.city_resolver.resolve(payload.recipient_city(order))
        zone_id = self.zone_resolver(city_id).resolve(order.shipping_address.district)
        body = PathaoPayloadAdapter.convert(order, self.config.store_id, city_id, zone_id)

        logging.info(f"[Pathao] Creating consignment for order {order.id}")
        return self.handler.authed("POST", "/aladdin/api/v1/orders", json=body)

    def get_order_status(self, tracking_id: str) -> dict:
        return self.handler.authed("GET", f"/orders/{tracking_id}")

    def cancel_order(self, tracking_id: str) -> dict:
        return self.handler.authed("PUT", f"/orders/{tracking_id}/cancel")

    def get_cities(self) -> dict:
        return self.handler.authed("GET", "/cities")

    def get_zones(self, city_id: int) -> dict:
        return self.handler.authed("GET", f"/cities/{city_id}/zone-list")

    def get_stores(self) -> dict:
        return self.handler.authed("GET", "/stores")

    def _city_rows(self) -> list[tuple[str, int]]:
        return [(row["city_name"], row["city_id"]) for row in _rows(self.get_cities())]

    def _zone_rows(self, city_id: int) -> list[tuple[str, int]]:
        return [(row["zone_name"], row["zone_id"]) for row in _rows(self.get_zones(city_id))]


class PathaoRequestHandler(RequestHandler):
    tag = "Pathao"

    def __init__(self, config: PathaoConfig, **kwargs):
        super().__init__(config.base_url, **kwargs)
        self.config = config
        self.token: PathaoToken | None = None

    def headers(self) -> dict:
        return {"Content-Type": "application/json", "Accept": "application/json"}

    def authenticate(self) -> PathaoToken:
        logging.info("[Pathao] Requesting access token")
        credentials = {
            "client_id": self.config.client_id,
            "client_secret": self.config.client_secret,
            "username": self.config.username,
            "password": self.config.password,
            "grant_type": "password",
        }
        try:
            data = self.request("POST", "/issue-token", json=credentials)
        except CourierError as e:
            logging.error(f"[Pathao] Authentication error: {e}")
            raise AuthenticationError(
                "Failed to authenticate with Pathao API", status_code=e.status_code, body=e.body
            )

        access_token = data.get("access_token") if isinstance(data, dict) else None
        if not access_token:
            logging.error("[Pathao] Token response carried no access_token")
            raise AuthenticationError("Failed to authenticate with Pathao API", body=data)

        self.token = PathaoToken(token=access_token, obtained_at=time.time())
        return self.token

    def access_token(self) -> str:
        if self.token is None or self.token.expired(self.config.token_ttl):
            return self.authenticate().token
        return self.token.token

    def authed(self, method: str, path: str, **kwargs) -> dict:
        headers = {"Authorization": f"Bearer {self.access_token()}"}
        data = self.request(method, path, headers=headers, **kwargs)
        if isinstance(data, dict) and data.get("type") == "error":
            raise CourierError(data.get("message") or "Pathao rejected the request", body=data)
        return data


class PathaoPayloadAdapter:
    @staticmethod
    def convert(order: Order, store_id: int, city_id: int, zone_id: int) -> dict:
        address = order.shipping_address
        body = {
            "store_id": store_id,
            "merchant_order_id": order.id,
            "recipient_name": address.full_name,
            "recipient_phone": payload.recipient_phone(order),
            "recipient_address": address.address,
            "recipient_city": city_id,
            "recipient_zone": zone_id,
            "delivery_type": DELIVERY_TYPE,
            "item_type": ITEM_TYPE,
            "special_instruction": f"Order #{payload.short_id(order)} - E-commerce delivery",
            "item_quantity": payload.total_quantity(order),
            "item_weight": ITEM_WEIGHT,
            "amount_to_collect": payload.collect_amount(order),
            "item_description": payload.clip(
                payload.describe_items(order, "{name} x{quantity}"), DESCRIPTION_LIMIT
            ),
        }
        if address.area_id:
            body["recipient_area"] = address.area_id
        return body


def _rows(response: dict) -> list[dict]:
    data = response.get("data") or {}
    if isinstance(data, dict):
        data = data.get("data") or []
    return data

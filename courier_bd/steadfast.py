import logging
from typing import Final

import requests

from . import payload
from .base import Courier, CourierError, Order, RequestHandler
from .config import SteadfastConfig
from .enums import Provider

NOTE_LIMIT: Final = 200


class SteadfastCourier(Courier):
    provider = Provider.Steadfast

    def __init__(
        self,
        config: SteadfastConfig,
        session: requests.Session | None = None,
        timeout: float | None = None,
    ):
        self.config = config
        kwargs = {"timeout": timeout} if timeout is not None else {}
        self.handler = SteadfastRequestHandler(config, session=session, **kwargs)

    def create_order(self, order: Order) -> dict:
        body = SteadfastPayloadAdapter.convert(order)
        logging.info(f"[Steadfast] Creating consignment for invoice {body['invoice']}")
        return self.handler.checked(
            "POST",
            "/create_order",
            "Failed to create Steadfast order",
            json=body,
        )

    def get_order_status(self, tracking_id: str) -> dict:
        return self.handler.checked(
            "GET", f"/status_by_trackingcode/{tracking_id}", "Failed to get order status"
        )

    def cancel_order(self, tracking_id: str) -> dict:
        return self.handler.checked(
            "POST",
            "/cancel_order_by_consignment",
            "Failed to cancel order",
            json={"consignment_id": tracking_id},
        )

    def check_balance(self) -> dict:
        return self.handler.request("GET", "/check_balance", "Failed to check balance: ")

    def get_bulk_status(self, tracking_codes: list[str]) -> dict:
        return self.handler.request(
            "POST",
            "/bulk_status_by_trackingcode",
            "Failed to get bulk status: ",
            json={"tracking_code": ",".join(tracking_codes)},
        )

    def get_delivery_charge(self, recipient_address: str, cod_amount: int = 0) -> dict:
        return self.handler.request(
            "POST",
            "/get_delivery_charge",
            "Failed to get delivery charge: ",
            json={"recipient_address": recipient_address, "cod_amount": cod_amount},
        )


class SteadfastRequestHandler(RequestHandler):
    tag = "Steadfast"

    def __init__(self, config: SteadfastConfig, **kwargs):
        super().__init__(config.base_url, **kwargs)
        self.config = config

    def headers(self) -> dict:
        return {
            "Content-Type": "application/json",
            "Api-Key": self.config.api_key,
            "Secret-Key": self.config.secret_key,
        }

    def checked(self, method: str, path: str, failure: str, **kwargs) -> dict:
        """Send the request and treat a body `status` other than 200 as failure"""
        data = self.request(method, path, f"{failure}: ", **kwargs)
        if not isinstance(data, dict) or data.get("status") != 200:
            message = data.get("message") if isinstance(data, dict) else None
            raise CourierError(message or failure, body=data)
        return data


class SteadfastPayloadAdapter:
    @staticmethod
    def convert(order: Order) -> dict:
        address = order.shipping_address
        items = payload.describe_items(order)
        note = (
            f"E-commerce Order #{payload.short_id(order)} - "
            f"{len(order.order_items)} item(s) - {items}"
        )
        return {
            "invoice": payload.invoice_id(order),
            "recipient_name": address.full_name,
            "recipient_phone": payload.recipient_phone(order),
            "recipient_address": (
                f"{address.address}, {payload.recipient_city(order)}, {address.district} - {address.postal_code}"
            ),
            "cod_amount": payload.collect_amount(order),
            "note": payload.clip(note, NOTE_LIMIT),
        }

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

import requests

from .enums import Provider

DEFAULT_TIMEOUT = 15


class CourierError(Exception):
    """Raised by an adapter when a courier call fails."""

    def __init__(self, message: str, status_code: int | None = None, body: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.body = body


class AuthenticationError(CourierError):
    pass


class CourierNotConfigured(CourierError):
    pass


@dataclass(frozen=True)
class OrderItem:
    name: str
    quantity: int


@dataclass(frozen=True)
class ShippingAddress:
    full_name: str
    phone: str | None
    address: str
    city: str | None
    district: str
    postal_code: str
    area_id: int | None = None


@dataclass(frozen=True)
class Order:
    id: str
    shipping_address: ShippingAddress
    order_items: list[OrderItem]
    total_price: float
    is_paid: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> "Order":
        """
        Build an `Order` from the storefront's order document

        Parameters
        ----------
        data : dict
            Order document with camelCase keys (`_id` or `id`,
            `shippingAddress`, `orderItems`, `totalPrice`, `isPaid`)

        Returns
        -------
        Order
        """
        address = data.get("shippingAddress") or {}
        items = data.get("orderItems") or []
        return cls(
            id=str(data.get("_id") or data.get("id") or ""),
            shipping_address=ShippingAddress(
                full_name=address.get("fullName") or "",
                phone=address.get("phone"),
                address=address.get("address") or "",
                city=address.get("city"),
                district=address.get("district") or "",
                postal_code=str(address.get("postalCode") or ""),
                area_id=address.get("areaId"),
            ),
            order_items=[
                OrderItem(name=item.get("name") or "", quantity=int(item.get("quantity") or 0))
                for item in items
            ],
            total_price=float(data.get("totalPrice") or 0),
            is_paid=bool(data.get("isPaid", False)),
        )


@dataclass
class DispatchResult:
    success: bool
    tracking_id: str
    provider: Provider | str
    message: str
    provider_response: Any = field(default=None, repr=False)


@dataclass
class StatusResult:
    success: bool
    tracking_id: str
    status: str
    provider: Provider | str
    details: Any = field(default=None, repr=False)
    message: str = ""


@dataclass
class CancelResult:
    success: bool
    tracking_id: str
    provider: Provider | str
    message: str
    provider_response: Any = field(default=None, repr=False)


class Courier(ABC):
    provider: Provider

    @abstractmethod
    def create_order(self, order: Order) -> dict:
        """
        Submit the order to the courier and create a consignment

        Parameters
        ----------
        order : Order
            The order to ship

        Returns
        -------
        dict
            The parsed courier response

        Raises
        ------
        CourierError
            If the courier rejects the request
        """
        pass

    @abstractmethod
    def get_order_status(self, tracking_id: str) -> dict:
        """
        Query the current status of a consignment

        Parameters
        ----------
        tracking_id : str
            The courier-assigned tracking id

        Returns
        -------
        dict
            The parsed courier response
        """
        pass

    @abstractmethod
    def cancel_order(self, tracking_id: str) -> dict:
        """Ask the courier to cancel a consignment"""
        pass


class RequestHandler(ABC):
    def __init__(
        self,
        base_url: str,
        session: requests.Session | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    @property
    @abstractmethod
    def tag(self) -> str:
        """Name used in log lines and error messages"""
        pass

    @abstractmethod
    def headers(self) -> dict:
        pass

    def request(self, method: str, path: str, error_prefix: str = "", **kwargs) -> dict:
        url = f"{self.base_url}{path}"
        headers = {**self.headers(), **kwargs.pop("headers", {})}

        logging.info(f"[{self.tag}] {method} {url}")
        try:
            response = self.session.request(
                method, url, headers=headers, timeout=self.timeout, **kwargs
            )
        except requests.RequestException as e:
            raise CourierError(f"{error_prefix}Request to {self.tag} failed: {e}")

        if not response.ok:
            message = extract_error_message(response)
            logging.error(f"[{self.tag}] {method} {url} -> {message}")
            raise CourierError(
                f"{error_prefix}{message}",
                status_code=response.status_code,
                body=response.text,
            )

        try:
            return response.json()
        except ValueError:
            raise CourierError(
                f"{error_prefix}Invalid JSON response from {self.tag}",
                status_code=response.status_code,
                body=response.text,
            )


def extract_error_message(response: requests.Response) -> str:
    """
    Pull a readable message out of a failed courier response

    Uses the `message` or `error` field of a JSON body, falling back to
    `HTTP <status>: <reason>`.
    """
    fallback = f"HTTP {response.status_code}: {response.reason}"
    try:
        body = response.json()
    except ValueError:
        return fallback

    if isinstance(body, dict):
        message = body.get("message") or body.get("error")
        if isinstance(message, str) and message:
            return message
    return fallback

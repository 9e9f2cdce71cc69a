import json

import pytest

from courier_bd import Order, OrderItem, ShippingAddress


class FakeResponse:
    def __init__(self, status_code: int = 200, body=None, text: str | None = None, reason: str = "OK"):
        self.status_code = status_code
        self.reason = reason
        self._body = body
        self.text = text if text is not None else json.dumps(body)

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self):
        if self._body is not None:
            return self._body
        return json.loads(self.text)


class FakeSession:
    """Stands in for `requests.Session`, answering by method and URL suffix."""

    def __init__(self):
        self.routes = []
        self.calls = []

    def add(self, method: str, path: str, response=None, exc: Exception | None = None):
        self.routes.append((method, path, response, exc))
        return self

    def calls_to(self, path: str) -> list:
        return [call for call in self.calls if call["url"].endswith(path)]

    def request(self, method, url, headers=None, timeout=None, **kwargs):
        self.calls.append({"method": method, "url": url, "headers": headers or {}, **kwargs})
        candidates = sorted(self.routes, key=lambda route: len(route[1]), reverse=True)
        for route_method, path, response, exc in candidates:
            if route_method == method and url.endswith(path):
                if exc is not None:
                    raise exc
                return response
        return FakeResponse(404, {"message": f"No route for {method} {url}"}, reason="Not Found")


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def order():
    return Order(
        id="abc123",
        shipping_address=ShippingAddress(
            full_name="Karim",
            phone="01700000000",
            address="House 5, Road 2",
            city="Dhaka",
            district="Dhanmondi",
            postal_code="1209",
        ),
        order_items=[OrderItem(name="USB Cable", quantity=2)],
        total_price=1500,
        is_paid=False,
    )


@pytest.fixture
def bulky_order(order):
    items = [OrderItem(name=f"Mechanical Keyboard Model {i}", quantity=i + 1) for i in range(20)]
    return Order(
        id="64f1c2a9e3b5d7f801234567",
        shipping_address=order.shipping_address,
        order_items=items,
        total_price=12499.5,
        is_paid=False,
    )


PATHAO_ENV = {
    "PATHAO_CLIENT_ID": "client",
    "PATHAO_CLIENT_SECRET": "secret",
    "PATHAO_USERNAME": "merchant@example.com",
    "PATHAO_PASSWORD": "hunter2",
}
STEADFAST_ENV = {
    "STEADFAST_API_KEY": "sf-key",
    "STEADFAST_SECRET_KEY": "sf-secret",
}
REDX_ENV = {
    "REDX_API_KEY": "redx-key",
}
ALL_ENV = {**PATHAO_ENV, **STEADFAST_ENV, **REDX_ENV}


@pytest.fixture
def env():
    return dict(ALL_ENV)

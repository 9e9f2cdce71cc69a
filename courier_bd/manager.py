import logging
from typing import Mapping

import requests

from .base import (
    CancelResult,
    Courier,
    CourierError,
    CourierNotConfigured,
    DispatchResult,
    Order,
    StatusResult,
)
from .config import PathaoConfig, RedxConfig, SteadfastConfig, http_timeout, load_environment
from .enums import Provider
from .pathao import PathaoCourier
from .redx import RedxCourier
from .steadfast import SteadfastCourier


class CourierFactory:
    @staticmethod
    def create(
        provider: Provider,
        env: Mapping[str, str],
        session: requests.Session | None = None,
    ) -> Courier | None:
        """Build the adapter for `provider`, or `None` if its credentials are incomplete"""
        timeout = http_timeout(env)
        match provider:
            case Provider.Pathao:
                config = PathaoConfig.from_env(env)
                return config and PathaoCourier(config, session=session, timeout=timeout)
            case Provider.Steadfast:
                config = SteadfastConfig.from_env(env)
                return config and SteadfastCourier(config, session=session, timeout=timeout)
            case Provider.Redx:
                config = RedxConfig.from_env(env)
                return config and RedxCourier(config, session=session, timeout=timeout)
            case _:
                raise ValueError(f"Invalid provider: {provider}")


class LogisticsManager:
    """Single entry point for sending orders to couriers and tracking them.

    Only providers with a complete credential set get an adapter. The set is
    fixed at construction. Every public method returns a result object and
    never raises.
    """

    def __init__(
        self,
        env: Mapping[str, str] | None = None,
        session: requests.Session | None = None,
    ):
        env = load_environment(env)
        self.couriers: dict[Provider, Courier] = {}

        for provider in Provider:
            try:
                courier = CourierFactory.create(provider, env, session=session)
            except Exception as e:
                logging.warning(f"[{provider.label}] Service not initialized: {e}")
                continue
            if courier is not None:
                self.couriers[provider] = courier

    @property
    def available_providers(self) -> list[Provider]:
        return list(self.couriers)

    def is_configured(self, provider: Provider | str) -> bool:
        try:
            return _as_provider(provider) in self.couriers
        except ValueError:
            return False

    def _courier(self, provider: Provider) -> Courier:
        courier = self.couriers.get(provider)
        if courier is None:
            raise CourierNotConfigured(f"{provider.label} service is not configured")
        return courier

    def send_order_to_provider(self, order: Order | dict, provider: Provider | str) -> DispatchResult:
        """
        Create a consignment for `order` with the chosen courier

        Parameters
        ----------
        order : Order | dict
            The order to ship, or the storefront's order document
        provider : Provider | str
            Courier to use, e.g. `Provider.Steadfast` or `"steadfast"`

        Returns
        -------
        DispatchResult
            `success=True` with the courier's tracking id, or `success=False`
            with the failure message
        """
        try:
            provider = _as_provider(provider)
            if isinstance(order, dict):
                order = Order.from_dict(order)
            response = self._courier(provider).create_order(order)
            return self._dispatch_result(provider, response)
        except Exception as e:
            logging.error(f"[{_label(provider)}] Error sending order {_order_id(order)}: {e}")
            return DispatchResult(
                success=False,
                tracking_id="",
                provider=provider,
                message=_message(e, f"Failed to send order to {_label(provider)}"),
            )

    def _dispatch_result(self, provider: Provider, response: dict) -> DispatchResult:
        match provider:
            case Provider.Pathao:
                tracking_id = (response.get("data") or {}).get("consignment_id")
            case Provider.Steadfast:
                tracking_id = (response.get("consignment") or {}).get("tracking_code")
            case Provider.Redx:
                tracking_id = response.get("tracking_id")

        if not tracking_id:
            raise CourierError(f"{provider.label} response did not include a tracking id", body=response)

        return DispatchResult(
            success=True,
            tracking_id=str(tracking_id),
            provider=provider,
            message=response.get("message") or f"Order successfully sent to {provider.label}",
            provider_response=response,
        )

    def get_order_status(self, tracking_id: str, provider: Provider | str) -> StatusResult:
        """
        Look up the courier's current status for a consignment

        The status string is the courier's own wording, or `"unknown"`.
        """
        try:
            provider = _as_provider(provider)
            response = self._courier(provider).get_order_status(tracking_id)
            return self._status_result(provider, tracking_id, response)
        except Exception as e:
            logging.error(f"[{_label(provider)}] Error fetching status of {tracking_id}: {e}")
            message = _message(e, f"Failed to get status from {_label(provider)}")
            return StatusResult(
                success=False,
                tracking_id=tracking_id,
                status="unknown",
                provider=provider,
                details=message,
                message=message,
            )

    def _status_result(self, provider: Provider, tracking_id: str, response: dict) -> StatusResult:
        match provider:
            case Provider.Pathao:
                status = (response.get("data") or {}).get("order_status")
            case Provider.Steadfast:
                status = response.get("current_status") or response.get("delivery_status")
            case Provider.Redx:
                status = (response.get("tracking_info") or {}).get("current_status")

        return StatusResult(
            success=True,
            tracking_id=tracking_id,
            status=status or "unknown",
            provider=provider,
            details=response,
        )

    def cancel_order(self, tracking_id: str, provider: Provider | str) -> CancelResult:
        try:
            provider = _as_provider(provider)
            response = self._courier(provider).cancel_order(tracking_id)
        except Exception as e:
            logging.error(f"[{_label(provider)}] Error cancelling {tracking_id}: {e}")
            return CancelResult(
                success=False,
                tracking_id=tracking_id,
                provider=provider,
                message=_message(e, f"Failed to cancel order with {_label(provider)}"),
            )

        message = response.get("message") if isinstance(response, dict) else None
        return CancelResult(
            success=True,
            tracking_id=tracking_id,
            provider=provider,
            message=message or f"Order cancelled with {provider.label}",
            provider_response=response,
        )


def _as_provider(provider: Provider | str) -> Provider:
    if isinstance(provider, Provider):
        return provider
    try:
        return Provider((provider or "").strip().lower())
    except ValueError:
        raise ValueError(f"Unsupported logistics provider: {provider}")


def _order_id(order) -> str:
    if isinstance(order, Order):
        return order.id
    if isinstance(order, dict):
        return str(order.get("_id") or order.get("id") or "")
    return type(order).__name__


def _label(provider: Provider | str) -> str:
    return provider.label if isinstance(provider, Provider) else str(provider)


def _message(error: Exception, fallback: str) -> str:
    return str(error) or fallback


def send_order(order: Order, provider: Provider | str) -> DispatchResult:
    return LogisticsManager().send_order_to_provider(order, provider)


def track(tracking_id: str, provider: Provider | str) -> StatusResult:
    return LogisticsManager().get_order_status(tracking_id, provider)

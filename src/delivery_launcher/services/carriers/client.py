"""HTTP client for the carrier service (transport options lookup and shipment creation)."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Optional

import httpx

from ...config import settings
from ...models.domain import ShippingOption

logger = logging.getLogger(__name__)


class UpstreamError(RuntimeError):
    """Failure reported by (or while talking to) the carrier service."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def normalise_error_message(body: Any, fallback: str = "Erreur inconnue") -> str:
    """Extract a human readable message from an error payload.

    Accepts a list of error objects (first ``message`` wins), a single object
    with ``message``, or plain text.
    """
    if body is None or body == "":
        return fallback
    if isinstance(body, list):
        first = body[0] if body else None
        if isinstance(first, dict) and first.get("message"):
            return str(first["message"])
        return fallback
    if isinstance(body, dict):
        for key in ("message", "detail", "error"):
            if body.get(key):
                return str(body[key])
        return fallback
    return str(body)


def _response_error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = response.text.strip()
    return normalise_error_message(body, fallback=f"Carrier service returned HTTP {response.status_code}")


def _parse_option(raw: Any) -> ShippingOption:
    if not isinstance(raw, dict):
        raise UpstreamError(f"Malformed transport option: {raw!r}")
    try:
        carrier_id = str(raw["carrierId"])
        option_id = carrier_id if raw.get("optionId") is None else str(raw["optionId"])
        lead_time = raw["leadTimeDays"]
        if isinstance(lead_time, float) and lead_time.is_integer():
            lead_time = int(lead_time)
        return ShippingOption(
            option_id=option_id,
            carrier_id=carrier_id,
            carrier_name=str(raw.get("carrierName") or ""),
            service_level=str(raw.get("serviceLevel") or ""),
            price=float(raw["price"]),
            lead_time_days=lead_time,
        )
    except KeyError as exc:
        raise UpstreamError(f"Transport option is missing field {exc.args[0]!r}.") from exc
    except (TypeError, ValueError) as exc:
        raise UpstreamError(f"Transport option has an invalid value: {exc}") from exc


class CarrierServiceClient:
    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.carrier_service_base_url or "").rstrip("/")
        if not self.base_url:
            raise ValueError("Carrier service base URL is not configured.")
        self.timeout = timeout if timeout is not None else settings.carrier_service_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.carrier_service_max_retries
        self.backoff_seconds = (
            backoff_seconds if backoff_seconds is not None else settings.carrier_service_backoff_seconds
        )
        self._transport = transport

    def _get_client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout, connect=10.0),
            transport=self._transport,
        )

    def _request(self, send: Callable[[httpx.Client], httpx.Response]) -> httpx.Response:
        client = self._get_client()
        try:
            attempt = 0
            while True:
                try:
                    response = send(client)
                    response.raise_for_status()
                    return response
                except httpx.HTTPStatusError as e:
                    status_code = e.response.status_code
                    # Client errors carry a business message and are never retried
                    if status_code < 500:
                        raise UpstreamError(_response_error_message(e.response), status_code) from e
                    attempt += 1
                    if attempt > self.max_retries:
                        raise UpstreamError(_response_error_message(e.response), status_code) from e
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(
                        f"Carrier service HTTP {status_code}, retrying in {wait_time:.1f}s "
                        f"(attempt {attempt}/{self.max_retries})"
                    )
                    time.sleep(wait_time)
                except httpx.TimeoutException as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        logger.warning(f"Carrier service request timed out after {self.max_retries} retries: {e}")
                        raise UpstreamError("Le service transporteur ne répond pas (délai dépassé).") from e
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(f"Carrier service timeout, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries})")
                    time.sleep(wait_time)
                except (httpx.ConnectError, httpx.NetworkError) as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise UpstreamError(
                            f"Failed to connect to carrier service at {self.base_url}: {e}"
                        ) from e
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(f"Carrier service network error, retrying in {wait_time:.1f}s: {e}")
                    time.sleep(wait_time)
                except httpx.HTTPError as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise UpstreamError(f"Carrier service request failed: {e}") from e
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(f"Carrier service error, retrying in {wait_time:.1f}s: {e}")
                    time.sleep(wait_time)
        finally:
            client.close()

    def fetch_options(self, order_id: str, zone_code: Optional[str] = None) -> list[ShippingOption]:
        """Fetch compatible transport options for an order, optionally for a given zone."""
        params = {"zoneCode": zone_code} if zone_code else {}
        response = self._request(
            lambda client: client.get(f"/orders/{order_id}/transport-options", params=params)
        )
        try:
            payload = response.json()
        except ValueError as exc:
            raise UpstreamError("Carrier service returned a non-JSON options payload.") from exc

        if isinstance(payload, dict):
            payload = payload.get("compatible") or []
        if not isinstance(payload, list):
            raise UpstreamError("Carrier service returned an unexpected options payload.")

        options = [_parse_option(item) for item in payload]
        logger.info(f"Fetched {len(options)} transport options for order {order_id} (zone={zone_code or 'auto'})")
        return options

    def launch_delivery(
        self,
        order_id: str,
        option_id: str,
        tracking_number: Optional[str] = None,
        zone_code: Optional[str] = None,
    ) -> str:
        """Create a shipment for the order with the chosen option and return its id."""
        body = {"optionId": option_id, "trackingNumber": tracking_number, "zoneCode": zone_code}
        response = self._request(
            lambda client: client.post(f"/orders/{order_id}/shipments", json=body)
        )
        try:
            payload = response.json()
        except ValueError:
            payload = response.text.strip()

        shipment_id: Any = payload
        if isinstance(payload, dict):
            shipment_id = payload.get("shipmentId") or payload.get("id")
        if not shipment_id or not isinstance(shipment_id, (str, int)):
            raise UpstreamError("Carrier service did not return a shipment id.")
        logger.info(f"Shipment {shipment_id} created for order {order_id} with option {option_id}")
        return str(shipment_id)


def check_health(base_url: str | None = None) -> bool:
    """Check that the carrier service answers on its health endpoint."""
    base = base_url or settings.carrier_service_base_url
    if not base:
        return False
    try:
        response = httpx.get(f"{base.rstrip('/')}/health", timeout=5.0)
        response.raise_for_status()
        return True
    except httpx.HTTPError:
        return False

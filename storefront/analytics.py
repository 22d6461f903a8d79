# storefront/analytics.py
import uuid
from collections.abc import Callable
from enum import Enum

import httpx

from .config import GA4_API_SECRET, GA4_ENDPOINT, GA4_MEASUREMENT_ID
from .logging import get_logger

logger = get_logger(__name__)

AnalyticsSink = Callable[[str, dict], None]


class EventName(str, Enum):
    VIEW_ITEM_LIST = "view_item_list"
    SELECT_ITEM = "select_item"
    VIEW_ITEM = "view_item"
    ADD_TO_CART = "add_to_cart"
    VIEW_CART = "view_cart"
    BEGIN_CHECKOUT = "begin_checkout"
    VIEW_PROMOTION = "view_promotion"
    ADD_SHIPPING_INFO = "add_shipping_info"
    ADD_PAYMENT_INFO = "add_payment_info"
    PURCHASE = "purchase"


class EventPipeline:
    """
    Forwards commerce events to the analytics sink.

    ``fire_event`` never raises: with no sink the event is dropped with a
    warning, and a sink that fails is logged and ignored. Payloads are passed
    on untouched.
    """

    def __init__(self, sink: AnalyticsSink | None = None):
        self.sink = sink

    @property
    def has_sink(self) -> bool:
        return self.sink is not None

    def register_sink(self, sink: AnalyticsSink) -> None:
        self.sink = sink

    def remove_sink(self) -> None:
        self.sink = None

    def fire_event(self, name: EventName | str, payload: dict) -> None:
        event_name = name.value if isinstance(name, EventName) else str(name)

        if self.sink is None:
            logger.warning("No analytics sink installed, dropping %s event", event_name)
            return

        try:
            self.sink(event_name, payload)
        except Exception:
            logger.warning("Analytics sink failed on %s event", event_name, exc_info=True)


class MeasurementProtocolSink:
    """GA4 Measurement Protocol sink. Each event is one synchronous POST."""

    def __init__(
        self,
        measurement_id: str,
        api_secret: str,
        client_id: str | None = None,
        endpoint: str = GA4_ENDPOINT,
        timeout: float = 2.0,
        client: httpx.Client | None = None,
    ):
        self.measurement_id = measurement_id
        self.api_secret = api_secret
        self.client_id = client_id or uuid.uuid4().hex
        self.endpoint = endpoint
        self._client = client or httpx.Client(timeout=timeout)

    def __call__(self, event_name: str, payload: dict) -> None:
        response = self._client.post(
            self.endpoint,
            params={"measurement_id": self.measurement_id, "api_secret": self.api_secret},
            json={
                "client_id": self.client_id,
                "events": [{"name": event_name, "params": payload}],
            },
        )
        response.raise_for_status()

    def close(self) -> None:
        self._client.close()


def sink_from_config() -> AnalyticsSink | None:
    if GA4_MEASUREMENT_ID and GA4_API_SECRET:
        return MeasurementProtocolSink(GA4_MEASUREMENT_ID, GA4_API_SECRET)
    return None

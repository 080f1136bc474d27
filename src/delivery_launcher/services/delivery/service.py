"""Delivery launch orchestration: fetch, classify, preselect and submit."""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Optional, Sequence

from ...config import settings
from ...models.domain import (
    ClassificationResult,
    ClassifierConfig,
    Selection,
    SelectionSource,
    ShippingOption,
)
from ...schemas.delivery import (
    ClassifyRequest,
    ClassifyResponse,
    LaunchRequest,
    LaunchResponse,
    NoticeModel,
    SelectionModel,
    ShippingOptionModel,
    TransportOptionsRequest,
    TransportOptionsResponse,
)
from ..carriers.client import CarrierServiceClient, UpstreamError
from ..classification import InvalidOptionError, classify, distinct_carrier_count, validate_options
from ..outputs.formatter import (
    Notice,
    best_label,
    no_options_notice,
    option_detail_label,
    option_summary,
    options_updated_notice,
    shipment_created_notice,
)
from ..zones import normalize_zone_code, resolve_zone
from .session import DeliverySession, sessions

logger = logging.getLogger(__name__)


def classifier_config() -> ClassifierConfig:
    return ClassifierConfig(
        version=settings.classifier_version,
        lead_time_tolerance_days=settings.lead_time_tolerance_days,
        rebalance_min_distinct_carriers=settings.rebalance_min_distinct_carriers,
    )


def _option_model(option: ShippingOption) -> ShippingOptionModel:
    return ShippingOptionModel(
        **asdict(option),
        summary=option_summary(option),
        label=option_detail_label(option),
    )


def _optional_option_model(option: Optional[ShippingOption]) -> Optional[ShippingOptionModel]:
    return _option_model(option) if option is not None else None


def _notice_model(notice: Notice) -> NoticeModel:
    return NoticeModel(title=notice.title, message=notice.message, variant=notice.variant)


def _selection_model(selection: Optional[Selection]) -> Optional[SelectionModel]:
    if selection is None:
        return None
    return SelectionModel(source=selection.source.value, option_id=selection.option_id)


def _resolve_request_zone(payload: TransportOptionsRequest) -> Optional[str]:
    if payload.zone_code:
        return normalize_zone_code(payload.zone_code)
    if payload.shipping_country:
        zone = resolve_zone(payload.shipping_country)
        if zone is None:
            raise ValueError(
                f"No delivery zone matches shipping country '{payload.shipping_country}'. "
                f"Please choose a zone."
            )
        return zone
    # Let the carrier service derive the zone from the order
    return None


def _default_selection(result: ClassificationResult) -> Optional[Selection]:
    best = result.best_cheapest
    if best is None:
        return None
    return Selection(source=SelectionSource.CHEAPEST, option_id=best.option_id)


def compute_transport_options(
    order_id: str,
    payload: TransportOptionsRequest,
    *,
    session: DeliverySession | None = None,
    client: CarrierServiceClient | None = None,
) -> TransportOptionsResponse:
    """Fetch, classify and commit the transport options of an order.

    The session keeps its previous result and selection if the lookup fails,
    and ignores this result if a newer refresh was started meanwhile.
    """
    session = session or sessions.get(order_id)
    zone_code = _resolve_request_zone(payload)
    token = session.begin_refresh()

    client = client or CarrierServiceClient()
    options = client.fetch_options(order_id, zone_code)
    try:
        validate_options(options)
    except InvalidOptionError as exc:
        logger.warning(f"Carrier service returned invalid options for order {order_id}: {exc}")
        raise UpstreamError(f"Le service transporteur a renvoyé une option invalide : {exc}") from exc

    config = classifier_config()
    result = classify(options, config)
    selection = _default_selection(result)
    committed = session.commit(token, result, zone_code=zone_code, selection=selection)

    notice = no_options_notice() if result.is_empty else options_updated_notice()
    logger.info(
        f"Order {order_id}: {len(options)} options classified "
        f"({len(result.cheapest)} cheapest, {len(result.fastest)} fastest)"
    )
    return TransportOptionsResponse(
        order_id=order_id,
        zone_code=zone_code,
        compatible=[_option_model(option) for option in options],
        cheapest=[_option_model(option) for option in result.cheapest],
        fastest=[_option_model(option) for option in result.fastest],
        best_cheapest=_optional_option_model(result.best_cheapest),
        best_fastest=_optional_option_model(result.best_fastest),
        best_cheapest_label=best_label(result.best_cheapest),
        best_fastest_label=best_label(result.best_fastest),
        selection=_selection_model(selection),
        classifier_version=config.version,
        metadata={
            "distinct_carriers": distinct_carrier_count(options),
            "lead_time_tolerance_days": config.lead_time_tolerance_days,
            "rebalance_min_distinct_carriers": config.rebalance_min_distinct_carriers,
            "superseded": not committed,
        },
        notice=_notice_model(notice),
    )


def _resolve_selection(
    payload: LaunchRequest, session: DeliverySession
) -> tuple[Selection, ClassificationResult, Optional[str]]:
    result = session.result
    zone_code = session.zone_code
    if result is None:
        raise ValueError(f"Load transport options for order {session.order_id} before launching a delivery.")

    if payload.selection is not None:
        selection = Selection(
            source=SelectionSource(payload.selection.source),
            option_id=payload.selection.option_id,
        )
    elif session.selection is not None:
        selection = session.selection
    else:
        raise ValueError("Select a transport option before launching the delivery.")

    bucket = result.bucket(selection.source)
    if not any(option.option_id == selection.option_id for option in bucket):
        raise ValueError(
            f"Option '{selection.option_id}' is not among the {selection.source.value} options of order "
            f"{session.order_id}."
        )
    return selection, result, zone_code


def launch_delivery(
    order_id: str,
    payload: LaunchRequest,
    *,
    session: DeliverySession | None = None,
    client: CarrierServiceClient | None = None,
) -> LaunchResponse:
    """Submit the selected option to the carrier service and return the created shipment."""
    session = session or sessions.get(order_id)
    selection, checked_result, zone_code = _resolve_selection(payload, session)

    with session.submission():
        client = client or CarrierServiceClient()
        shipment_id = client.launch_delivery(
            order_id, selection.option_id, payload.tracking_number, zone_code=zone_code
        )
        # A refresh committed meanwhile owns the selection now
        session.select(selection, for_result=checked_result)

    return LaunchResponse(
        order_id=order_id,
        shipment_id=shipment_id,
        option_id=selection.option_id,
        tracking_number=payload.tracking_number,
        notice=_notice_model(shipment_created_notice(shipment_id)),
    )


def classify_options(payload: ClassifyRequest) -> ClassifyResponse:
    """Classify caller-supplied options without touching any session."""
    base = classifier_config()
    config = ClassifierConfig(
        version=base.version,
        lead_time_tolerance_days=payload.lead_time_tolerance_days
        if payload.lead_time_tolerance_days is not None
        else base.lead_time_tolerance_days,
        rebalance_min_distinct_carriers=payload.rebalance_min_distinct_carriers
        if payload.rebalance_min_distinct_carriers is not None
        else base.rebalance_min_distinct_carriers,
    )
    options: Sequence[ShippingOption] = [ShippingOption(**item.model_dump()) for item in payload.options]
    result = classify(options, config)
    return ClassifyResponse(
        cheapest=[_option_model(option) for option in result.cheapest],
        fastest=[_option_model(option) for option in result.fastest],
        best_cheapest=_optional_option_model(result.best_cheapest),
        best_fastest=_optional_option_model(result.best_fastest),
        classifier_version=config.version,
    )

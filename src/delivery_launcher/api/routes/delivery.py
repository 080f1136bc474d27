"""Transport option and delivery launch endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from ...config import settings
from ...schemas.delivery import (
    ClassifyRequest,
    ClassifyResponse,
    LaunchRequest,
    LaunchResponse,
    TransportOptionsRequest,
    TransportOptionsResponse,
)
from ...services.carriers.client import UpstreamError
from ...services.delivery.service import classify_options, compute_transport_options, launch_delivery
from ...services.delivery.session import SubmissionInProgressError


def require_launch_permission() -> None:
    """Hide the feature entirely when the permission flag is off."""
    if not settings.can_launch_delivery:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")


router = APIRouter(tags=["delivery"], dependencies=[Depends(require_launch_permission)])


@router.post(
    "/orders/{order_id}/transport-options",
    response_model=TransportOptionsResponse,
    status_code=status.HTTP_200_OK,
)
def transport_options(order_id: str, payload: TransportOptionsRequest | None = None) -> TransportOptionsResponse:
    try:
        return compute_transport_options(order_id, payload or TransportOptionsRequest())
    except UpstreamError as exc:
        logging.warning(f"Transport options lookup failed for order {order_id}: {exc.message}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=exc.message) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error computing transport options: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to compute transport options: {str(exc)}",
        ) from exc


@router.post("/orders/{order_id}/launch", response_model=LaunchResponse, status_code=status.HTTP_200_OK)
def launch(order_id: str, payload: LaunchRequest | None = None) -> LaunchResponse:
    try:
        return launch_delivery(order_id, payload or LaunchRequest())
    except SubmissionInProgressError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except UpstreamError as exc:
        logging.warning(f"Delivery launch failed for order {order_id}: {exc.message}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=exc.message) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error launching delivery: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to launch delivery: {str(exc)}",
        ) from exc


@router.post("/classify", response_model=ClassifyResponse, status_code=status.HTTP_200_OK)
def classify(payload: ClassifyRequest) -> ClassifyResponse:
    """Classify the given options into cheapest and fastest recommendations."""
    try:
        return classify_options(payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

"""Subscriptions API router — CRUD, filtered listing, and period totals."""

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from subs_service.api.deps import get_subscription_service
from subs_service.errors import NotFoundError, SubscriptionError, ValidationError
from subs_service.models.subscription import Subscription
from subs_service.schemas.subscription import (
    SubscriptionCreate,
    SubscriptionCreatedResponse,
    SubscriptionResponse,
    SubscriptionTotalResponse,
    SubscriptionUpdate,
)
from subs_service.services.subscription_service import SubscriptionService

router = APIRouter(prefix="/api/v1/subscriptions", tags=["subscriptions"])


def _to_http_error(exc: SubscriptionError) -> HTTPException:
    """Map a core error to the HTTP status the client should see."""
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Internal storage error",
    )


@router.post(
    "",
    response_model=SubscriptionCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a subscription",
)
async def create_subscription(
    body: SubscriptionCreate,
    service: SubscriptionService = Depends(get_subscription_service),
) -> SubscriptionCreatedResponse:
    """Create a subscription and return its id.

    Dates are ``MM-YYYY``; an empty or missing ``end_date`` means open-ended.
    """
    try:
        subscription_id = await service.create(
            body.service_name, body.price, body.user_id, body.start_date, body.end_date
        )
    except SubscriptionError as exc:
        raise _to_http_error(exc) from exc
    return SubscriptionCreatedResponse(id=subscription_id)


@router.get(
    "",
    response_model=list[SubscriptionResponse],
    summary="List subscriptions",
)
async def list_subscriptions(
    user_id: str | None = Query(None, description="Exact user UUID"),
    service_name: str | None = Query(None, description="Exact service name"),
    limit: int = Query(0, ge=0, description="Page size; 0 means the default of 100"),
    offset: int = Query(0, ge=0, description="Rows to skip"),
    service: SubscriptionService = Depends(get_subscription_service),
) -> list[Subscription]:
    """Return subscriptions ordered by id. Empty filter values are ignored."""
    try:
        return await service.list(
            user_id=user_id or None,
            service_name=service_name or None,
            limit=limit,
            offset=offset,
        )
    except SubscriptionError as exc:
        raise _to_http_error(exc) from exc


@router.get(
    "/sum",
    response_model=SubscriptionTotalResponse,
    summary="Total price of subscriptions active in a period",
)
async def sum_subscriptions(
    period_from: str = Query(..., alias="from", description="First month, MM-YYYY"),
    period_to: str = Query(..., alias="to", description="Last month, MM-YYYY"),
    user_id: str | None = Query(None, description="Exact user UUID"),
    service_name: str | None = Query(None, description="Exact service name"),
    service: SubscriptionService = Depends(get_subscription_service),
) -> SubscriptionTotalResponse:
    """Sum whole prices of subscriptions overlapping ``[from, to]``."""
    if not period_from or not period_to:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="from and to are required",
        )
    try:
        total = await service.sum_by_period(
            period_from,
            period_to,
            user_id=user_id or None,
            service_name=service_name or None,
        )
    except SubscriptionError as exc:
        raise _to_http_error(exc) from exc
    return SubscriptionTotalResponse(total=total)


@router.get(
    "/{subscription_id}",
    response_model=SubscriptionResponse,
    summary="Get a subscription by ID",
)
async def get_subscription(
    subscription_id: int,
    service: SubscriptionService = Depends(get_subscription_service),
) -> Subscription:
    try:
        return await service.read_by_id(subscription_id)
    except SubscriptionError as exc:
        raise _to_http_error(exc) from exc


@router.put(
    "/{subscription_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Replace a subscription",
)
async def update_subscription(
    subscription_id: int,
    body: SubscriptionUpdate,
    service: SubscriptionService = Depends(get_subscription_service),
) -> Response:
    """Overwrite every field of the subscription with the request body."""
    try:
        await service.update(
            subscription_id,
            body.service_name,
            body.price,
            body.user_id,
            body.start_date,
            body.end_date,
        )
    except SubscriptionError as exc:
        raise _to_http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{subscription_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a subscription",
)
async def delete_subscription(
    subscription_id: int,
    service: SubscriptionService = Depends(get_subscription_service),
) -> Response:
    try:
        await service.delete(subscription_id)
    except SubscriptionError as exc:
        raise _to_http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)

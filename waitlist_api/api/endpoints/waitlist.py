"""Waitlist API endpoints.

Public endpoints for collecting and confirming landing page signups.
No authentication required.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status

from waitlist_api.core.config import settings
from waitlist_api.core.deps import get_waitlist_service
from waitlist_api.core.exceptions import (
    AlreadyConfirmedError,
    ConflictError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from waitlist_api.schemas.waitlist import (
    ConfirmResponse,
    ResendConfirmationRequest,
    ResendConfirmationResponse,
    WaitlistCountResponse,
    WaitlistJoin,
    WaitlistJoinResponse,
)
from waitlist_api.services.waitlist_service import WaitlistService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/waitlist", tags=["waitlist"])

INTERNAL_ERROR_MESSAGE = "Internal server error"
MISSING_TOKEN_MESSAGE = "Confirmation token is required"


def _storage_failure(operation: str, exc: DatabaseError) -> HTTPException:
    logger.error(f"Waitlist {operation} failed: {exc.message} ({exc.details})")
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=INTERNAL_ERROR_MESSAGE)


@router.post("", response_model=WaitlistJoinResponse, status_code=status.HTTP_201_CREATED)
def join_waitlist(payload: WaitlistJoin, service: WaitlistService = Depends(get_waitlist_service)):
    try:
        entry = service.join(payload)
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message)
    except DatabaseError as e:
        raise _storage_failure("join", e)
    return WaitlistJoinResponse(message="Successfully added to waitlist", email=entry.email)


@router.get("/count", response_model=WaitlistCountResponse)
def get_waitlist_count(service: WaitlistService = Depends(get_waitlist_service)):
    try:
        return WaitlistCountResponse(count=service.count())
    except DatabaseError as e:
        raise _storage_failure("count", e)


@router.post("/confirm", include_in_schema=False)
@router.post("/confirm/", include_in_schema=False)
def confirm_without_token():
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=MISSING_TOKEN_MESSAGE)


@router.post("/confirm/{token}", response_model=ConfirmResponse)
def confirm_email(token: str, service: WaitlistService = Depends(get_waitlist_service)):
    try:
        service.confirm(token)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except DatabaseError as e:
        raise _storage_failure("confirm", e)
    return ConfirmResponse(message="Email confirmed successfully", confirmed=True)


@router.post(
    "/resend-confirmation",
    response_model=ResendConfirmationResponse,
    response_model_exclude_none=True,
)
def resend_confirmation(
    payload: ResendConfirmationRequest,
    service: WaitlistService = Depends(get_waitlist_service),
):
    """Replace the confirmation token of an unconfirmed entry.

    The new token is echoed back only in development; elsewhere it is
    handed to the (stubbed) confirmation delivery.
    """
    try:
        token = service.resend(payload)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except AlreadyConfirmedError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except DatabaseError as e:
        raise _storage_failure("resend", e)

    response = ResendConfirmationResponse(message="Confirmation email resent")
    if settings.is_development:
        response.token = token
    return response

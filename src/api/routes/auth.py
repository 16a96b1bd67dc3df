"""Authentication routes (provider callback, current user)."""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Response, status

from api.dependencies import get_user_repo
from api.models import CallbackResponse, UserResponse
from api.security import create_access_token, get_current_user_required, to_response
from domain.model.errors import InvalidPayloadError, PersistenceError
from port.user_repository import UserRepository
from services import callback_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/{provider}/callback", response_model=CallbackResponse)
async def callback(
    provider: str,
    response: Response,
    payload: Any = Body(..., examples=[{"uid": "1", "info": {"name": "Roberto", "email": "Roberto@test.com"}}]),
    repo: UserRepository = Depends(get_user_repo),
):
    """Sign in with the identity provider's callback data.

    Creates or refreshes the user for the callback's uid and returns a
    session token for it. The body is the provider's auth hash as sent;
    its shape is checked by CallbackPayload so every malformed payload is a 400.

    Raises:
        HTTPException: 400 if the payload has no usable uid, 500 if the user could not be stored
    """
    try:
        result = callback_service.process_callback(
            repo, payload, provider=provider
        )
    except InvalidPayloadError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except PersistenceError:
        logger.exception("Failed to store user from callback", extra={"provider": provider})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to store user",
        )

    token = create_access_token(result.user.id)
    if result.created:
        response.status_code = status.HTTP_201_CREATED

    logger.info(
        "User signed in",
        extra={"userId": result.user.id, "provider": provider, "userCreated": result.created},
    )
    return CallbackResponse(token=token, user=to_response(result.user), created=result.created)


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: UserResponse = Depends(get_current_user_required)):
    """Get current authenticated user info."""
    return current_user

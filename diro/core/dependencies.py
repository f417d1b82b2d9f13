"""FastAPI dependencies for injection into route handlers."""

from fastapi import Depends, Header, HTTPException, Request, status

from diro.core.config import Settings
from diro.services.pricing import PricingPolicy
from diro.services.xendit import XenditClient


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_payment_client(request: Request) -> XenditClient:
    return request.app.state.payment_client


def get_pricing(request: Request) -> PricingPolicy:
    return request.app.state.pricing


async def verify_callback_token(
    x_callback_token: str | None = Header(default=None),
    settings: Settings = Depends(get_settings),
) -> None:
    """Check the Xendit callback token when one is configured.

    With no token configured every callback is accepted.
    """
    if not settings.xendit_callback_token:
        return
    if x_callback_token != settings.xendit_callback_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid callback token")

# binpick/api/deps.py
from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from binpick.adapters.admin_graphql import AdminGraphQLClient
from binpick.adapters.base import AdminApi
from binpick.core.config import AppSettings, get_settings
from binpick.core.errors import ValidationError
from binpick.db.session import get_session as _get_session


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI-friendly wrapper over binpick.db.session."""
    async for session in _get_session():
        yield session


def get_shop_domain(
    x_shopify_shop_domain: Optional[str] = Header(default=None),
    x_shop_domain: Optional[str] = Header(default=None),
    settings: AppSettings = Depends(get_settings),
) -> str:
    """
    Tenant = shop domain.
    Webhooks carry X-Shopify-Shop-Domain; the embedded app sends X-Shop-Domain.
    """
    shop = (x_shopify_shop_domain or x_shop_domain or settings.SHOP_DOMAIN or "").strip().lower()
    if not shop:
        raise ValidationError("shop domain is required", reason="missing_shop")
    return shop


def get_admin_api(
    shop: str = Depends(get_shop_domain),
    settings: AppSettings = Depends(get_settings),
) -> AdminApi:
    return AdminGraphQLClient(
        shop_domain=shop,
        access_token=settings.ADMIN_ACCESS_TOKEN,
        api_version=settings.ADMIN_API_VERSION,
        timeout=settings.ADMIN_API_TIMEOUT,
    )


def get_webhook_admin_api(
    x_shopify_shop_domain: Optional[str] = Header(default=None),
    x_shop_domain: Optional[str] = Header(default=None),
    settings: AppSettings = Depends(get_settings),
) -> Optional[AdminApi]:
    """Like get_admin_api, but None instead of an error: webhooks must always be acknowledged."""
    try:
        shop = get_shop_domain(x_shopify_shop_domain, x_shop_domain, settings)
    except ValidationError:
        return None
    return get_admin_api(shop, settings)

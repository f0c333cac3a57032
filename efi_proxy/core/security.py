# efi_proxy/core/security.py
from __future__ import annotations

import hmac

from fastapi import Depends, Header, Request

from efi_proxy.core.config import Settings
from efi_proxy.core.errors import AuthorizationError


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def require_proxy_secret(
    x_proxy_secret: str | None = Header(default=None, alias="x-proxy-secret"),
    settings: Settings = Depends(get_settings),
) -> None:
    """Bloqueia a requisição se o header não bater com PROXY_SECRET (vazio = tudo bloqueado)."""
    expected = settings.PROXY_SECRET
    if not expected or not x_proxy_secret:
        raise AuthorizationError()
    if not hmac.compare_digest(x_proxy_secret.encode(), expected.encode()):
        raise AuthorizationError()

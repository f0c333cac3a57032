# efi_proxy/gateway/oauth.py
from __future__ import annotations

import base64
import logging

from efi_proxy.core.errors import UpstreamAuthError
from efi_proxy.gateway.client import EfiClient

logger = logging.getLogger(__name__)

TOKEN_PATH = "/oauth/token"


def basic_credentials(client_id: str, client_secret: str) -> str:
    raw = f"{client_id}:{client_secret}".encode()
    return base64.b64encode(raw).decode()


async def fetch_access_token(client: EfiClient) -> str:
    """Troca client_id/secret por um bearer token. Sem cache: toda operação pede um novo."""
    settings = client.settings
    response = await client.request(
        "POST",
        TOKEN_PATH,
        headers={
            "Authorization": f"Basic {basic_credentials(settings.EFI_CLIENT_ID, settings.EFI_CLIENT_SECRET)}",
            "Content-Type": "application/json",
        },
        json={"grant_type": "client_credentials"},
    )
    if response.status_code != 200:
        logger.error("EFI AUTH ERROR: %s", response.data)
        raise UpstreamAuthError("EFI auth failed", details=response.data)
    if not isinstance(response.data, dict) or not response.data.get("access_token"):
        logger.error("EFI AUTH ERROR: resposta sem access_token: %s", response.data)
        raise UpstreamAuthError("EFI auth failed", details=response.data)
    return response.data["access_token"]

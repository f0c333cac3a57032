# efi_proxy/gateway/client.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from efi_proxy.core.config import Settings
from efi_proxy.core.errors import TransportError
from efi_proxy.gateway.transport import TransportFactory

logger = logging.getLogger(__name__)

OK_STATUSES = (200, 201)


@dataclass(frozen=True)
class UpstreamResponse:
    status_code: int
    data: Any  # JSON decodificado ou texto cru

    @property
    def ok(self) -> bool:
        return self.status_code in OK_STATUSES


def _decode_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


class EfiClient:
    """Uma requisição = um ciclo request/response completo contra a API Pix da Efí."""

    def __init__(self, settings: Settings, transports: TransportFactory):
        self.settings = settings
        self.transports = transports

    async def request(
        self,
        method: str,
        path: str,
        *,
        headers: Optional[dict[str, str]] = None,
        json: Any = None,
    ) -> UpstreamResponse:
        logger.debug("EFI %s %s", method, path)
        try:
            async with self.transports.client() as client:
                response = await client.request(method, path, headers=headers, json=json)
        except httpx.TransportError as exc:
            raise TransportError(str(exc) or exc.__class__.__name__) from exc
        return UpstreamResponse(status_code=response.status_code, data=_decode_body(response))

    async def authorized(
        self,
        method: str,
        path: str,
        token: str,
        *,
        headers: Optional[dict[str, str]] = None,
        json: Any = None,
    ) -> UpstreamResponse:
        merged = {"Authorization": f"Bearer {token}"}
        if headers:
            merged.update(headers)
        return await self.request(method, path, headers=merged, json=json)

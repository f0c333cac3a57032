# efi_proxy/services/pix_service.py
from __future__ import annotations

import logging
import secrets
import time
from typing import Any, Awaitable, Callable, Optional
from urllib.parse import quote

from efi_proxy.core.config import Settings
from efi_proxy.core.errors import ErrorKind, ProxyError, UpstreamOperationError, ValidationError
from efi_proxy.core.result import Failure, Result, Success
from efi_proxy.gateway.client import EfiClient, UpstreamResponse
from efi_proxy.gateway.oauth import fetch_access_token
from efi_proxy.schemas.pix import ChargeIn, PayoutIn, WebhookIn, format_amount

logger = logging.getLogger(__name__)

CHARGE_EXPIRATION_SECONDS = 3600
PAYOUT_SUFFIX_DIGITS = 6

# encodeURIComponent deixa esses caracteres sem escape
_URI_COMPONENT_SAFE = "-_.!~*'()"


def make_payout_id(prefix: str, now_ms: Optional[int] = None) -> str:
    """
    idEnvio = prefixo + epoch em ms + sufixo numérico aleatório.
    O sufixo evita colisão de dois saques no mesmo milissegundo.
    """
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    suffix = str(secrets.randbelow(10**PAYOUT_SUFFIX_DIGITS)).zfill(PAYOUT_SUFFIX_DIGITS)
    return f"{prefix}{now_ms}{suffix}"


def _missing(**fields: Any) -> list[str]:
    return [name for name, value in fields.items() if value is None or value == ""]


def _upstream_failure(message: str, response: UpstreamResponse) -> Failure:
    exc = UpstreamOperationError(message, details=response.data, status_code=response.status_code)
    return Failure.from_error(exc)


class PixService:
    """Operações expostas pelo proxy. Cada método devolve um Result, nunca levanta."""

    def __init__(self, settings: Settings, client: EfiClient):
        self.settings = settings
        self.client = client

    async def _guarded(self, operation: str, call: Callable[[], Awaitable[Result]]) -> Result:
        try:
            return await call()
        except ProxyError as exc:
            logger.exception("%s falhou: %s", operation, exc.message)
            return Failure.from_error(exc)
        except Exception as exc:
            logger.exception("%s falhou", operation)
            return Failure(kind=ErrorKind.INTERNAL, message=str(exc), status_code=500)

    # ------------------------------------------------------------------ charge
    async def create_charge(self, data: ChargeIn) -> Result:
        missing = _missing(amount=data.amount, txid=data.txid)
        if missing:
            return Failure.from_error(ValidationError(missing))
        return await self._guarded("create_charge", lambda: self._create_charge(data))

    async def _create_charge(self, data: ChargeIn) -> Result:
        token = await fetch_access_token(self.client)

        charge_response = await self.client.authorized(
            "PUT",
            f"/v2/cob/{quote(data.txid, safe='')}",
            token,
            headers={"Content-Type": "application/json"},
            json={
                "calendario": {"expiracao": CHARGE_EXPIRATION_SECONDS},
                "valor": {"original": format_amount(data.amount)},
                "chave": self.settings.EFI_PIX_KEY,
                "infoAdicionais": [
                    {"nome": "Plataforma", "valor": self.settings.PLATFORM_TAG},
                    {"nome": "User", "valor": data.user_id or "unknown"},
                ],
            },
        )
        if not charge_response.ok:
            logger.error("CHARGE ERROR: %s", charge_response.data)
            return _upstream_failure("Charge failed", charge_response)

        charge = charge_response.data
        qr_code = ""
        qr_code_image = ""

        loc_id = None
        if isinstance(charge, dict) and isinstance(charge.get("loc"), dict):
            loc_id = charge["loc"].get("id")

        if loc_id:
            qr_response = await self.client.authorized("GET", f"/v2/loc/{loc_id}/qrcode", token)
            # QR é opcional: falha aqui não derruba a cobrança
            if qr_response.status_code == 200 and isinstance(qr_response.data, dict):
                qr_code = qr_response.data.get("qrcode") or ""
                qr_code_image = qr_response.data.get("imagemQrcode") or ""
            else:
                logger.warning("QR code indisponível para loc %s (status %s)", loc_id, qr_response.status_code)

        copy_paste = charge.get("pixCopiaECola") if isinstance(charge, dict) else None
        return Success(
            {
                "charge": charge,
                "qr_code": qr_code,
                "qr_code_image": qr_code_image,
                "pix_copy_paste": copy_paste or qr_code,
            }
        )

    # ------------------------------------------------------------------ payout
    async def send_pix(self, data: PayoutIn, now_ms: Optional[int] = None) -> Result:
        missing = _missing(pix_key=data.pix_key, amount=data.amount)
        if missing:
            return Failure.from_error(ValidationError(missing))
        return await self._guarded("send_pix", lambda: self._send_pix(data, now_ms))

    async def _send_pix(self, data: PayoutIn, now_ms: Optional[int]) -> Result:
        token = await fetch_access_token(self.client)
        id_envio = make_payout_id(self.settings.PAYOUT_ID_PREFIX, now_ms)

        payout_response = await self.client.authorized(
            "PUT",
            f"/v2/gn/pix/{id_envio}",
            token,
            headers={"Content-Type": "application/json"},
            json={
                "valor": format_amount(data.amount),
                "favorecido": {"chave": data.pix_key},
            },
        )
        if not payout_response.ok:
            logger.error("PAYOUT ERROR: %s", payout_response.data)
            return _upstream_failure("Payout failed", payout_response)

        body = payout_response.data
        e2eid = body.get("e2eId") if isinstance(body, dict) else None
        logger.info("Pix enviado idEnvio=%s e2eid=%s", id_envio, e2eid)
        return Success({"success": True, "idEnvio": id_envio, "e2eid": e2eid or None, "data": body})

    # ----------------------------------------------------------------- webhook
    async def register_webhook(self, data: WebhookIn) -> Result:
        missing = _missing(webhook_url=data.webhook_url)
        if missing:
            return Failure.from_error(ValidationError(missing))
        return await self._guarded("register_webhook", lambda: self._register_webhook(data))

    async def _register_webhook(self, data: WebhookIn) -> Result:
        token = await fetch_access_token(self.client)
        key = quote(self.settings.EFI_PIX_KEY, safe=_URI_COMPONENT_SAFE)

        response = await self.client.authorized(
            "PUT",
            f"/v2/webhook/{key}",
            token,
            headers={
                "Content-Type": "application/json",
                "x-skip-mtls-checking": "true",
            },
            json={"webhookUrl": data.webhook_url},
        )
        if not response.ok:
            logger.error("WEBHOOK ERROR: %s", response.data)
            return _upstream_failure("Webhook failed", response)
        return Success({"success": True, "data": response.data})

    # ----------------------------------------------------------------- balance
    async def get_balance(self) -> Result:
        return await self._guarded("get_balance", self._get_balance)

    async def _get_balance(self) -> Result:
        token = await fetch_access_token(self.client)
        response = await self.client.authorized("GET", "/v2/gn/saldo", token)
        # repassa o corpo como veio, mesmo com status de erro da Efí
        return Success(response.data)

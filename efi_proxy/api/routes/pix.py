# efi_proxy/api/routes/pix.py
from typing import Optional

from fastapi import APIRouter, Depends, Request

from efi_proxy.core.result import render
from efi_proxy.core.security import require_proxy_secret
from efi_proxy.gateway.client import EfiClient
from efi_proxy.schemas.pix import ChargeIn, PayoutIn, WebhookIn
from efi_proxy.services.pix_service import PixService

router = APIRouter(dependencies=[Depends(require_proxy_secret)])


def get_pix_service(request: Request) -> PixService:
    state = request.app.state
    return PixService(state.settings, EfiClient(state.settings, state.transports))


# corpo ausente conta como "campos faltando" (400), não como erro de schema


@router.post("/create-charge")
async def create_charge(
    body: Optional[ChargeIn] = None, service: PixService = Depends(get_pix_service)
):
    """Cria cobrança imediata (depósito) e já devolve QR code + copia-e-cola."""
    return render(await service.create_charge(body or ChargeIn()))


@router.post("/send-pix")
async def send_pix(body: Optional[PayoutIn] = None, service: PixService = Depends(get_pix_service)):
    """Saque: envia Pix para a chave informada."""
    return render(await service.send_pix(body or PayoutIn()))


@router.post("/register-webhook")
async def register_webhook(
    body: Optional[WebhookIn] = None, service: PixService = Depends(get_pix_service)
):
    return render(await service.register_webhook(body or WebhookIn()))


@router.get("/balance")
async def balance(service: PixService = Depends(get_pix_service)):
    return render(await service.get_balance())

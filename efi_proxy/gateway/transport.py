# efi_proxy/gateway/transport.py
from __future__ import annotations

import asyncio
import base64
import binascii
import logging
import os
import ssl
import tempfile
from typing import Optional

import httpx
from cryptography.hazmat.primitives.serialization import (
    Encoding,
    NoEncryption,
    PrivateFormat,
    pkcs12,
)

from efi_proxy.core.config import Settings
from efi_proxy.core.errors import CertificateError

logger = logging.getLogger(__name__)


def _load_pkcs12(raw: bytes):
    # certificados da Efí vêm com senha vazia; alguns geradores gravam sem senha
    try:
        return pkcs12.load_key_and_certificates(raw, None)
    except ValueError:
        return pkcs12.load_key_and_certificates(raw, b"")


def build_ssl_context(certificate_base64: str) -> ssl.SSLContext:
    """
    Monta o SSLContext do mTLS a partir do .p12 em base64.
    Valida o servidor contra o trust store padrão e apresenta o certificado do cliente.
    """
    if not certificate_base64:
        raise CertificateError("EFI certificate not configured")
    try:
        raw = base64.b64decode(certificate_base64, validate=False)
        key, cert, chain = _load_pkcs12(raw)
    except (binascii.Error, ValueError) as exc:
        raise CertificateError(f"Invalid EFI certificate: {exc}") from exc
    if key is None or cert is None:
        raise CertificateError("EFI certificate has no private key or certificate")

    pem = key.private_bytes(Encoding.PEM, PrivateFormat.PKCS8, NoEncryption())
    pem += cert.public_bytes(Encoding.PEM)
    for extra in chain or []:
        pem += extra.public_bytes(Encoding.PEM)

    ctx = ssl.create_default_context()
    # load_cert_chain só aceita caminho de arquivo
    fd, path = tempfile.mkstemp(suffix=".pem")
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(pem)
        ctx.load_cert_chain(certfile=path)
    finally:
        os.remove(path)
    return ctx


class TransportFactory:
    """Entrega httpx.AsyncClient já configurado com o mTLS da Efí."""

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self._transport = transport
        self._ssl_context: Optional[ssl.SSLContext] = None

    def ssl_context(self) -> ssl.SSLContext:
        if self._ssl_context is None:
            self._ssl_context = build_ssl_context(self.settings.EFI_CERTIFICATE_BASE64)
        return self._ssl_context

    async def preload(self) -> None:
        """Monta o SSLContext fora do event loop, no startup, para a 1a requisição não travar."""
        if self._transport is not None or not self.settings.EFI_CERTIFICATE_BASE64:
            return
        try:
            await asyncio.to_thread(self.ssl_context)
        except CertificateError as exc:
            # a requisição vai receber o mesmo erro como 500
            logger.error("Certificado EFI inválido: %s", exc.message)

    def client(self) -> httpx.AsyncClient:
        timeout = httpx.Timeout(self.settings.EFI_TIMEOUT_SECONDS)
        if self._transport is not None:
            # transporte injetado (testes) já resolve a conexão
            return httpx.AsyncClient(
                base_url=self.settings.base_url, transport=self._transport, timeout=timeout
            )
        return httpx.AsyncClient(
            base_url=self.settings.base_url, verify=self.ssl_context(), timeout=timeout
        )

# efi_proxy/core/config.py
from __future__ import annotations

import os
from typing import Optional

from pydantic import BaseModel, ConfigDict


def _optional_float(raw: Optional[str]) -> Optional[float]:
    raw = (raw or "").strip()
    return float(raw) if raw else None


class Settings(BaseModel):
    """Credenciais e parâmetros do proxy. Montado uma vez no startup; imutável."""

    model_config = ConfigDict(frozen=True)

    PORT: int = 3000
    PROXY_SECRET: str = ""
    EFI_CLIENT_ID: str = ""
    EFI_CLIENT_SECRET: str = ""
    EFI_CERTIFICATE_BASE64: str = ""
    EFI_PIX_KEY: str = ""

    EFI_API_HOST: str = "pix.api.efipay.com.br"
    EFI_TIMEOUT_SECONDS: Optional[float] = None  # None = sem timeout (comportamento original)
    SERVICE_NAME: str = "efi-mtls-proxy"
    PLATFORM_TAG: str = "X1Stars"
    PAYOUT_ID_PREFIX: str = "x1payout"
    LOG_LEVEL: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            PORT=int(os.getenv("PORT", "3000")),
            PROXY_SECRET=os.getenv("PROXY_SECRET", ""),
            EFI_CLIENT_ID=os.getenv("EFI_CLIENT_ID", ""),
            EFI_CLIENT_SECRET=os.getenv("EFI_CLIENT_SECRET", ""),
            EFI_CERTIFICATE_BASE64=os.getenv("EFI_CERTIFICATE_BASE64", ""),
            EFI_PIX_KEY=os.getenv("EFI_PIX_KEY", ""),
            EFI_API_HOST=os.getenv("EFI_API_HOST", "pix.api.efipay.com.br"),
            EFI_TIMEOUT_SECONDS=_optional_float(os.getenv("EFI_TIMEOUT_SECONDS")),
            SERVICE_NAME=os.getenv("SERVICE_NAME", "efi-mtls-proxy"),
            PLATFORM_TAG=os.getenv("PLATFORM_TAG", "X1Stars"),
            PAYOUT_ID_PREFIX=os.getenv("PAYOUT_ID_PREFIX", "x1payout"),
            LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO"),
        )

    @property
    def base_url(self) -> str:
        return f"https://{self.EFI_API_HOST}"

from fastapi import APIRouter, Depends

from efi_proxy.core.config import Settings
from efi_proxy.core.security import get_settings

router = APIRouter()


@router.get("/")
def health(settings: Settings = Depends(get_settings)):
    return {"status": "ok", "service": settings.SERVICE_NAME}

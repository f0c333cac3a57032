# main.py
import logging

import uvicorn
from dotenv import load_dotenv

load_dotenv()

from efi_proxy.core.config import Settings  # noqa: E402
from efi_proxy.core.logging_config import configure_logging  # noqa: E402

logger = logging.getLogger("efi_proxy")


def run() -> None:
    settings = Settings.from_env()
    configure_logging(settings.LOG_LEVEL)
    logger.info("EFI mTLS Proxy running on port %s", settings.PORT)
    uvicorn.run("efi_proxy.main:app", host="0.0.0.0", port=settings.PORT, log_level="warning")


if __name__ == "__main__":
    run()

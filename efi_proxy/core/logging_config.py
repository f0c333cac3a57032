import logging


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=getattr(logging, level.upper(), logging.INFO),
    )
    # httpx loga cada requisição em INFO; só interessa warning pra cima
    logging.getLogger("httpx").setLevel(logging.WARNING)

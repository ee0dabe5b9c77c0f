import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Filter out noisy loggers
NOISY_LOGGERS = ("aiohttp.access", "uvicorn.access")


def setup_logging(debug: bool = False, level: Optional[str] = None) -> None:
    """Configure root logging once at startup; debug overrides level."""
    resolved = "DEBUG" if debug else (level or "INFO").upper()
    logging.basicConfig(level=resolved, format=LOG_FORMAT, force=True)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    if debug:
        logging.getLogger(__name__).warning(
            "!!! WARNING !!! The developer debug logging is turned on !!!"
        )

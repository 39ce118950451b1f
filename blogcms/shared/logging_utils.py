import logging
import os
from typing import Any, Dict, Optional


_LOGGER = logging.getLogger("blogcms")


def configure_logging(level: Optional[str] = None, console: bool = False) -> None:
    lvl = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    _LOGGER.setLevel(getattr(logging, lvl, logging.INFO))
    sdk_lvl = (os.getenv("AZURE_SDK_LOG_LEVEL") or "WARNING").upper()
    logging.getLogger("azure").setLevel(getattr(logging, sdk_lvl, logging.WARNING))
    if console and not logging.getLogger().handlers:
        logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s %(message)s")


def log(level: int, run_trace_id: Optional[str], message: str, **dimensions: Any) -> None:
    dims: Dict[str, Any] = {"runTraceId": run_trace_id} if run_trace_id else {}
    dims.update(dimensions)
    # custom_dimensions is picked up by Application Insights; the suffix keeps console output useful
    suffix = f" | {dims}" if dims else ""
    _LOGGER.log(level, f"{message}{suffix}", extra={"custom_dimensions": dims})


def info(run_trace_id: Optional[str], message: str, **dimensions: Any) -> None:
    log(logging.INFO, run_trace_id, message, **dimensions)


def warning(run_trace_id: Optional[str], message: str, **dimensions: Any) -> None:
    log(logging.WARNING, run_trace_id, message, **dimensions)


def error(run_trace_id: Optional[str], message: str, **dimensions: Any) -> None:
    log(logging.ERROR, run_trace_id, message, **dimensions)

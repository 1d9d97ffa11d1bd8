from __future__ import annotations

import logging
import sys


def configure_logging(service_name: str, *, level: int = logging.INFO) -> logging.Logger:
    logging.basicConfig(
        level=level,
        format=f"%(asctime)s | {service_name} | %(levelname)s | %(message)s",
        stream=sys.stdout,
        force=True,
    )
    # The OpenAI SDK logs every HTTP request at INFO through httpx.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    return logging.getLogger(service_name)

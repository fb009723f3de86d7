"""
setup_logging.py

Root logger configuration for the service.
Called once from main.py when the app is created.
"""

import logging
import sys

# Client libraries that log every HTTP round trip at INFO
NOISY_LOGGERS = ("httpx", "openai", "google.auth", "urllib3")


def setup_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    if root.handlers:  # uvicorn --reload imports the app twice
        return

    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s :: %(message)s")
    )
    root.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

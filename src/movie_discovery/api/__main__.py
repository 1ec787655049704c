"""Run the proxy with uvicorn: ``python -m movie_discovery.api``."""

import os

import uvicorn

from ..config import ProxyConfig
from ..utils.logging_config import setup_logging


def main():
    config = ProxyConfig.from_env()
    setup_logging(level=config.log_level, json_output=config.json_logs)

    uvicorn.run(
        "movie_discovery.api.main:app",
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", "8000")),
        log_config=None
    )


if __name__ == "__main__":
    main()

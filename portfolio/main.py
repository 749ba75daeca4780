"""Entry point for serving the site backend."""

import logging
import sys
from pathlib import Path

import uvicorn
from pydantic import ValidationError

from .api import create_app
from .config import Config, load_config

LOG_DIR = Path(__file__).parent.parent / "logs"


def setup_logging(config: Config) -> Path:
    """Send site and uvicorn logs to stdout and to site.log in the log directory."""
    log_dir = config.log_dir or LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "site.log"

    level = getattr(logging, config.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler(sys.stdout),
        ],
    )
    # uvicorn runs with log_config=None, so its loggers propagate to root
    logging.getLogger("uvicorn.access").setLevel(max(level, logging.INFO))
    return log_file


def main() -> int:
    """Load configuration and serve the API until interrupted."""
    try:
        config = load_config()
    except (FileNotFoundError, ValidationError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    log_file = setup_logging(config)
    logger = logging.getLogger(__name__)
    logger.debug(f"Logging to {log_file}")

    try:
        app = create_app(config)
        logger.info(f"Serving on {config.host}:{config.port} ({config.email_backend} email backend)")
        uvicorn.run(app, host=config.host, port=config.port, log_config=None)
    except Exception as e:
        logger.exception(f"Server failed: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())

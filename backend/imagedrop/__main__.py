"""Run the Imagedrop server: ``python -m imagedrop``."""
import uvicorn

from imagedrop.config import get_config
from imagedrop.main import configure_logging, create_app


def main() -> None:
    config = get_config()
    configure_logging(config.server.log_level)
    uvicorn.run(
        create_app(config),
        host=config.server.host,
        port=config.server.port,
        log_level=config.server.log_level.lower(),
    )


if __name__ == "__main__":
    main()

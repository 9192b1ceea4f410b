"""Run the fleet operations API with uvicorn."""

import uvicorn

from fleetops.api.app import app
from fleetops.utils.config import load_config
from fleetops.utils.logger import setup_logging


def main() -> None:
    config = load_config()
    setup_logging(config.log_level)
    uvicorn.run(app, host=config.server.host, port=config.server.port)


if __name__ == "__main__":
    main()

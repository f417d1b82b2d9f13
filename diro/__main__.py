"""Run the API server: ``python -m diro``."""

import argparse
import logging

import uvicorn

from diro.core.config import Settings
from diro.main import create_app


def main() -> None:
    parser = argparse.ArgumentParser(description="Serve the Diro reservation API")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8080)
    args = parser.parse_args()

    settings = Settings()
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    uvicorn.run(create_app(settings), host=args.host, port=args.port)


if __name__ == "__main__":
    main()

"""Command-line entrypoint: validate settings, then serve the vitals app."""

import sys

import uvicorn

from api.app import create_app
from configs.settings import load_settings


def main(argv=None) -> int:
    try:
        settings = load_settings(argv)
    except ValueError as e:
        print(f"vitals-glimpse: {e}", file=sys.stderr)
        return 2

    app = create_app(settings)
    uvicorn.run(
        app,
        host=settings.server.bind,
        port=settings.server.port,
        timeout_keep_alive=30,
        log_level=settings.server.log_level.name.lower(),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())

import argparse

import uvicorn

from .core.config import get_settings


def main():
    settings = get_settings()

    parser = argparse.ArgumentParser(add_help=True)
    parser.add_argument("--host", default=settings.HOST)
    parser.add_argument("--port", default=settings.PORT, type=int)
    args = parser.parse_args()

    uvicorn.run(
        "tos_relay.main:app",
        host=args.host,
        port=args.port,
        log_level=settings.LOG_LEVEL.lower(),
        reload=False,
    )


if __name__ == "__main__":
    main()

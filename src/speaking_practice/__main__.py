"""Run the analyzer service: ``python -m speaking_practice``."""

from dotenv import load_dotenv


def main() -> None:
    # .env must be loaded before settings are read at import time
    load_dotenv()

    import uvicorn

    from .logging_utils import setup_logging
    from .settings import settings

    setup_logging(settings.logging)
    uvicorn.run(
        "speaking_practice.app:app",
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()

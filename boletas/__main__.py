import uvicorn

from boletas.logging import configure_logging
from boletas.settings import settings


def main() -> None:
    configure_logging()
    uvicorn.run("web.app:app", host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()

import uvicorn

from taskhub.core.config import get_settings
from taskhub.core.logging import setup_logging
from taskhub.main import create_app


def main() -> None:
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.PORT, log_config=None)


if __name__ == "__main__":
    main()

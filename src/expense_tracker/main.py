import uvicorn

from expense_tracker.app import create_app
from expense_tracker.core import settings
from expense_tracker.logger import get_logging_config

app = create_app()


def run() -> None:
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_config=get_logging_config())


if __name__ == "__main__":
    run()

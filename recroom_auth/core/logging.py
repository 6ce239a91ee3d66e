import logging
import logging.config

JSON_FORMAT = (
    '{"timestamp":"%(asctime)s","level":"%(levelname)s","app":"%(app)s","logger":"%(name)s",'
    '"message":"%(message)s","func":"%(funcName)s","line":"%(lineno)d","request_id":"%(request_id)s"}'
)
TEXT_FORMAT = "[%(asctime)s] [%(levelname)s] %(app)s %(name)s: %(message)s (request_id=%(request_id)s)"


class RequestContextFilter(logging.Filter):
    """Гарантирует наличие app и request_id у каждой записи, даже вне запроса."""

    def __init__(self, app_name: str = "-"):
        super().__init__()
        self._app_name = app_name

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = "-"
        record.app = self._app_name
        return True


def setup_logging(level: str = "INFO", json_format: bool = True, app_name: str = "recroom-auth") -> None:
    is_json = str(json_format).lower() == "true"

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "filters": {"request_context": {"()": RequestContextFilter, "app_name": app_name}},
            "formatters": {"default": {"format": JSON_FORMAT if is_json else TEXT_FORMAT}},
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                    "filters": ["request_context"],
                }
            },
            "loggers": {
                # access log дублирует middleware с request_id
                "uvicorn.access": {"level": "WARNING"},
            },
            "root": {
                "handlers": ["default"],
                "level": level.upper(),
            },
        }
    )

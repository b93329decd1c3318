import logging
import sys

from src.config.config import LOG_LEVEL

# Атрибуты LogRecord, которые не считаются пользовательским контекстом
_RESERVED = set(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys()
) | {"message", "asctime", "taskName"}


class ExtraFormatter(logging.Formatter):
    """
    Форматтер, дописывающий к сообщению поля, переданные через ``extra``.

    :return:
    """

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        extra = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED and not key.startswith("_")
        }
        if not extra:
            return message

        context = " ".join(f"{key}={value!r}" for key, value in sorted(extra.items()))
        return f"{message} | {context}"


def setup_logger(name: str = "profile_analyzer", level: str = LOG_LEVEL) -> logging.Logger:
    """
    Создаёт и настраивает логгер приложения.

    :param name: Имя логгера
    :param level: Уровень логирования
    :return: Настроенный логгер
    """
    log = logging.getLogger(name)
    log.setLevel(level)

    if not log.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(
            ExtraFormatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        )
        log.addHandler(handler)

    log.propagate = False
    return log


logger = setup_logger()

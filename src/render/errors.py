"""Коды ошибок и исключения задачи рендеринга."""

from enum import Enum, IntEnum


class ErrorCode(IntEnum):
    """Код ошибки задачи рендеринга (передаётся в сигнал error_occurred)."""

    NO_ERROR = 0
    IMAGE_ALLOCATION_FAIL = 1
    IMAGE_SAVE_FAIL = 2
    IMAGE_UNSUPPORTED_FORMAT = 3

    @property
    def message(self) -> str:
        return _ERROR_MESSAGES[self]


_ERROR_MESSAGES = {
    ErrorCode.NO_ERROR: '',
    ErrorCode.IMAGE_ALLOCATION_FAIL: 'Недостаточно памяти для растра карты',
    ErrorCode.IMAGE_SAVE_FAIL: 'Не удалось сохранить изображение карты',
    ErrorCode.IMAGE_UNSUPPORTED_FORMAT: 'Формат вывода не поддерживается этой сборкой',
}


class TaskOutcome(str, Enum):
    """Итог выполнения задачи."""

    PENDING = 'pending'
    SUCCESS = 'success'
    CANCELED = 'canceled'
    FAILED = 'failed'


class RenderTaskError(Exception):
    """
    Ошибка задачи рендеринга.

    Args:
        code: Код ошибки для сигнала и отображения пользователю.
        details: Технические подробности для журнала.
    """

    def __init__(self, code: ErrorCode, details: str = '') -> None:
        super().__init__(details or code.message)
        self.code = code
        self.details = details


class RenderCancelledError(Exception):
    """Задача остановлена по запросу отмены."""

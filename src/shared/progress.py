import contextlib
import logging
import threading
from collections.abc import Callable

logger = logging.getLogger(__name__)


class CancelToken:
    """
    Флаг кооперативной отмены, разделяемый между потоками.

    Выставляется из любого потока; длительные операции проверяют его
    на своей гранулярности и завершаются сами. Запрос отмены не ждёт
    остановки операции.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    def is_cancelled(self) -> bool:
        return self._event.is_set()


# Глобальные колбэки для интеграции с GUI (опционально)
class _CbStore:
    progress: Callable[[int, int, str], None] | None = None
    preview_image: Callable[[object], None] | None = None


def set_progress_callback(cb: Callable[[int, int, str], None] | None) -> None:
    """Устанавливает глобальный колбэк прогресса: (done, total, label)."""
    _CbStore.progress = cb


def set_preview_image_callback(cb: Callable[[object], None] | None) -> None:
    """Устанавливает колбэк предпросмотра (получает PIL.Image)."""
    _CbStore.preview_image = cb


def report_progress(done: int, total: int, label: str) -> None:
    """Сообщает GUI о прогрессе, если колбэк установлен."""
    cb = _CbStore.progress
    if cb is not None:
        with contextlib.suppress(Exception):
            cb(done, total, label)


def publish_preview_image(img: object) -> bool:
    """
    Публикует изображение предпросмотра в GUI, если колбэк установлен.

    Возвращает True, если колбэк был установлен и вызван без исключений.
    Тип img — PIL.Image.Image (используем object во избежание жёсткой зависимости).
    """
    cb = _CbStore.preview_image
    if cb is not None:
        try:
            cb(img)
        except Exception:
            logger.debug('Preview callback failed', exc_info=True)
            return False
        else:
            return True
    return False


def has_preview_callback() -> bool:
    return _CbStore.preview_image is not None


def cleanup_all_progress_resources() -> None:
    """
    Очистка всех глобальных колбэков.

    Вызывается при закрытии приложения.
    """
    _CbStore.progress = None
    _CbStore.preview_image = None

"""Выполнение RenderTask в отдельном потоке Qt."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from PySide6.QtCore import QObject, QThread, Signal

from render.errors import TaskOutcome
from shared.diagnostics import log_memory_usage, log_thread_status

if TYPE_CHECKING:
    from render.task import RenderTask

logger = logging.getLogger(__name__)


class RenderTaskWorker(QThread):
    """Worker thread for a single render task."""

    task_finished = Signal(bool, str)  # success, error_message

    def __init__(self, task: RenderTask, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._task = task

    @property
    def task(self) -> RenderTask:
        return self._task

    def request_cancel(self) -> None:
        """Запрос отмены операции."""
        self._task.cancel()

    def run(self) -> None:
        """Execute the render task in background thread."""
        logger.info('RenderTaskWorker thread started')
        log_thread_status('worker thread start')
        log_memory_usage('worker thread start')

        result = False
        message = ''
        try:
            result = self._task.run()
            if not result and self._task.outcome is not TaskOutcome.CANCELED:
                message = self._task.error.message
        except Exception as e:
            logger.exception(f'RenderTaskWorker thread failed: {e}')
            message = str(e)
        finally:
            self._task.finished(result)
            self.task_finished.emit(result, message)
            log_thread_status('worker thread end')
            log_memory_usage('worker thread end')

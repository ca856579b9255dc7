"""
Фоновая задача рендеринга карты.

Порядок: поверхность -> слои (синхронное задание) -> проверка отмены ->
декорации и аннотации -> сохранение файла и геопривязка. Любая ошибка или
отмена прерывает оставшиеся шаги; повторов нет.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import TYPE_CHECKING

from PySide6.QtCore import QObject, Signal

from domain.models import OutputDestination
from imaging.qt import build_preview
from render.compositor import composite
from render.errors import ErrorCode, RenderCancelledError, RenderTaskError, TaskOutcome
from render.finalizer import finalize_output
from render.job import RenderJobGuard, layer_painter_job_factory
from render.surfaces import FileOutput, PainterOutput, resolve_surface
from shared.constants import PAGED_OUTPUT_AVAILABLE, TASK_STAGE_LABELS, TaskStage
from shared.progress import (
    CancelToken,
    has_preview_callback,
    publish_preview_image,
    report_progress,
)

if TYPE_CHECKING:
    from PySide6.QtGui import QPainter

    from domain.models import MapSettings
    from render.annotations import Annotation
    from render.decorations import MapDecoration
    from render.job import JobFactory, LayerPainter
    from render.surfaces import ResolvedSurface, TaskOutput

logger = logging.getLogger(__name__)


class RenderTask(QObject):
    """
    Отрисовка карты в файл (растр или PDF) либо во внешний painter.

    Аннотации копируются и принадлежат задаче; декорации принадлежат
    вызывающей стороне и должны жить до конца выполнения. cancel()
    можно вызывать из любого потока в любой момент.
    """

    rendering_complete = Signal()
    canceled = Signal()
    error_occurred = Signal(int)  # ErrorCode

    def __init__(
        self,
        settings: MapSettings,
        output: TaskOutput,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._settings = settings
        self._output = output
        self._annotations: list[Annotation] = []
        self._decorations: tuple[MapDecoration, ...] = ()
        self._error = ErrorCode.NO_ERROR
        self._outcome = TaskOutcome.PENDING
        self._started = False
        self._cancel_token = CancelToken()
        self._job_guard = RenderJobGuard(layer_painter_job_factory(), self._cancel_token)
        self._paged_output_available = PAGED_OUTPUT_AVAILABLE

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def to_file(
        cls,
        settings: MapSettings,
        file_name: str,
        file_format: str,
        force_raster: bool = False,
        *,
        save_world_file: bool = False,
        parent: QObject | None = None,
    ) -> RenderTask:
        destination = OutputDestination(
            path=file_name,
            format=file_format,
            force_raster=force_raster,
            save_world_file=save_world_file,
        )
        return cls(settings, FileOutput(destination), parent)

    @classmethod
    def to_painter(
        cls,
        settings: MapSettings,
        painter: QPainter,
        *,
        parent: QObject | None = None,
    ) -> RenderTask:
        return cls(settings, PainterOutput(painter), parent)

    # ------------------------------------------------------------------
    # Configuration (before run)
    # ------------------------------------------------------------------

    @property
    def settings(self) -> MapSettings:
        return self._settings

    @property
    def output(self) -> TaskOutput:
        return self._output

    @property
    def annotations(self) -> tuple[Annotation, ...]:
        return tuple(self._annotations)

    @property
    def decorations(self) -> tuple[MapDecoration, ...]:
        return self._decorations

    @property
    def error(self) -> ErrorCode:
        return self._error

    @property
    def outcome(self) -> TaskOutcome:
        return self._outcome

    def set_annotations(self, annotations: Iterable[Annotation]) -> None:
        """Заменяет аннотации задачи копиями переданных; старые копии удаляются."""
        self._annotations.clear()
        self._annotations = [a.clone() for a in annotations if a is not None]

    def set_decorations(self, decorations: Sequence[MapDecoration]) -> None:
        """Запоминает ссылки на декорации вызывающей стороны (без копирования)."""
        self._decorations = tuple(decorations)

    def set_save_world_file(self, save: bool) -> None:
        if not isinstance(self._output, FileOutput):
            logger.debug('set_save_world_file ignored for painter output')
            return
        destination = self._output.destination.model_copy(update={'save_world_file': save})
        self._output = FileOutput(destination)

    def set_job_factory(self, job_factory: JobFactory) -> None:
        self._job_guard = RenderJobGuard(job_factory, self._cancel_token)

    def set_layer_painters(self, layer_painters: Mapping[str, LayerPainter]) -> None:
        self.set_job_factory(layer_painter_job_factory(layer_painters))

    def set_paged_output_available(self, available: bool) -> None:
        self._paged_output_available = available

    # ------------------------------------------------------------------
    # Cancellation
    # ------------------------------------------------------------------

    def cancel(self) -> None:
        """Запрос отмены: не ждёт остановки отрисовки."""
        self._job_guard.cancel()
        logger.info('Render task cancel requested')

    def is_canceled(self) -> bool:
        return self._cancel_token.is_cancelled()

    def _raise_if_canceled(self) -> None:
        if self._cancel_token.is_cancelled():
            raise RenderCancelledError

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def run(self) -> bool:
        """
        Выполняет задачу в текущем потоке.

        Returns:
            True при успехе. При False причина — в outcome и error.
            Повторный вызов ничего не делает и возвращает False.
        """
        if self._started:
            logger.warning('Render task already ran (%s), run ignored', self._outcome.value)
            return False
        self._started = True

        logger.info(
            'Render task started: %dx%d, %d layers, %d decorations, %d annotations',
            self._settings.output_width,
            self._settings.output_height,
            len(self._settings.layers),
            len(self._decorations),
            len(self._annotations),
        )
        try:
            self._execute()
        except RenderCancelledError:
            self._outcome = TaskOutcome.CANCELED
            logger.info('Render task canceled')
            return False
        except RenderTaskError as e:
            self._error = e.code
            self._outcome = TaskOutcome.FAILED
            logger.error('Render task failed: %s (%s)', e.code.name, e.details)
            return False

        self._outcome = TaskOutcome.SUCCESS
        logger.info('Render task completed')
        return True

    def _execute(self) -> None:
        self._raise_if_canceled()

        self._report(TaskStage.SURFACE)
        surface = resolve_surface(
            self._settings,
            self._output,
            paged_output_available=self._paged_output_available,
        )
        try:
            self._report(TaskStage.LAYERS)
            self._job_guard.run(self._settings, surface.painter)
            self._raise_if_canceled()

            self._report(TaskStage.COMPOSITION)
            composite(
                surface.painter,
                self._settings,
                self._decorations,
                self._annotations,
                self._cancel_token,
            )

            if isinstance(self._output, FileOutput):
                self._report(TaskStage.OUTPUT)
                finalize_output(
                    surface,
                    self._settings,
                    self._output.destination,
                    paged_output_available=self._paged_output_available,
                )
                self._publish_preview(surface)
        finally:
            surface.close()

    def _report(self, stage: TaskStage) -> None:
        report_progress(int(stage), len(TaskStage), TASK_STAGE_LABELS[stage])

    def _publish_preview(self, surface: ResolvedSurface) -> None:
        if surface.image is None or not has_preview_callback():
            return
        publish_preview_image(build_preview(surface.image))

    def finished(self, result: bool) -> None:
        """
        Вызывается после run(): удаляет копии аннотаций и испускает ровно
        один итоговый сигнал.
        """
        self._annotations.clear()

        if result:
            self.rendering_complete.emit()
        elif self._outcome is TaskOutcome.CANCELED:
            self.canceled.emit()
        else:
            self._outcome = TaskOutcome.FAILED
            self.error_occurred.emit(int(self._error))

"""
Синхронное задание отрисовки слоёв и обёртка над его временем жизни.

Само задание непрозрачно для задачи: оно строится фабрикой из
(settings, painter, cancel_token), блокирует поток в
render_synchronously() и должно само проверять токен отмены.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Protocol

from PySide6.QtGui import QColor

if TYPE_CHECKING:
    from PySide6.QtGui import QPainter

    from domain.models import MapSettings
    from shared.progress import CancelToken

logger = logging.getLogger(__name__)


class RenderJob(Protocol):
    def render_synchronously(self) -> None: ...

    def cancel_without_blocking(self) -> None: ...


JobFactory = Callable[['MapSettings', 'QPainter', 'CancelToken'], RenderJob]

# Отрисовка одного слоя: (settings, painter, cancel_token)
LayerPainter = Callable[['MapSettings', 'QPainter', 'CancelToken'], None]


class LayerPainterJob:
    """
    Простое задание: фон карты и зарегистрированные отрисовщики слоёв.

    Слои рисуются в порядке settings.layers; между слоями проверяется
    токен отмены. Слои без отрисовщика пропускаются.
    """

    def __init__(
        self,
        settings: MapSettings,
        painter: QPainter,
        cancel_token: CancelToken,
        layer_painters: Mapping[str, LayerPainter] | None = None,
    ) -> None:
        self._settings = settings
        self._painter = painter
        self._token = cancel_token
        self._layer_painters = dict(layer_painters or {})

    def render_synchronously(self) -> None:
        width, height = self._settings.output_size
        self._painter.fillRect(0, 0, width, height, QColor(self._settings.background_color))

        for layer_id in self._settings.layers:
            if self._token.is_cancelled():
                logger.info('Layer rendering cancelled before layer %s', layer_id)
                return
            layer_painter = self._layer_painters.get(layer_id)
            if layer_painter is None:
                logger.debug('No painter registered for layer %s', layer_id)
                continue
            self._painter.save()
            try:
                layer_painter(self._settings, self._painter, self._token)
            finally:
                self._painter.restore()

    def cancel_without_blocking(self) -> None:
        self._token.cancel()


def layer_painter_job_factory(
    layer_painters: Mapping[str, LayerPainter] | None = None,
) -> JobFactory:
    """Фабрика LayerPainterJob с общим набором отрисовщиков слоёв."""

    def factory(
        settings: MapSettings, painter: QPainter, cancel_token: CancelToken
    ) -> RenderJob:
        return LayerPainterJob(settings, painter, cancel_token, layer_painters)

    return factory


class RenderJobGuard:
    """
    Владеет заданием только на время отрисовки слоёв.

    Ссылка на задание защищена блокировкой: её создание, чтение в cancel()
    и очистка сериализованы. Во время блокирующего render_synchronously()
    блокировка не удерживается.
    """

    def __init__(self, job_factory: JobFactory, cancel_token: CancelToken) -> None:
        self._job_factory = job_factory
        self._token = cancel_token
        self._lock = threading.Lock()
        self._job: RenderJob | None = None

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._job is not None

    def run(self, settings: MapSettings, painter: QPainter) -> None:
        with self._lock:
            job = self._job_factory(settings, painter, self._token)
            self._job = job
        try:
            job.render_synchronously()
        finally:
            with self._lock:
                self._job = None

    def cancel(self) -> None:
        """
        Запрос отмены без ожидания.

        Токен выставляется всегда, даже если задание ещё не создано или уже
        завершилось: задача увидит отмену после возврата из отрисовки.
        """
        with self._lock:
            if self._job is not None:
                self._job.cancel_without_blocking()
        self._token.cancel()

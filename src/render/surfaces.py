"""
Выбор поверхности отрисовки.

Внешний painter используется как есть. Для PDF создаётся страница
QPdfWriter (рисуем прямо в неё или, при force_raster, сначала в растр).
Для остальных форматов — растр QImage в памяти.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from PySide6.QtCore import QMarginsF, QSizeF, Qt
from PySide6.QtGui import QImage, QPageLayout, QPageSize, QPainter

from render.errors import ErrorCode, RenderTaskError
from shared.constants import MM_PER_INCH, MM_PER_M, PAGED_OUTPUT_AVAILABLE

if TYPE_CHECKING:
    from PySide6.QtGui import QPdfWriter

    from domain.models import MapSettings, OutputDestination

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileOutput:
    """Вывод в файл: задача сама создаёт поверхность и пишет файл."""

    destination: OutputDestination


@dataclass(frozen=True)
class PainterOutput:
    """Вывод во внешний painter: задача ничего не сохраняет."""

    painter: QPainter


TaskOutput = FileOutput | PainterOutput


@dataclass
class ResolvedSurface:
    """Поверхность, в которую рисуют слои, декорации и аннотации."""

    painter: QPainter
    # Растр в памяти (для растровых форматов и PDF с force_raster)
    image: QImage | None = None
    # Страница PDF
    page_device: QPdfWriter | None = None
    # painter создан задачей и должен быть закрыт ею
    owns_painter: bool = False

    @property
    def needs_page_merge(self) -> bool:
        """Растр нужно перенести на страницу при финализации."""
        return self.page_device is not None and self.image is not None

    def close(self) -> None:
        if self.owns_painter and self.painter.isActive():
            self.painter.end()


def page_size_mm(settings: MapSettings) -> QSizeF:
    """Размер страницы в миллиметрах по размеру вывода и DPI."""
    width, height = settings.output_size
    return QSizeF(
        width * MM_PER_INCH / settings.output_dpi,
        height * MM_PER_INCH / settings.output_dpi,
    )


def create_page_device(settings: MapSettings, path: str) -> QPdfWriter:
    """Страница PDF без полей с разрешением, равным DPI вывода."""
    from PySide6.QtGui import QPdfWriter

    writer = QPdfWriter(path)
    writer.setResolution(round(settings.output_dpi))
    page_size = QPageSize(
        page_size_mm(settings),
        QPageSize.Unit.Millimeter,
        '',
        QPageSize.SizeMatchPolicy.ExactMatch,
    )
    layout = QPageLayout(
        page_size,
        QPageLayout.Orientation.Portrait,
        QMarginsF(0, 0, 0, 0),
        QPageLayout.Unit.Millimeter,
    )
    writer.setPageLayout(layout)
    return writer


def allocate_raster(settings: MapSettings) -> QImage:
    """
    Растр ARGB32 размером вывода с плотностью пикселей из DPI.

    Raises:
        RenderTaskError: IMAGE_ALLOCATION_FAIL, если Qt вернул пустой растр.
    """
    width, height = settings.output_size
    img = QImage(width, height, QImage.Format.Format_ARGB32)
    if img.isNull():
        msg = f'QImage allocation failed for {width}x{height}'
        raise RenderTaskError(ErrorCode.IMAGE_ALLOCATION_FAIL, msg)

    dots_per_meter = int(MM_PER_M * settings.output_dpi / MM_PER_INCH)
    img.setDotsPerMeterX(dots_per_meter)
    img.setDotsPerMeterY(dots_per_meter)
    img.fill(Qt.GlobalColor.transparent)
    return img


def resolve_surface(
    settings: MapSettings,
    output: TaskOutput,
    *,
    paged_output_available: bool = PAGED_OUTPUT_AVAILABLE,
) -> ResolvedSurface:
    """
    Выбирает поверхность для заданного режима вывода.

    Raises:
        RenderTaskError: IMAGE_UNSUPPORTED_FORMAT (PDF без поддержки страниц),
            IMAGE_ALLOCATION_FAIL (растр не выделен),
            IMAGE_SAVE_FAIL (не удалось начать запись PDF).
    """
    if isinstance(output, PainterOutput):
        logger.debug('Rendering to external painter')
        return ResolvedSurface(painter=output.painter)

    destination = output.destination
    page_device = None
    painter = None

    if destination.is_paged:
        if not paged_output_available:
            msg = 'Paged output is not available in this Qt build'
            raise RenderTaskError(ErrorCode.IMAGE_UNSUPPORTED_FORMAT, msg)
        page_device = create_page_device(settings, destination.path)
        if not destination.force_raster:
            painter = QPainter()
            if not painter.begin(page_device):
                msg = f'Cannot start PDF output: {destination.path}'
                raise RenderTaskError(ErrorCode.IMAGE_SAVE_FAIL, msg)
            logger.info('Rendering directly to PDF page: %s', destination.path)

    image = None
    if painter is None:
        image = allocate_raster(settings)
        painter = QPainter(image)
        logger.info(
            'Rendering to raster buffer %dx%d (%s)',
            image.width(),
            image.height(),
            'merge into PDF' if page_device is not None else destination.format,
        )

    return ResolvedSurface(
        painter=painter,
        image=image,
        page_device=page_device,
        owns_painter=True,
    )

"""
Финализация вывода: закрытие поверхности, перенос растра в PDF,
сохранение растра и запись геопривязки.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from PySide6.QtCore import QRectF
from PySide6.QtGui import QPainter

from geo.georef import embed_georeference
from geo.geotransform import world_file_content, world_file_path
from imaging.io import ImageSaveError, build_save_kwargs, save_image
from imaging.qt import qimage_to_pil
from render.errors import ErrorCode, RenderTaskError
from shared.constants import (
    GDAL_PDF_DPI_OPTION,
    GEOTIFF_SUFFIXES,
    PAGED_OUTPUT_AVAILABLE,
)

if TYPE_CHECKING:
    from PySide6.QtGui import QImage

    from domain.models import MapSettings, OutputDestination
    from render.surfaces import ResolvedSurface

logger = logging.getLogger(__name__)


def merge_raster_into_page(surface: ResolvedSurface) -> None:
    """Рисует весь растр на странице PDF один к одному (пиксели страницы = DPI)."""
    img = surface.image
    painter = QPainter()
    if not painter.begin(surface.page_device):
        msg = 'Cannot start PDF output for raster merge'
        raise RenderTaskError(ErrorCode.IMAGE_SAVE_FAIL, msg)
    rect = QRectF(0, 0, img.width(), img.height())
    painter.drawImage(rect, img, rect)
    painter.end()
    logger.info('Raster %dx%d merged into PDF page', img.width(), img.height())


def save_raster(img: QImage, destination: OutputDestination) -> None:
    """
    Кодирует растр в формат назначения.

    Raises:
        RenderTaskError: IMAGE_SAVE_FAIL при ошибке кодирования или записи.
    """
    pil_img = qimage_to_pil(img)
    try:
        save_image(pil_img, destination.path, build_save_kwargs(destination.format))
    except ImageSaveError as e:
        raise RenderTaskError(ErrorCode.IMAGE_SAVE_FAIL, str(e)) from e
    finally:
        pil_img.close()


def write_world_file(output_path: str | Path, settings: MapSettings) -> Path | None:
    """Пишет world file рядом с растром; None, если имя построить нельзя."""
    world_path = world_file_path(output_path)
    if world_path is None:
        logger.warning('World file skipped: %s has no extension', output_path)
        return None
    try:
        with world_path.open('w', encoding='ascii', newline='') as f:
            f.write(world_file_content(settings))
    except OSError as e:
        logger.warning('World file not written: %s (%s)', world_path, e)
        return None
    logger.info('World file written: %s', world_path)
    return world_path


def write_georeference(destination: OutputDestination, settings: MapSettings) -> None:
    """Встроенная привязка для GeoTIFF, иначе world file."""
    suffix = Path(destination.path).suffix.lstrip('.').lower()
    if suffix in GEOTIFF_SUFFIXES and embed_georeference(destination.path, settings):
        return
    write_world_file(destination.path, settings)


def finalize_output(
    surface: ResolvedSurface,
    settings: MapSettings,
    destination: OutputDestination,
    *,
    paged_output_available: bool = PAGED_OUTPUT_AVAILABLE,
) -> None:
    """
    Завершает запись файла назначения.

    Raises:
        RenderTaskError: IMAGE_UNSUPPORTED_FORMAT, IMAGE_SAVE_FAIL.
    """
    surface.close()

    if destination.is_paged:
        if not paged_output_available:
            msg = 'Paged output is not available in this Qt build'
            raise RenderTaskError(ErrorCode.IMAGE_UNSUPPORTED_FORMAT, msg)
        if not surface.needs_page_merge:
            logger.info('PDF written: %s', destination.path)
            return
        merge_raster_into_page(surface)
        if destination.save_world_file:
            embed_georeference(
                destination.path,
                settings,
                gdal_options={GDAL_PDF_DPI_OPTION: f'{settings.output_dpi:g}'},
            )
        logger.info('Rasterized PDF written: %s', destination.path)
        return

    save_raster(surface.image, destination)
    if destination.save_world_file:
        write_georeference(destination, settings)

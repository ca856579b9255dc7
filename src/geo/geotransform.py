"""
Аффинная геопривязка карты.

Вычисляет шесть коэффициентов преобразования пиксель -> карта по
установкам рендеринга, текст world file и имя файла привязки.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from shared.constants import (
    WORLD_FILE_LINE_END,
    WORLD_FILE_MARKER,
    WORLD_FILE_PRECISION,
)

if TYPE_CHECKING:
    from domain.models import MapSettings


@dataclass(frozen=True)
class GeoTransform:
    """
    Коэффициенты аффинного преобразования (нотация world file: a..f).

    X = origin_x + col * pixel_width + row * column_rotation
    Y = origin_y + col * row_rotation + row * pixel_height
    """

    origin_x: float  # c
    pixel_width: float  # a
    column_rotation: float  # b
    origin_y: float  # f
    row_rotation: float  # d
    pixel_height: float  # e, обычно отрицательный
    crs_wkt: str = ''

    def to_gdal(self) -> tuple[float, float, float, float, float, float]:
        """Порядок GDAL: (c, a, b, f, d, e)."""
        return (
            self.origin_x,
            self.pixel_width,
            self.column_rotation,
            self.origin_y,
            self.row_rotation,
            self.pixel_height,
        )

    def to_world_file(self) -> tuple[float, float, float, float, float, float]:
        """Порядок строк world file: (a, d, b, e, c, f)."""
        return (
            self.pixel_width,
            self.row_rotation,
            self.column_rotation,
            self.pixel_height,
            self.origin_x,
            self.origin_y,
        )


def world_file_parameters(
    settings: MapSettings,
) -> tuple[float, float, float, float, float, float]:
    """
    Параметры (a, b, c, d, e, f) без сдвига на полпикселя.

    Начало координат — левый верхний угол охвата. Поворот карты
    применяется вокруг центра охвата.
    """
    extent = settings.extent
    sx = extent.width / settings.output_width
    sy = extent.height / settings.output_height
    x_center, y_center = extent.center
    alpha = math.radians(settings.rotation)
    cos_a = math.cos(alpha)
    sin_a = math.sin(alpha)

    # матрица масштабирования
    s = (sx, 0.0, extent.xmin, 0.0, -sy, extent.ymax)
    # матрица поворота
    r = (
        cos_a,
        -sin_a,
        x_center * (1 - cos_a) + y_center * sin_a,
        sin_a,
        cos_a,
        -x_center * sin_a + y_center * (1 - cos_a),
    )

    # поворот(масштаб(X))
    a = r[0] * s[0] + r[1] * s[3]
    b = r[0] * s[1] + r[1] * s[4]
    c = r[0] * s[2] + r[1] * s[5] + r[2]
    d = r[3] * s[0] + r[4] * s[3]
    e = r[3] * s[1] + r[4] * s[4]
    f = r[3] * s[2] + r[4] * s[5] + r[5]
    return a, b, c, d, e, f


def compute_geotransform(settings: MapSettings) -> GeoTransform:
    """GeoTransform со сдвигом начала координат на полпикселя."""
    a, b, c, d, e, f = world_file_parameters(settings)
    c -= 0.5 * a
    c -= 0.5 * b
    f -= 0.5 * d
    f -= 0.5 * e
    return GeoTransform(
        origin_x=c,
        pixel_width=a,
        column_rotation=b,
        origin_y=f,
        row_rotation=d,
        pixel_height=e,
        crs_wkt=settings.crs_wkt,
    )


def format_coefficient(value: float) -> str:
    """Десятичная запись без экспоненты и хвостовых нулей."""
    text = f'{value:.{WORLD_FILE_PRECISION}f}'.rstrip('0').rstrip('.')
    if text in ('-0', ''):
        return '0'
    return text


def world_file_content(settings: MapSettings) -> str:
    """Шесть строк world file: a, d, b, e, c, f."""
    transform = compute_geotransform(settings)
    return ''.join(
        format_coefficient(v) + WORLD_FILE_LINE_END for v in transform.to_world_file()
    )


def world_file_path(output_path: str | Path) -> Path | None:
    """
    Имя файла привязки рядом с растром.

    Базовое имя — до первой точки, суффикс — первая и последняя буквы
    расширения плюс 'w': map.png -> map.pgw, map.tiff -> map.tfw.
    Без расширения файл привязки не строится (None).
    """
    path = Path(output_path)
    name = path.name
    if '.' not in name:
        return None
    base_name = name.split('.', 1)[0]
    suffix = name.rsplit('.', 1)[1]
    if not suffix:
        return None
    return path.parent / f'{base_name}.{suffix[0]}{suffix[-1]}{WORLD_FILE_MARKER}'

"""Контекст отрисовки декораций и аннотаций поверх слоёв карты."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Flag, auto
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from PySide6.QtGui import QPainter

    from domain.models import MapSettings


class RenderFlag(Flag):
    NONE = 0
    ANTIALIASING = auto()


@dataclass
class RenderContext:
    """Painter, привязанный к выбранной поверхности, плюс флаги рендеринга."""

    settings: MapSettings
    painter: QPainter | None = None
    flags: RenderFlag = RenderFlag.NONE

    @classmethod
    def from_map_settings(cls, settings: MapSettings) -> RenderContext:
        flags = RenderFlag.ANTIALIASING if settings.antialiasing else RenderFlag.NONE
        return cls(settings=settings, flags=flags)

    def set_painter(self, painter: QPainter) -> None:
        self.painter = painter

    def has_flag(self, flag: RenderFlag) -> bool:
        return bool(self.flags & flag)

    @property
    def output_size(self) -> tuple[int, int]:
        return self.settings.output_size

    def map_to_pixel(self, x: float, y: float) -> tuple[float, float]:
        """
        Координаты карты -> пиксели вывода (без учёта поворота).

        Ось Y инвертирована: строки растра растут вниз, а Y карты — вверх.
        """
        extent = self.settings.extent
        width, height = self.settings.output_size
        px = width * (x - extent.xmin) / extent.width
        py = height * (1 - (y - extent.ymin) / extent.height)
        return px, py

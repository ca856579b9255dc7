"""Декорации карты: надписи и маркеры без собственной привязки."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from PySide6.QtCore import QPointF, QRectF, Qt
from PySide6.QtGui import QColor, QFont, QFontMetricsF, QPen

from shared.constants import (
    CENTER_CROSS_COLOR,
    CENTER_CROSS_LENGTH_PX,
    CENTER_CROSS_LINE_WIDTH_PX,
    COPYRIGHT_FONT_SIZE_PT,
    COPYRIGHT_MARGIN_PX,
    COPYRIGHT_TEXT_COLOR,
    MapCorner,
)

if TYPE_CHECKING:
    from domain.models import MapSettings
    from render.context import RenderContext


class MapDecoration(ABC):
    """
    Base class for map decorations.

    Decorations are owned by the caller and must be stateless with
    respect to rendering: the same instance may be shared between tasks.
    """

    name = 'decoration'

    @abstractmethod
    def render(self, settings: MapSettings, context: RenderContext) -> None:
        """Draw the decoration over the whole output."""


class CopyrightLabelDecoration(MapDecoration):
    """Надпись в углу карты."""

    name = 'copyright'

    def __init__(self, text: str, corner: MapCorner = MapCorner.BOTTOM_RIGHT) -> None:
        self.text = text
        self.corner = MapCorner(corner)

    def render(self, settings: MapSettings, context: RenderContext) -> None:
        painter = context.painter
        width, height = settings.output_size
        font = QFont()
        font.setPointSize(COPYRIGHT_FONT_SIZE_PT)
        text_w = QFontMetricsF(font).horizontalAdvance(self.text)
        text_h = QFontMetricsF(font).height()
        m = COPYRIGHT_MARGIN_PX

        x = m if self.corner in (MapCorner.TOP_LEFT, MapCorner.BOTTOM_LEFT) else width - m - text_w
        y = m if self.corner in (MapCorner.TOP_LEFT, MapCorner.TOP_RIGHT) else height - m - text_h

        painter.save()
        painter.setFont(font)
        painter.setPen(QColor(*COPYRIGHT_TEXT_COLOR))
        painter.drawText(QRectF(x, y, text_w + 1, text_h), Qt.AlignmentFlag.AlignLeft, self.text)
        painter.restore()


class CenterCrossDecoration(MapDecoration):
    """Красный крест в центре карты."""

    name = 'center_cross'

    def __init__(
        self,
        length_px: float = CENTER_CROSS_LENGTH_PX,
        line_width_px: float = CENTER_CROSS_LINE_WIDTH_PX,
    ) -> None:
        self.length_px = length_px
        self.line_width_px = line_width_px

    def render(self, settings: MapSettings, context: RenderContext) -> None:
        painter = context.painter
        width, height = settings.output_size
        cx = width / 2
        cy = height / 2
        half = max(1.0, self.length_px / 2)

        painter.save()
        pen = QPen(QColor(*CENTER_CROSS_COLOR))
        pen.setWidthF(max(1.0, self.line_width_px))
        painter.setPen(pen)
        painter.drawLine(QPointF(cx, cy - half), QPointF(cx, cy + half))
        painter.drawLine(QPointF(cx - half, cy), QPointF(cx + half, cy))
        painter.restore()

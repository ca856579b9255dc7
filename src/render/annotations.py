"""
Аннотации — плавающие элементы поверх карты.

Аннотация привязана либо к точке карты (фиксированная позиция), либо
к доле ширины/высоты вывода (относительная позиция). Задача хранит
собственные копии аннотаций (clone()), поэтому аннотации не должны
держать ссылок на внешние изменяемые объекты.
"""

from __future__ import annotations

import copy
import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from PySide6.QtCore import QRectF, Qt
from PySide6.QtGui import QColor, QFont, QFontMetricsF, QPen

from imaging.qt import pil_to_qimage
from shared.constants import (
    ANNOTATION_FILL_COLOR,
    ANNOTATION_FONT_SIZE_PT,
    ANNOTATION_FRAME_COLOR,
    ANNOTATION_FRAME_PADDING_PX,
)

if TYPE_CHECKING:
    from PIL import Image

    from render.context import RenderContext

logger = logging.getLogger(__name__)


class Annotation(ABC):
    """Base class for annotations rendered on top of the map."""

    def __init__(
        self,
        *,
        visible: bool = True,
        map_layer: str | None = None,
        map_position: tuple[float, float] | None = None,
        relative_position: tuple[float, float] = (0.0, 0.0),
    ) -> None:
        self.visible = visible
        # Слой, без которого аннотация не рисуется
        self.map_layer = map_layer
        self.map_position = map_position
        self.relative_position = relative_position

    @property
    def has_fixed_map_position(self) -> bool:
        return self.map_position is not None

    def set_map_position(self, x: float, y: float) -> None:
        self.map_position = (x, y)

    def set_relative_position(self, x: float, y: float) -> None:
        """Доли ширины/высоты вывода; диапазон [0, 1] не проверяется."""
        self.map_position = None
        self.relative_position = (x, y)

    def render(self, context: RenderContext) -> None:
        """
        Рисует аннотацию в painter контекста.

        Начало координат painter уже перенесено в точку привязки.
        """
        if context.painter is None:
            return
        self.render_annotation(context)

    @abstractmethod
    def render_annotation(self, context: RenderContext) -> None:
        """Draw the annotation content relative to its anchor."""

    def clone(self) -> Annotation:
        return copy.deepcopy(self)


class TextAnnotation(Annotation):
    """Текст в рамке с подложкой."""

    def __init__(
        self,
        text: str,
        *,
        font_size_pt: int = ANNOTATION_FONT_SIZE_PT,
        frame_offset: tuple[float, float] = (0.0, 0.0),
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.text = text
        self.font_size_pt = font_size_pt
        self.frame_offset = frame_offset

    def render_annotation(self, context: RenderContext) -> None:
        painter = context.painter
        font = QFont()
        font.setPointSize(self.font_size_pt)
        metrics = QFontMetricsF(font)
        pad = ANNOTATION_FRAME_PADDING_PX
        text_rect = metrics.boundingRect(
            QRectF(0, 0, 10_000, 10_000), Qt.AlignmentFlag.AlignLeft, self.text
        )
        frame = QRectF(
            self.frame_offset[0],
            self.frame_offset[1],
            text_rect.width() + 2 * pad,
            text_rect.height() + 2 * pad,
        )

        painter.setPen(QPen(QColor(*ANNOTATION_FRAME_COLOR)))
        painter.setBrush(QColor(*ANNOTATION_FILL_COLOR))
        painter.drawRect(frame)
        painter.setFont(font)
        painter.drawText(
            frame.adjusted(pad, pad, -pad, -pad), Qt.AlignmentFlag.AlignLeft, self.text
        )


class PictureAnnotation(Annotation):
    """Картинка (PIL Image), левый верхний угол — в точке привязки."""

    def __init__(
        self,
        image: Image.Image,
        *,
        size: tuple[float, float] | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.image = image
        self.size = size

    def render_annotation(self, context: RenderContext) -> None:
        qimage = pil_to_qimage(self.image)
        width, height = self.size or (qimage.width(), qimage.height())
        context.painter.drawImage(QRectF(0, 0, width, height), qimage)

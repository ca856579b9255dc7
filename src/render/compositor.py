"""Наложение декораций и аннотаций на отрисованные слои."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from PySide6.QtGui import QPainter

from render.context import RenderContext, RenderFlag
from render.errors import RenderCancelledError

if TYPE_CHECKING:
    from domain.models import MapSettings
    from render.annotations import Annotation
    from render.decorations import MapDecoration
    from shared.progress import CancelToken

logger = logging.getLogger(__name__)


def annotation_position(annotation: Annotation, context: RenderContext) -> tuple[float, float]:
    """
    Точка привязки аннотации в пикселях вывода.

    Фиксированная позиция пересчитывается из координат карты, относительная
    умножается на размер вывода.
    """
    if annotation.has_fixed_map_position:
        return context.map_to_pixel(*annotation.map_position)
    width, height = context.output_size
    rel_x, rel_y = annotation.relative_position
    return rel_x * width, rel_y * height


def is_annotation_renderable(annotation: Annotation | None, settings: MapSettings) -> bool:
    if annotation is None or not annotation.visible:
        return False
    return not (annotation.map_layer and not settings.has_layer(annotation.map_layer))


def composite(
    painter: QPainter,
    settings: MapSettings,
    decorations: Sequence[MapDecoration],
    annotations: Sequence[Annotation],
    cancel_token: CancelToken,
) -> int:
    """
    Рисует декорации, затем аннотации, в порядке списков.

    Каждая аннотация обрамлена save()/restore(): перенос начала координат
    одной аннотации не влияет на следующую.

    Returns:
        Число отрисованных аннотаций.

    Raises:
        RenderCancelledError: отмена запрошена до очередной аннотации.
    """
    context = RenderContext.from_map_settings(settings)
    context.set_painter(painter)

    for decoration in decorations:
        decoration.render(settings, context)

    rendered = 0
    for annotation in annotations:
        if cancel_token.is_cancelled():
            raise RenderCancelledError

        if not is_annotation_renderable(annotation, settings):
            continue

        item_x, item_y = annotation_position(annotation, context)
        painter.save()
        try:
            painter.setRenderHint(
                QPainter.RenderHint.Antialiasing,
                context.has_flag(RenderFlag.ANTIALIASING),
            )
            painter.translate(item_x, item_y)
            annotation.render(context)
        finally:
            painter.restore()
        rendered += 1

    logger.debug(
        'Composited %d decorations and %d/%d annotations',
        len(decorations),
        rendered,
        len(annotations),
    )
    return rendered

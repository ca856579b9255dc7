# Модуль рендеринга карты
from render.annotations import Annotation, PictureAnnotation, TextAnnotation
from render.compositor import annotation_position, composite
from render.context import RenderContext, RenderFlag
from render.decorations import CenterCrossDecoration, CopyrightLabelDecoration, MapDecoration
from render.errors import ErrorCode, RenderCancelledError, RenderTaskError, TaskOutcome
from render.job import LayerPainterJob, RenderJob, RenderJobGuard
from render.surfaces import FileOutput, PainterOutput, resolve_surface
from render.task import RenderTask
from render.worker import RenderTaskWorker

__all__ = [
    'Annotation',
    'CenterCrossDecoration',
    'CopyrightLabelDecoration',
    'ErrorCode',
    'FileOutput',
    'LayerPainterJob',
    'MapDecoration',
    'PainterOutput',
    'PictureAnnotation',
    'RenderCancelledError',
    'RenderContext',
    'RenderFlag',
    'RenderJob',
    'RenderJobGuard',
    'RenderTask',
    'RenderTaskError',
    'RenderTaskWorker',
    'TaskOutcome',
    'TextAnnotation',
    'annotation_position',
    'composite',
    'resolve_surface',
]

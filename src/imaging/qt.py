"""Conversion between Qt raster buffers and PIL images."""

import numpy as np
from PIL import Image
from PySide6.QtGui import QImage

from shared.constants import PREVIEW_MAX_SIDE_PX


def qimage_to_pil(img: QImage) -> Image.Image:
    """
    Копирует QImage в PIL Image (RGBA).

    Строки QImage выровнены по 4 байтам, поэтому берём bytesPerLine
    и отрезаем хвост каждой строки.
    """
    rgba = img.convertToFormat(QImage.Format.Format_RGBA8888)
    width, height = rgba.width(), rgba.height()
    stride = rgba.bytesPerLine()
    buf = np.frombuffer(rgba.constBits(), dtype=np.uint8, count=stride * height)
    arr = buf.reshape(height, stride)[:, : width * 4].reshape(height, width, 4)
    # copy(): массив не должен ссылаться на память QImage
    return Image.fromarray(arr.copy())


def pil_to_qimage(img: Image.Image) -> QImage:
    """Копирует PIL Image в QImage (RGBA8888)."""
    rgba = img.convert('RGBA') if img.mode != 'RGBA' else img
    data = rgba.tobytes('raw', 'RGBA')
    qimage = QImage(
        data, rgba.width, rgba.height, rgba.width * 4, QImage.Format.Format_RGBA8888
    )
    # QImage не владеет буфером data — отвязываем копией
    return qimage.copy()


def build_preview(img: QImage, max_side: int = PREVIEW_MAX_SIDE_PX) -> Image.Image:
    """Уменьшенная копия растра для предпросмотра в GUI."""
    preview = qimage_to_pil(img)
    preview.thumbnail((max_side, max_side), Image.Resampling.LANCZOS)
    return preview

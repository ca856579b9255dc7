from __future__ import annotations

import contextlib
import logging
import os
from typing import TYPE_CHECKING, Any

from PIL import Image

from shared.constants import JPEG_QUALITY, PIL_FORMAT_ALIASES

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

# Форматы без альфа-канала: перед сохранением приводим к RGB
_NO_ALPHA_FORMATS = frozenset({'JPEG', 'BMP', 'PPM'})


class ImageSaveError(OSError):
    """Не удалось закодировать или записать растр."""


def pil_format_name(file_format: str) -> str:
    """Имя формата Pillow по имени формата вывода (png, JPG, tif...)."""
    name = file_format.strip().upper()
    return PIL_FORMAT_ALIASES.get(name, name)


def build_save_kwargs(file_format: str, quality: int = JPEG_QUALITY) -> dict[str, Any]:
    """Build PIL.Image.save kwargs for the given output format."""
    fmt = pil_format_name(file_format)
    kwargs: dict[str, Any] = {'format': fmt}
    if fmt == 'JPEG':
        q = max(10, min(100, int(quality)))
        kwargs.update(
            {
                'quality': q,
                'subsampling': 0,
                'optimize': True,
                'progressive': True,
            }
        )
    return kwargs


def save_image(img: Image.Image, out_path: Path | str, save_kwargs: dict[str, Any]) -> None:
    """Save an image and fsync to ensure data is written."""
    fmt = save_kwargs.get('format', '')
    tmp = img.convert('RGB') if fmt in _NO_ALPHA_FORMATS and img.mode != 'RGB' else img
    try:
        tmp.save(out_path, **save_kwargs)
    except (OSError, ValueError, KeyError) as e:
        msg = f'Не удалось сохранить изображение {out_path} ({fmt}): {e}'
        raise ImageSaveError(msg) from e
    finally:
        if tmp is not img:
            with contextlib.suppress(Exception):
                tmp.close()
    # Ensure data is written to disk
    fd = os.open(out_path, os.O_RDONLY)
    try:
        os.fsync(fd)
    finally:
        os.close(fd)
    logger.info('Image saved: %s (%s, %dx%d)', out_path, fmt, img.width, img.height)

"""Imaging package - raster encoding and Qt/PIL conversion."""

from imaging.io import ImageSaveError, build_save_kwargs, pil_format_name, save_image
from imaging.qt import build_preview, pil_to_qimage, qimage_to_pil

__all__ = [
    'ImageSaveError',
    'build_preview',
    'build_save_kwargs',
    'pil_format_name',
    'pil_to_qimage',
    'qimage_to_pil',
    'save_image',
]

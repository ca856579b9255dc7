"""Geo module - affine georeferencing of rendered maps."""

from .georef import embed_georeference
from .geotransform import (
    GeoTransform,
    compute_geotransform,
    world_file_content,
    world_file_path,
)

__all__ = [
    'GeoTransform',
    'compute_geotransform',
    'embed_georeference',
    'world_file_content',
    'world_file_path',
]

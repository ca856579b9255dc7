"""Запись геопривязки в уже сохранённый файл (GeoTIFF, GeoPDF) через rasterio."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import rasterio
from affine import Affine
from rasterio.crs import CRS
from rasterio.errors import CRSError, RasterioError

from geo.geotransform import compute_geotransform

if TYPE_CHECKING:
    from pathlib import Path

    from domain.models import MapSettings

logger = logging.getLogger(__name__)


def embed_georeference(
    path: str | Path,
    settings: MapSettings,
    *,
    gdal_options: dict[str, str] | None = None,
) -> bool:
    """
    Открывает файл на обновление и записывает в него transform и CRS.

    gdal_options действуют только на время обновления и только в текущем
    потоке (rasterio.Env).

    Returns:
        True, если файл удалось открыть и обновить; False, если GDAL
        не умеет обновлять этот файл (вызывающая сторона решает, нужен ли
        world file).
    """
    transform = compute_geotransform(settings)
    try:
        with (
            rasterio.Env(**(gdal_options or {})),
            rasterio.open(path, 'r+') as ds,
        ):
            ds.transform = Affine.from_gdal(*transform.to_gdal())
            ds.crs = CRS.from_wkt(transform.crs_wkt)
    # GDAL не распознал файл или не умеет его обновлять: rasterio 1.4 сообщает
    # об этом через TypeError, а не RasterioIOError
    except (RasterioError, CRSError, TypeError) as e:
        logger.warning('Georeference not embedded into %s: %s', path, e)
        return False
    logger.info('Georeference embedded into %s', path)
    return True

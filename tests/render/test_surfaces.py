"""Tests for render.surfaces module."""

import pytest
from PySide6.QtGui import QImage, QPainter

import render.surfaces as surfaces
from domain.models import OutputDestination
from render.errors import ErrorCode, RenderTaskError
from render.surfaces import (
    FileOutput,
    PainterOutput,
    allocate_raster,
    page_size_mm,
    resolve_surface,
)


def _file_output(tmp_path, fmt, **kwargs):
    path = tmp_path / f'map.{fmt.lower()}'
    return FileOutput(OutputDestination(path=str(path), format=fmt, **kwargs))


class TestAllocateRaster:
    """Tests for allocate_raster."""

    def test_size_format_and_density(self, settings):
        img = allocate_raster(settings)
        assert (img.width(), img.height()) == (200, 100)
        assert img.format() == QImage.Format.Format_ARGB32
        # 96 dpi -> 3779 точек на метр
        assert img.dotsPerMeterX() == 3779
        assert img.dotsPerMeterY() == 3779

    def test_cleared_to_transparent(self, settings):
        img = allocate_raster(settings)
        assert img.pixelColor(0, 0).alpha() == 0

    def test_null_image_is_allocation_failure(self, settings, monkeypatch):
        """A null QImage maps to IMAGE_ALLOCATION_FAIL."""

        class NullImage:
            Format = QImage.Format

            def __init__(self, *args):
                pass

            def isNull(self):
                return True

        monkeypatch.setattr(surfaces, 'QImage', NullImage)
        with pytest.raises(RenderTaskError) as exc_info:
            allocate_raster(settings)
        assert exc_info.value.code is ErrorCode.IMAGE_ALLOCATION_FAIL


class TestPageSize:
    """Tests for page_size_mm."""

    def test_page_size_from_dpi(self, settings_factory):
        s = settings_factory(output_width=960, output_height=480, output_dpi=96.0)
        size = page_size_mm(s)
        assert size.width() == pytest.approx(254.0)
        assert size.height() == pytest.approx(127.0)


class TestResolveSurface:
    """Tests for resolve_surface."""

    def test_external_painter_used_as_is(self, settings):
        img = QImage(200, 100, QImage.Format.Format_ARGB32)
        painter = QPainter(img)
        try:
            surface = resolve_surface(settings, PainterOutput(painter))
            assert surface.painter is painter
            assert surface.image is None
            assert surface.owns_painter is False
            surface.close()
            assert painter.isActive()
        finally:
            painter.end()

    def test_raster_format(self, settings, tmp_path):
        surface = resolve_surface(settings, _file_output(tmp_path, 'png'))
        try:
            assert surface.image is not None
            assert surface.page_device is None
            assert surface.owns_painter is True
            assert surface.painter.isActive()
        finally:
            surface.close()
        assert not surface.painter.isActive()

    def test_pdf_direct(self, settings, tmp_path):
        surface = resolve_surface(
            settings, _file_output(tmp_path, 'PDF'), paged_output_available=True
        )
        try:
            assert surface.page_device is not None
            assert surface.image is None
            assert surface.needs_page_merge is False
        finally:
            surface.close()

    def test_pdf_force_raster(self, settings, tmp_path):
        surface = resolve_surface(
            settings,
            _file_output(tmp_path, 'PDF', force_raster=True),
            paged_output_available=True,
        )
        try:
            assert surface.page_device is not None
            assert surface.image is not None
            assert surface.needs_page_merge is True
        finally:
            surface.close()

    def test_pdf_without_paged_support(self, settings, tmp_path):
        with pytest.raises(RenderTaskError) as exc_info:
            resolve_surface(settings, _file_output(tmp_path, 'PDF'), paged_output_available=False)
        assert exc_info.value.code is ErrorCode.IMAGE_UNSUPPORTED_FORMAT

    def test_close_is_idempotent(self, settings, tmp_path):
        surface = resolve_surface(settings, _file_output(tmp_path, 'png'))
        surface.close()
        surface.close()

"""Tests for render.annotations and render.decorations modules."""

from PIL import Image
from PySide6.QtGui import QColor, QImage, QPainter

from render.annotations import PictureAnnotation, TextAnnotation
from render.context import RenderContext, RenderFlag
from render.decorations import CenterCrossDecoration, CopyrightLabelDecoration
from shared.constants import MapCorner


def _render_on_white(settings, draw):
    img = QImage(*settings.output_size, QImage.Format.Format_ARGB32)
    img.fill(QColor('white'))
    painter = QPainter(img)
    try:
        context = RenderContext.from_map_settings(settings)
        context.set_painter(painter)
        draw(context)
    finally:
        painter.end()
    return img


def _has_non_white(img, x0, y0, x1, y1):
    white = QColor('white')
    return any(
        img.pixelColor(x, y) != white for x in range(x0, x1) for y in range(y0, y1)
    )


class TestRenderContext:
    """Tests for RenderContext."""

    def test_flags_from_settings(self, settings_factory):
        assert RenderContext.from_map_settings(settings_factory()).has_flag(RenderFlag.ANTIALIASING)
        ctx = RenderContext.from_map_settings(settings_factory(antialiasing=False))
        assert not ctx.has_flag(RenderFlag.ANTIALIASING)

    def test_map_to_pixel(self, settings):
        ctx = RenderContext.from_map_settings(settings)
        assert ctx.map_to_pixel(50.0, 50.0) == (100.0, 50.0)
        assert ctx.output_size == (200, 100)


class TestAnnotationBase:
    """Tests for Annotation positioning and cloning."""

    def test_position_modes(self):
        a = TextAnnotation('x')
        assert a.has_fixed_map_position is False
        a.set_map_position(1.0, 2.0)
        assert a.has_fixed_map_position is True
        a.set_relative_position(0.5, 0.25)
        assert a.has_fixed_map_position is False
        assert a.relative_position == (0.5, 0.25)

    def test_clone_is_independent(self):
        a = TextAnnotation('x', map_layer='roads', relative_position=(0.1, 0.2))
        b = a.clone()
        assert b is not a
        assert (b.text, b.map_layer, b.relative_position) == ('x', 'roads', (0.1, 0.2))
        b.text = 'y'
        assert a.text == 'x'

    def test_render_without_painter_is_noop(self, settings):
        TextAnnotation('x').render(RenderContext.from_map_settings(settings))


class TestTextAnnotation:
    """Tests for TextAnnotation."""

    def test_draws_frame_at_origin(self, settings):
        img = _render_on_white(settings, TextAnnotation('Label').render)
        assert _has_non_white(img, 0, 0, 20, 20)
        assert not _has_non_white(img, 150, 80, 200, 100)


class TestPictureAnnotation:
    """Tests for PictureAnnotation."""

    def test_draws_image_scaled(self, settings):
        pic = Image.new('RGB', (2, 2), color=(0, 0, 255))
        img = _render_on_white(settings, PictureAnnotation(pic, size=(10, 10)).render)
        assert img.pixelColor(5, 5) == QColor(0, 0, 255)
        assert img.pixelColor(15, 15) == QColor('white')

    def test_natural_size(self, settings):
        pic = Image.new('RGB', (4, 3), color=(0, 255, 0))
        img = _render_on_white(settings, PictureAnnotation(pic).render)
        assert img.pixelColor(3, 2) == QColor(0, 255, 0)
        assert img.pixelColor(4, 3) == QColor('white')


class TestDecorations:
    """Tests for map decorations."""

    def test_center_cross(self, settings):
        cross = CenterCrossDecoration(length_px=20, line_width_px=2)
        img = _render_on_white(settings, lambda ctx: cross.render(settings, ctx))
        assert img.pixelColor(100, 45).red() == 255
        assert img.pixelColor(100, 45).green() < 100
        assert img.pixelColor(10, 10) == QColor('white')

    def test_copyright_stays_in_its_corner(self, settings):
        """Label in the top-left corner leaves the opposite corner untouched."""
        label = CopyrightLabelDecoration('(c) Map', corner=MapCorner.TOP_LEFT)
        img = _render_on_white(settings, lambda ctx: label.render(settings, ctx))
        assert not _has_non_white(img, 100, 60, 200, 100)

    def test_copyright_corner_from_string(self):
        label = CopyrightLabelDecoration('x', corner='bottom_right')
        assert label.corner is MapCorner.BOTTOM_RIGHT

"""Tests for domain.models module."""

import pytest
from pydantic import ValidationError

from domain.models import Extent, ExportProfile, MapSettings, OutputDestination


class TestExtent:
    """Tests for Extent model."""

    def test_dimensions(self):
        """Width, height and center follow from the corners."""
        extent = Extent(xmin=10.0, ymin=20.0, xmax=50.0, ymax=30.0)
        assert extent.width == 40.0
        assert extent.height == 10.0
        assert extent.center == (30.0, 25.0)

    @pytest.mark.parametrize(
        'corners',
        [
            {'xmin': 0.0, 'ymin': 0.0, 'xmax': 0.0, 'ymax': 10.0},
            {'xmin': 0.0, 'ymin': 0.0, 'xmax': 10.0, 'ymax': 0.0},
            {'xmin': 10.0, 'ymin': 0.0, 'xmax': 0.0, 'ymax': 10.0},
        ],
    )
    def test_empty_extent_rejected(self, corners):
        """Zero or negative width/height is rejected."""
        with pytest.raises(ValidationError):
            Extent(**corners)


class TestMapSettingsValidators:
    """Tests for MapSettings validators."""

    def test_defaults(self, settings):
        """Defaults are applied for optional fields."""
        assert settings.rotation == 0.0
        assert settings.background_color == '#ffffff'
        assert settings.antialiasing is True
        assert settings.output_size == (200, 100)

    @pytest.mark.parametrize('field', ['output_width', 'output_height'])
    @pytest.mark.parametrize('value', [0, -5])
    def test_output_size_positive(self, settings_factory, field, value):
        """Output size must be positive."""
        with pytest.raises(ValidationError):
            settings_factory(**{field: value})

    def test_dpi_positive(self, settings_factory):
        """Output DPI must be positive."""
        with pytest.raises(ValidationError):
            settings_factory(output_dpi=0)

    def test_unknown_crs_rejected(self, settings_factory):
        """CRS must be understood by pyproj."""
        with pytest.raises(ValidationError):
            settings_factory(crs='EPSG:999999999')

    def test_wkt_crs_accepted(self, settings_factory, settings):
        """A WKT string is a valid CRS."""
        s = settings_factory(crs=settings.crs_wkt)
        assert 'Pseudo-Mercator' in s.crs_wkt

    @pytest.mark.parametrize('color', ['#00ff00', '#8000FF00'])
    def test_valid_colors(self, settings_factory, color):
        assert settings_factory(background_color=color).background_color == color

    @pytest.mark.parametrize('color', ['red', '#fff', '00ff00', '#00ff0'])
    def test_invalid_colors(self, settings_factory, color):
        with pytest.raises(ValidationError):
            settings_factory(background_color=color)

    def test_frozen(self, settings):
        """Settings are read-only after construction."""
        with pytest.raises(ValidationError):
            settings.output_width = 10

    def test_extra_fields_ignored(self, settings_factory):
        """Unknown keys (e.g. from old profiles) are ignored."""
        s = settings_factory(legacy_option=1)
        assert not hasattr(s, 'legacy_option')

    def test_has_layer(self, settings):
        assert settings.has_layer('roads') is True
        assert settings.has_layer('rails') is False


class TestOutputDestination:
    """Tests for OutputDestination model."""

    @pytest.mark.parametrize(('fmt', 'paged'), [('PDF', True), ('pdf', True), ('png', False)])
    def test_is_paged(self, fmt, paged):
        """PDF format is paged regardless of case."""
        assert OutputDestination(path='out.x', format=fmt).is_paged is paged

    def test_defaults(self):
        dest = OutputDestination(path='out.png', format='png')
        assert dest.force_raster is False
        assert dest.save_world_file is False

    @pytest.mark.parametrize('field', ['path', 'format'])
    def test_empty_values_rejected(self, field):
        values = {'path': 'out.png', 'format': 'png', field: '  '}
        with pytest.raises(ValidationError):
            OutputDestination(**values)


class TestExportProfile:
    """Tests for ExportProfile model."""

    def test_from_nested_dict(self, settings):
        """Profile validates nested settings and destination."""
        profile = ExportProfile.model_validate(
            {
                'settings': settings.model_dump(mode='json'),
                'destination': {'path': 'map.png', 'format': 'png'},
                'copyright_text': '(c) OSM',
            }
        )
        assert profile.settings == settings
        assert profile.destination.path == 'map.png'
        assert profile.copyright_text == '(c) OSM'
        assert profile.center_cross is False

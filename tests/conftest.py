"""Pytest configuration and fixtures for map render task tests."""

import os
import sys
from pathlib import Path

import pytest

# Add src directory to path for imports
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

# Qt без дисплея
os.environ.setdefault('QT_QPA_PLATFORM', 'offscreen')


@pytest.fixture(scope='session', autouse=True)
def qt_app():
    """Single QGuiApplication for fonts, painters and PDF writers."""
    from PySide6.QtGui import QGuiApplication

    app = QGuiApplication.instance() or QGuiApplication([])
    yield app


@pytest.fixture(autouse=True)
def reset_progress_callbacks():
    """Global progress/preview callbacks must not leak between tests."""
    from shared.progress import cleanup_all_progress_resources

    yield
    cleanup_all_progress_resources()


def make_settings(**overrides):
    """MapSettings for a 0..100 square extent rendered to 200x100 px."""
    from domain.models import MapSettings

    defaults = {
        'extent': {'xmin': 0.0, 'ymin': 0.0, 'xmax': 100.0, 'ymax': 100.0},
        'output_width': 200,
        'output_height': 100,
        'output_dpi': 96.0,
        'crs': 'EPSG:3857',
        'layers': ('roads', 'water'),
    }
    defaults.update(overrides)
    return MapSettings(**defaults)


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def settings_factory():
    return make_settings

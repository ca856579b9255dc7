"""Domain layer - settings models and export profiles."""
from domain.models import ExportProfile, Extent, MapSettings, OutputDestination
from domain.profiles import (
    delete_profile,
    ensure_profiles_dir,
    list_profiles,
    load_profile,
    save_profile,
)

__all__ = [
    'ExportProfile',
    'Extent',
    'MapSettings',
    'OutputDestination',
    'delete_profile',
    'ensure_profiles_dir',
    'list_profiles',
    'load_profile',
    'save_profile',
]

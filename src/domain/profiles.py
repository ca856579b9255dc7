import logging
from pathlib import Path

import tomlkit

from domain.models import ExportProfile
from shared.constants import APPDATA_BASE

logger = logging.getLogger(__name__)


def _user_profiles_dir() -> Path:
    """
    Determine profiles directory.

    1) If <project_root>/configs/profiles exists, use it (useful for run-from-repo setups).
    2) Otherwise, fall back to user APPDATA directory: %APPDATA%/MapRenderTask/configs/profiles.
    """
    project_root = Path(__file__).resolve().parent.parent.parent
    local_profiles = project_root / 'configs' / 'profiles'
    if local_profiles.exists():
        return local_profiles
    return APPDATA_BASE / 'configs' / 'profiles'


def ensure_profiles_dir(base_dir: Path | None = None) -> Path:
    profiles_dir = base_dir or _user_profiles_dir()
    profiles_dir.mkdir(parents=True, exist_ok=True)
    return profiles_dir


def list_profiles(base_dir: Path | None = None) -> list[str]:
    """Список имён профилей без расширения."""
    folder = ensure_profiles_dir(base_dir)
    return sorted(p.stem for p in folder.glob('*.toml') if p.is_file())


def profile_path(name: str, base_dir: Path | None = None) -> Path:
    """Путь к файлу профиля по имени."""
    return ensure_profiles_dir(base_dir) / f'{name}.toml'


def load_profile(name_or_path: str, base_dir: Path | None = None) -> ExportProfile:
    """
    Загрузка и валидация профиля TOML -> ExportProfile.

    Поддерживает как имя профиля (без .toml) из каталога profiles,
    так и абсолютный/относительный путь до TOML файла.
    """
    p = Path(name_or_path)
    path = p if p.suffix.lower() == '.toml' else profile_path(name_or_path, base_dir)
    if not path.exists():
        msg = f'Профиль не найден: {path}'
        raise FileNotFoundError(msg)
    data = tomlkit.parse(path.read_text(encoding='utf-8'))
    profile = ExportProfile.model_validate(data.unwrap())
    logger.info(
        'Profile loaded: %s (%dx%d, format=%s)',
        path,
        profile.settings.output_width,
        profile.settings.output_height,
        profile.destination.format,
    )
    return profile


def save_profile(
    name: str, profile: ExportProfile, base_dir: Path | None = None
) -> Path:
    """Сохранение профиля в TOML (без атомарности и бэкапов)."""
    path = profile_path(name, base_dir)
    # TOML не умеет None: незаданные поля опускаем
    text = tomlkit.dumps(profile.model_dump(mode='json', exclude_none=True))
    path.write_text(text, encoding='utf-8')
    return path


def delete_profile(name: str, base_dir: Path | None = None) -> None:
    """Удаление файла профиля, если он существует."""
    path = profile_path(name, base_dir)
    if path.exists():
        path.unlink()

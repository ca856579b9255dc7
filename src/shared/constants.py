import os
from enum import Enum, IntEnum
from pathlib import Path

from PySide6 import QtGui

# Миллиметров в дюйме (перевод размера вывода в физические единицы страницы)
MM_PER_INCH = 25.4

# Миллиметров в метре (для плотности пикселей QImage: точек на метр)
MM_PER_M = 1000

# Имя формата постраничного (векторного) вывода
PDF_FORMAT = 'PDF'

# Расширения, для которых геопривязка встраивается в сам файл
GEOTIFF_SUFFIXES = ('tif', 'tiff')

# Последний символ суффикса файла привязки (map.png -> map.pgw)
WORLD_FILE_MARKER = 'w'

# Перевод строки в файле привязки (world file исторически в CRLF)
WORLD_FILE_LINE_END = '\r\n'

# Число знаков после запятой при записи коэффициентов в world file
WORLD_FILE_PRECISION = 17

# Опция GDAL, задающая DPI при открытии PDF на обновление
GDAL_PDF_DPI_OPTION = 'GDAL_PDF_DPI'

# Разрешение вывода по умолчанию (точек на дюйм)
DEFAULT_OUTPUT_DPI = 96.0

# Цвет фона карты по умолчанию
DEFAULT_BACKGROUND_COLOR = '#ffffff'

# Система координат по умолчанию
DEFAULT_CRS = 'EPSG:3857'

# Поддержка постраничного вывода в текущей сборке Qt
PAGED_OUTPUT_AVAILABLE = hasattr(QtGui, 'QPdfWriter')

# --- Аннотации и декорации
# Размер шрифта текстовой аннотации (pt)
ANNOTATION_FONT_SIZE_PT = 10
# Внутренний отступ рамки аннотации (px)
ANNOTATION_FRAME_PADDING_PX = 4
# Цвет рамки аннотации (RGB)
ANNOTATION_FRAME_COLOR = (0, 0, 0)
# Цвет фона аннотации (RGBA)
ANNOTATION_FILL_COLOR = (255, 255, 255, 220)

# Отступ надписи копирайта от края (px)
COPYRIGHT_MARGIN_PX = 6
# Размер шрифта надписи копирайта (pt)
COPYRIGHT_FONT_SIZE_PT = 8
# Цвет надписи копирайта (RGB)
COPYRIGHT_TEXT_COLOR = (40, 40, 40)

# Цвет центрального креста (RGB)
CENTER_CROSS_COLOR = (255, 0, 0)
# Полная длина линии креста (px)
CENTER_CROSS_LENGTH_PX = 40
# Толщина линий креста (px)
CENTER_CROSS_LINE_WIDTH_PX = 2

# --- Предпросмотр
# Максимальная сторона изображения предпросмотра (px)
PREVIEW_MAX_SIDE_PX = 1024

# --- Сохранение растров
# Качество JPEG по умолчанию
JPEG_QUALITY = 95

# Сопоставление коротких имён форматов с именами форматов Pillow
PIL_FORMAT_ALIASES = {
    'JPG': 'JPEG',
    'TIF': 'TIFF',
}


class MapCorner(str, Enum):
    """Угол карты для размещения декораций."""

    TOP_LEFT = 'top_left'
    TOP_RIGHT = 'top_right'
    BOTTOM_LEFT = 'bottom_left'
    BOTTOM_RIGHT = 'bottom_right'


class TaskStage(IntEnum):
    """Этапы выполнения задачи рендеринга (для прогресса)."""

    SURFACE = 0
    LAYERS = 1
    COMPOSITION = 2
    OUTPUT = 3


TASK_STAGE_LABELS = {
    TaskStage.SURFACE: 'Подготовка поверхности',
    TaskStage.LAYERS: 'Отрисовка слоёв',
    TaskStage.COMPOSITION: 'Декорации и аннотации',
    TaskStage.OUTPUT: 'Сохранение',
}

# --- Каталоги пользователя
APP_DIR_NAME = 'MapRenderTask'
APPDATA_BASE = (
    Path(os.getenv('APPDATA') or Path.home() / 'AppData' / 'Roaming') / APP_DIR_NAME
)
LOCAL_BASE = (
    Path(os.getenv('LOCALAPPDATA') or Path.home() / 'AppData' / 'Local') / APP_DIR_NAME
)
LOG_FILE_NAME = 'map_render_task.log'

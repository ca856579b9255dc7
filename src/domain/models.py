import re

from pydantic import BaseModel, field_validator, model_validator
from pyproj import CRS
from pyproj.exceptions import CRSError

from shared.constants import (
    DEFAULT_BACKGROUND_COLOR,
    DEFAULT_CRS,
    DEFAULT_OUTPUT_DPI,
    PDF_FORMAT,
)

_COLOR_RE = re.compile(r'^#(?:[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$')


class Extent(BaseModel):
    """Географический охват карты в единицах её системы координат."""

    model_config = {'frozen': True}

    xmin: float
    ymin: float
    xmax: float
    ymax: float

    @model_validator(mode='after')
    def validate_non_empty(self) -> 'Extent':
        if not (self.xmax > self.xmin and self.ymax > self.ymin):
            msg = 'Охват должен иметь положительные ширину и высоту'
            raise ValueError(msg)
        return self

    @property
    def width(self) -> float:
        return self.xmax - self.xmin

    @property
    def height(self) -> float:
        return self.ymax - self.ymin

    @property
    def center(self) -> tuple[float, float]:
        return (self.xmin + self.width / 2, self.ymin + self.height / 2)


class MapSettings(BaseModel):
    """
    Неизменяемые установки рендеринга карты.

    Задача получает их один раз при создании и только читает.
    """

    model_config = {
        'frozen': True,
        'extra': 'ignore',  # игнорировать лишние поля из профилей
    }

    extent: Extent
    # Размер вывода (px)
    output_width: int
    output_height: int
    # Разрешение вывода (точек на дюйм)
    output_dpi: float = DEFAULT_OUTPUT_DPI
    # Система координат (всё, что понимает pyproj: EPSG:XXXX, WKT, PROJ)
    crs: str = DEFAULT_CRS
    # Идентификаторы слоёв в порядке отрисовки
    layers: tuple[str, ...] = ()
    # Поворот карты (градусы)
    rotation: float = 0.0
    background_color: str = DEFAULT_BACKGROUND_COLOR
    antialiasing: bool = True

    @field_validator('output_width', 'output_height')
    @classmethod
    def validate_output_size(cls, v: int) -> int:
        if v <= 0:
            msg = 'Размер вывода должен быть больше нуля'
            raise ValueError(msg)
        return v

    @field_validator('output_dpi')
    @classmethod
    def validate_dpi(cls, v: float) -> float:
        if v <= 0:
            msg = 'Разрешение вывода должно быть больше нуля'
            raise ValueError(msg)
        return v

    @field_validator('crs')
    @classmethod
    def validate_crs(cls, v: str) -> str:
        try:
            CRS.from_user_input(v)
        except CRSError as e:
            msg = f'Неизвестная система координат: {v}'
            raise ValueError(msg) from e
        return v

    @field_validator('background_color')
    @classmethod
    def validate_color(cls, v: str) -> str:
        if not _COLOR_RE.fullmatch(v):
            msg = 'Цвет задаётся в виде #RRGGBB или #AARRGGBB'
            raise ValueError(msg)
        return v

    @property
    def output_size(self) -> tuple[int, int]:
        return (self.output_width, self.output_height)

    @property
    def crs_wkt(self) -> str:
        """WKT системы координат (для записи в метаданные растра)."""
        return CRS.from_user_input(self.crs).to_wkt()

    def has_layer(self, layer_id: str) -> bool:
        return layer_id in self.layers


class OutputDestination(BaseModel):
    """Файл назначения: путь, формат и политика геопривязки."""

    model_config = {'frozen': True}

    path: str
    format: str
    # Для PDF: сначала растеризовать карту, затем вставить растр в страницу
    force_raster: bool = False
    # Записать геопривязку (встроенную или world file)
    save_world_file: bool = False

    @field_validator('path', 'format')
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        if not v.strip():
            msg = 'Значение не может быть пустым'
            raise ValueError(msg)
        return v

    @property
    def is_paged(self) -> bool:
        return self.format.upper() == PDF_FORMAT


class ExportProfile(BaseModel):
    """Профиль экспорта: установки карты плюс файл назначения."""

    model_config = {'extra': 'ignore'}

    settings: MapSettings
    destination: OutputDestination
    # Декорации
    copyright_text: str | None = None
    center_cross: bool = False

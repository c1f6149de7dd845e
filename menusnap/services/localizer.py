"""Static UI text tables and per-item display name selection."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping, Tuple

from menusnap.schemas import MenuItem

logger = logging.getLogger(__name__)


class LocalizationError(Exception):
    """Base class for localization configuration errors."""


class UnsupportedLanguageError(LocalizationError, ValueError):
    def __init__(self, code: Any) -> None:
        super().__init__(f"Unsupported language code: {code!r}")
        self.code = code


class UnknownTextKeyError(LocalizationError, KeyError):
    def __init__(self, key: str, code: str) -> None:
        super().__init__(f"Unknown UI text key {key!r} for language {code!r}")
        self.key = key
        self.code = code


@dataclass(frozen=True)
class LanguageOption:
    code: str
    name: str

    @property
    def label(self) -> str:
        return self.code.upper()


LANGUAGE_OPTIONS: Tuple[LanguageOption, ...] = (
    LanguageOption("en", "English"),
    LanguageOption("zh", "中文"),
    LanguageOption("es", "Español"),
)

SUPPORTED_LANGUAGES = frozenset(option.code for option in LANGUAGE_OPTIONS)


def _freeze(table: Mapping[str, Mapping[str, str]]) -> Mapping[str, Mapping[str, str]]:
    return MappingProxyType({code: MappingProxyType(dict(texts)) for code, texts in table.items()})


UI_TEXTS: Mapping[str, Mapping[str, str]] = _freeze(
    {
        "zh": {
            "title": "菜单识别结果",
            "appetizer": "开胃菜",
            "mainCourse": "主菜",
            "newRestaurant": "新餐厅",
            "save": "保存",
            "viewImage": "查看原图",
            "noMenuItems": "未识别到菜单项",
            "dishesFound": "识别到 {count} 道菜",
            "ocrTime": "识别耗时：{seconds}秒",
            "scanAnother": "扫描另一份菜单",
            "newScan": "新扫描",
            "back": "返回",
            "close": "关闭",
            "uploadedMenu": "已上传的菜单",
            "language": "语言",
        },
        "en": {
            "title": "Menu Results",
            "appetizer": "Appetizer",
            "mainCourse": "Main Course",
            "newRestaurant": "New Restaurant",
            "save": "Save",
            "viewImage": "View full image",
            "noMenuItems": "No menu items found",
            "dishesFound": "Found {count} Menu Items",
            "ocrTime": "OCR processing time: {seconds}s",
            "scanAnother": "Scan Another Menu",
            "newScan": "New scan",
            "back": "Back",
            "close": "Close",
            "uploadedMenu": "Uploaded menu",
            "language": "Language",
        },
        "es": {
            "title": "Resultados del Menú",
            "appetizer": "Aperitivo",
            "mainCourse": "Plato Principal",
            "newRestaurant": "Nuevo Restaurante",
            "save": "Guardar",
            "viewImage": "Ver imagen completa",
            "noMenuItems": "No se encontraron elementos del menú",
            "dishesFound": "Se encontraron {count} platos",
            "ocrTime": "Tiempo de procesamiento OCR: {seconds}s",
            "scanAnother": "Escanear otro menú",
            "newScan": "Nuevo escaneo",
            "back": "Atrás",
            "close": "Cerrar",
            "uploadedMenu": "Menú subido",
            "language": "Idioma",
        },
    }
)


def _check_tables() -> None:
    if set(UI_TEXTS) != SUPPORTED_LANGUAGES:
        raise LocalizationError("UI text tables do not match the supported languages.")
    reference = set(UI_TEXTS["en"])
    for code, texts in UI_TEXTS.items():
        missing = reference.symmetric_difference(texts)
        if missing:
            raise LocalizationError(f"UI texts for {code!r} disagree on keys: {sorted(missing)}")


_check_tables()


def is_supported(code: Any) -> bool:
    return isinstance(code, str) and code in SUPPORTED_LANGUAGES


def ensure_supported(code: Any) -> str:
    if not is_supported(code):
        raise UnsupportedLanguageError(code)
    return code


def language_name(code: str) -> str:
    """Native name of a language, or the upper-cased code when unknown."""

    for option in LANGUAGE_OPTIONS:
        if option.code == code:
            return option.name
    return code.upper()


def select_display_name(item: MenuItem, language_code: str) -> str:
    """Translated dish name for the language, falling back to ``item.dish``."""

    translated = item.translations.get(language_code)
    if translated:
        return translated
    return item.dish


def select_ui_text(key: str, language_code: str) -> str:
    texts = UI_TEXTS.get(ensure_supported(language_code))
    try:
        return texts[key]
    except KeyError:
        raise UnknownTextKeyError(key, language_code) from None


def format_ui_text(key: str, language_code: str, **values: Any) -> str:
    return select_ui_text(key, language_code).format(**values)


class LocalizationContext:
    """Current language of one results view.

    ``current_language`` is always a supported code: rejected selections
    raise before anything is mutated.
    """

    def __init__(self, current_language: str) -> None:
        self._current_language = ensure_supported(current_language)

    @property
    def current_language(self) -> str:
        return self._current_language

    @property
    def texts(self) -> Mapping[str, str]:
        return UI_TEXTS[self._current_language]

    def set_language(self, code: str) -> str:
        if not is_supported(code):
            logger.warning(
                "Rejected unsupported language selection",
                extra={"requested": code, "current_language": self._current_language},
            )
            raise UnsupportedLanguageError(code)
        self._current_language = code
        return code

    def text(self, key: str) -> str:
        return select_ui_text(key, self._current_language)

    def format(self, key: str, **values: Any) -> str:
        return format_ui_text(key, self._current_language, **values)

    def display_name(self, item: MenuItem) -> str:
        return select_display_name(item, self._current_language)


__all__ = [
    "LANGUAGE_OPTIONS",
    "SUPPORTED_LANGUAGES",
    "UI_TEXTS",
    "LanguageOption",
    "LocalizationContext",
    "LocalizationError",
    "UnknownTextKeyError",
    "UnsupportedLanguageError",
    "ensure_supported",
    "format_ui_text",
    "is_supported",
    "language_name",
    "select_display_name",
    "select_ui_text",
]

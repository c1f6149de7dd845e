import pytest

from menusnap.schemas import MenuItem
from menusnap.services.localizer import (
    LANGUAGE_OPTIONS,
    SUPPORTED_LANGUAGES,
    UI_TEXTS,
    LocalizationContext,
    UnknownTextKeyError,
    UnsupportedLanguageError,
    format_ui_text,
    language_name,
    select_display_name,
    select_ui_text,
)


def test_display_name_uses_translation_when_present() -> None:
    item = MenuItem.model_validate({"dish": "Tom Yum", "translations": {"es": "Sopa Tom Yum"}})

    assert select_display_name(item, "es") == "Sopa Tom Yum"
    assert select_display_name(item, "en") == "Tom Yum"


@pytest.mark.parametrize("code", sorted(SUPPORTED_LANGUAGES))
def test_display_name_falls_back_per_language(code: str) -> None:
    translated = MenuItem.model_validate(
        {"dish": "Green Curry", "translations": {"en": "Green Curry (EN)", "zh": "绿咖喱", "es": "Curry verde"}}
    )
    empty = MenuItem.model_validate({"dish": "Green Curry", "translations": {code: ""}})
    missing = MenuItem.model_validate({"dish": "Green Curry"})

    assert select_display_name(translated, code) == translated.translations[code]
    assert select_display_name(empty, code) == "Green Curry"
    assert select_display_name(missing, code) == "Green Curry"


def test_ui_text_lookup_and_formatting() -> None:
    assert select_ui_text("noMenuItems", "en") == "No menu items found"
    assert select_ui_text("viewImage", "zh") == "查看原图"
    assert format_ui_text("dishesFound", "en", count=3) == "Found 3 Menu Items"


def test_ui_text_rejects_unknown_language_and_key() -> None:
    with pytest.raises(UnsupportedLanguageError):
        select_ui_text("title", "fr")
    with pytest.raises(UnknownTextKeyError):
        select_ui_text("dessert", "en")


def test_tables_are_complete_and_immutable() -> None:
    keys = set(UI_TEXTS["en"])
    for code in SUPPORTED_LANGUAGES:
        assert set(UI_TEXTS[code]) == keys

    with pytest.raises(TypeError):
        UI_TEXTS["en"]["title"] = "Changed"  # type: ignore[index]


def test_language_names() -> None:
    assert [option.code for option in LANGUAGE_OPTIONS] == ["en", "zh", "es"]
    assert language_name("es") == "Español"
    assert language_name("xx") == "XX"


def test_context_rejects_unsupported_language_and_keeps_previous() -> None:
    context = LocalizationContext("zh")

    with pytest.raises(UnsupportedLanguageError):
        context.set_language("fr")
    assert context.current_language == "zh"

    context.set_language("es")
    assert context.current_language == "es"
    assert context.text("save") == "Guardar"


def test_context_requires_supported_initial_language() -> None:
    with pytest.raises(UnsupportedLanguageError):
        LocalizationContext("de")

import pytest

from menusnap.schemas import ResultSet
from menusnap.services.image_resolver import ImageSource
from menusnap.services.localizer import UnsupportedLanguageError
from menusnap.services.results_view import ResultsPage


def _results(items, dishes_found=None, ocr_time=1.234):
    return ResultSet.model_validate(
        {
            "dishes_found": len(items) if dishes_found is None else dishes_found,
            "ocr_time": ocr_time,
            "menu_with_images": items,
        }
    )


def _page(results, language="en", **kwargs):
    calls = []
    page = ResultsPage(
        results,
        language=language,
        on_scan_another=lambda: calls.append("scan_another"),
        on_new_scan=lambda: calls.append("new_scan"),
        **kwargs,
    )
    return page, calls


def test_absent_result_set_renders_nothing() -> None:
    page, _ = _page(None)

    assert page.render() is None
    assert len(page.resolvers) == 0


def test_empty_item_list_renders_localized_empty_state() -> None:
    page, _ = _page(_results([]))

    view = page.render()
    assert view is not None
    assert view.sections == ()
    assert view.cards == []
    assert view.empty_message == "No menu items found"

    page.change_language("es")
    assert page.render().empty_message == "No se encontraron elementos del menú"


def test_items_are_grouped_into_appetizers_and_main_course() -> None:
    items = [{"dish": name} for name in ("Satay", "Spring rolls", "Pad Thai", "Green Curry", "Mango rice")]
    page, _ = _page(_results(items))

    view = page.render()
    assert [section.kind for section in view.sections] == ["appetizer", "mainCourse"]
    assert [section.heading for section in view.sections] == ["Appetizer", "Main Course"]
    assert [card.display_name for card in view.sections[0].items] == ["Satay", "Spring rolls"]
    assert len(view.sections[1].items) == 3
    assert view.empty_message is None


def test_small_result_set_has_no_main_course_section() -> None:
    page, _ = _page(_results([{"dish": "Satay"}]))

    view = page.render()
    assert [section.kind for section in view.sections] == ["appetizer"]


def test_summary_labels_follow_language() -> None:
    page, _ = _page(_results([{"dish": "Satay"}], dishes_found=7, ocr_time=2.5), preview_image="data:image/png;base64,AAA")

    view = page.render()
    assert view.dishes_found_label == "Found 7 Menu Items"
    assert view.ocr_time_label == "OCR processing time: 2.50s"
    assert view.preview_image == "data:image/png;base64,AAA"


def test_pad_thai_fallback_scenario() -> None:
    page, _ = _page(
        _results([{"dish": "Pad Thai", "image": {"url": "a.jpg", "thumbnailLink": "a_thumb.jpg"}}])
    )

    card = page.handle_image_event("Pad Thai", ImageSource.PRIMARY, "error")
    assert card.image.source == "thumbnail"
    assert card.image.status == "loading"
    assert card.image.show_spinner is True
    assert card.image.src == "a_thumb.jpg"

    card = page.handle_image_event("Pad Thai", ImageSource.THUMBNAIL, "load")
    assert card.image.status == "loaded"
    assert card.image.show_spinner is False
    assert card.image.src == "a_thumb.jpg"
    assert card.image.link_url == "a.jpg"
    assert card.image.link_label == "View full image"


def test_exhausted_card_shows_placeholder_without_link() -> None:
    page, _ = _page(_results([{"dish": "Larb", "image": {"link": "l.jpg"}}]))

    card = page.handle_image_event("Larb", ImageSource.PRIMARY, "error")
    assert card.image.show_placeholder is True
    assert card.image.src is None
    assert card.image.link_url is None


def test_card_without_image_never_offers_link() -> None:
    page, _ = _page(_results([{"dish": "Plain rice"}]))

    card = page.render().cards[0]
    assert card.image.status == "exhausted"
    assert card.image.show_placeholder is True
    assert card.image.show_spinner is False
    assert card.image.link_url is None


def test_tom_yum_translation_scenario() -> None:
    page, _ = _page(_results([{"dish": "Tom Yum", "translations": {"es": "Sopa Tom Yum"}}]), language="es")

    assert page.render().cards[0].display_name == "Sopa Tom Yum"
    page.change_language("en")
    assert page.render().cards[0].display_name == "Tom Yum"


def test_language_change_leaves_image_state_alone() -> None:
    page, _ = _page(_results([{"dish": "Pad Thai", "image": {"url": "a.jpg", "thumbnailLink": "a_t.jpg"}}]))
    page.handle_image_event("Pad Thai", ImageSource.PRIMARY, "error")

    page.change_language("zh")
    card = page.render().cards[0]
    assert card.image.source == "thumbnail"
    assert card.image.link_label == "查看原图"


def test_unsupported_language_is_rejected_without_change() -> None:
    page, _ = _page(_results([]), language="zh")

    with pytest.raises(UnsupportedLanguageError):
        page.change_language("fr")
    assert page.language == "zh"
    assert page.render().empty_message == "未识别到菜单项"


def test_navigation_delegates_to_callbacks() -> None:
    page, calls = _page(_results([]))

    page.scan_another()
    page.new_scan()

    assert calls == ["scan_another", "new_scan"]


def test_replacing_results_discards_missing_items() -> None:
    page, _ = _page(_results([{"dish": "Pad Thai", "image": {"url": "a.jpg"}}, {"dish": "Tom Yum"}]))

    page.replace_results(_results([{"dish": "Tom Yum"}]))

    assert page.item_keys == ["Tom Yum"]
    assert page.handle_image_event("Pad Thai", ImageSource.PRIMARY, "load") is None

    page.replace_results(None)
    assert page.render() is None
    assert len(page.resolvers) == 0

"""Compose menu cards and the results page from resolver and localizer state."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from menusnap.schemas import MenuItem, ResultSet
from menusnap.services.image_resolver import (
    ImageOutcome,
    ImageResolver,
    ImageSource,
    ImageStatus,
    ResolverRegistry,
    assign_item_keys,
)
from menusnap.services.localizer import LANGUAGE_OPTIONS, LocalizationContext, language_name

logger = logging.getLogger(__name__)

ScanCallback = Callable[[], Any]


@dataclass(frozen=True)
class ImageView:
    status: ImageStatus
    source: str
    src: Optional[str]
    alt: str
    show_spinner: bool
    show_placeholder: bool
    link_url: Optional[str]
    link_label: str


@dataclass(frozen=True)
class MenuItemView:
    key: str
    display_name: str
    description: Optional[str]
    price: Optional[str]
    image: ImageView


@dataclass(frozen=True)
class MenuSection:
    kind: str
    heading: str
    items: Tuple[MenuItemView, ...]


@dataclass(frozen=True)
class ResultsPageView:
    language: str
    language_name: str
    language_options: Tuple[Dict[str, str], ...]
    texts: Dict[str, str]
    dishes_found_label: str
    ocr_time_label: str
    preview_image: Optional[str]
    sections: Tuple[MenuSection, ...] = field(default_factory=tuple)
    empty_message: Optional[str] = None

    @property
    def cards(self) -> List[MenuItemView]:
        return [card for section in self.sections for card in section.items]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def build_image_view(resolver: ImageResolver, *, alt: str, context: LocalizationContext) -> ImageView:
    status = resolver.status
    return ImageView(
        status=status,
        source=resolver.state.active_source.value,
        src=resolver.display_url,
        alt=alt,
        show_spinner=status == "loading",
        show_placeholder=status == "exhausted",
        link_url=resolver.link_url,
        link_label=context.text("viewImage"),
    )


def build_menu_item_view(
    key: str,
    item: MenuItem,
    resolver: ImageResolver,
    context: LocalizationContext,
) -> MenuItemView:
    display_name = context.display_name(item)
    return MenuItemView(
        key=key,
        display_name=display_name,
        description=item.description or None,
        price=item.price or None,
        image=build_image_view(resolver, alt=display_name, context=context),
    )


class ResultsPage:
    """Results screen for one scanned menu.

    Holds the current language and one image resolver per item. The result
    set itself is never modified; ``replace_results`` swaps it and keeps the
    image state of items whose identity and candidate URLs are unchanged.
    """

    def __init__(
        self,
        results: Optional[ResultSet],
        *,
        language: str,
        on_scan_another: ScanCallback,
        on_new_scan: ScanCallback,
        preview_image: Optional[str] = None,
        appetizer_count: int = 2,
    ) -> None:
        self.localization = LocalizationContext(language)
        self.resolvers = ResolverRegistry()
        self.preview_image = preview_image
        self.appetizer_count = max(appetizer_count, 0)
        self._on_scan_another = on_scan_another
        self._on_new_scan = on_new_scan
        self._results: Optional[ResultSet] = None
        self._keyed_items: Tuple[Tuple[str, MenuItem], ...] = ()
        self.replace_results(results)

    @property
    def results(self) -> Optional[ResultSet]:
        return self._results

    @property
    def language(self) -> str:
        return self.localization.current_language

    @property
    def item_keys(self) -> List[str]:
        return [key for key, _ in self._keyed_items]

    def replace_results(self, results: Optional[ResultSet]) -> None:
        self._results = results
        self._keyed_items = assign_item_keys(results.menu_with_images) if results else ()
        if results is None:
            self.preview_image = None
        self.resolvers.sync(self._keyed_items)

    def change_language(self, code: str) -> str:
        """Switch the display language. Image state is left untouched."""

        return self.localization.set_language(code)

    def handle_image_event(self, key: str, source: ImageSource, outcome: ImageOutcome) -> Optional[MenuItemView]:
        resolver = self.resolvers.dispatch(key, source, outcome)
        if resolver is None:
            return None
        return self.card(key)

    def card(self, key: str) -> Optional[MenuItemView]:
        for item_key, item in self._keyed_items:
            if item_key != key:
                continue
            resolver = self.resolvers.get(key)
            if resolver is None:
                return None
            return build_menu_item_view(key, item, resolver, self.localization)
        return None

    def scan_another(self) -> Any:
        return self._on_scan_another()

    def new_scan(self) -> Any:
        return self._on_new_scan()

    def _section(self, kind: str, keyed: Tuple[Tuple[str, MenuItem], ...]) -> MenuSection:
        cards = tuple(
            build_menu_item_view(key, item, self.resolvers.get(key), self.localization)
            for key, item in keyed
        )
        return MenuSection(kind=kind, heading=self.localization.text(kind), items=cards)

    def render(self) -> Optional[ResultsPageView]:
        """Build the page view, or None when there is no result set."""

        results = self._results
        if results is None:
            return None

        context = self.localization
        sections: List[MenuSection] = []
        appetizers = self._keyed_items[: self.appetizer_count]
        main_course = self._keyed_items[self.appetizer_count :]
        if appetizers:
            sections.append(self._section("appetizer", appetizers))
        if main_course:
            sections.append(self._section("mainCourse", main_course))

        return ResultsPageView(
            language=context.current_language,
            language_name=language_name(context.current_language),
            language_options=tuple(
                {"code": option.code, "name": option.name, "label": option.label}
                for option in LANGUAGE_OPTIONS
            ),
            texts=dict(context.texts),
            dishes_found_label=context.format("dishesFound", count=results.dishes_found),
            ocr_time_label=context.format("ocrTime", seconds=f"{results.ocr_time:.2f}"),
            preview_image=self.preview_image,
            sections=tuple(sections),
            empty_message=None if self._keyed_items else context.text("noMenuItems"),
        )


__all__ = [
    "ImageView",
    "MenuItemView",
    "MenuSection",
    "ResultsPage",
    "ResultsPageView",
    "build_image_view",
    "build_menu_item_view",
]

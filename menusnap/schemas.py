from typing import Any, Dict, List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class MenuImage(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)
    url: Optional[str] = None
    link: Optional[str] = None
    thumbnail_link: Optional[str] = Field(default=None, alias="thumbnailLink")

    @field_validator("url", "link", "thumbnail_link", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @property
    def primary_url(self) -> Optional[str]:
        """Full resolution source: ``url`` first, then ``link``."""

        return self.url or self.link

    @property
    def thumbnail_url(self) -> Optional[str]:
        return self.thumbnail_link


class MenuItem(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True)
    dish: str
    id: Optional[str] = None
    price: Optional[str] = None
    description: Optional[str] = None
    translations: Dict[str, Optional[str]] = Field(default_factory=dict)
    image: Optional[MenuImage] = None

    @model_validator(mode="before")
    @classmethod
    def _coerce_payload(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            return value
        data = dict(value)
        price = data.get("price")
        if isinstance(price, (int, float)) and not isinstance(price, bool):
            data["price"] = f"{price:g}" if isinstance(price, float) else str(price)
        if data.get("translations") is None:
            data["translations"] = {}
        identifier = data.get("id")
        if identifier is not None:
            data["id"] = str(identifier)
        return data

    @property
    def primary_url(self) -> Optional[str]:
        return self.image.primary_url if self.image else None

    @property
    def thumbnail_url(self) -> Optional[str]:
        return self.image.thumbnail_url if self.image else None


class ResultSet(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True)
    dishes_found: int = 0
    ocr_time: float = 0.0
    menu_with_images: List[MenuItem] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _default_items(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("menu_with_images") is None:
            data = dict(data)
            data["menu_with_images"] = []
        return data


class CreateResultsPayload(BaseModel):
    results: ResultSet
    language: Optional[str] = Field(default=None, description="Initial display language code")
    preview_image: Optional[str] = Field(default=None, description="Data URL or link to the uploaded menu photo")


class LanguagePayload(BaseModel):
    language: str


class ImageEventPayload(BaseModel):
    source: Literal["primary", "thumbnail"]
    outcome: Literal["load", "error"]


class LanguageOptionResponse(BaseModel):
    code: str
    name: str
    label: str


class ResultsSessionResponse(BaseModel):
    session_id: UUID
    view: Dict[str, Any]


class RedirectResponsePayload(BaseModel):
    redirect_url: str

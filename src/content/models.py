"""
Content tree input models.

The page is a hero block followed by an ordered list of sections. Each
section is one variant of a tagged union discriminated on ``type``:

- spotlight: a single media + text banner
- grid: display metadata plus an ordered list of products
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Annotated, Any, Literal, Optional, Union, get_args

from pydantic import (
    AliasChoices,
    BaseModel,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from ..errors import ValidationFailure


SectionType = Literal["spotlight", "grid"]
MediaType = Literal["image", "video"]

SECTION_TYPES: tuple[str, ...] = get_args(SectionType)

_CENTS = Decimal("0.01")
# Bounds of the DECIMAL(10, 2) price columns and 32-bit integer columns.
MAX_PRICE = Decimal("99999999.99")
MAX_INT = 2**31 - 1


def to_money(value: Any) -> Decimal:
    """Quantize a price to two fractional digits."""
    try:
        return Decimal(str(value)).quantize(_CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise ValueError(f"Price out of range: {value}") from exc


class HeroInput(BaseModel):
    title: str
    subtitle: str = ""

    @field_validator("subtitle", mode="before")
    @classmethod
    def _subtitle_default(cls, value: Any) -> Any:
        return "" if value is None else value


class SpotlightData(BaseModel):
    """Spotlight payload. ``image`` is the legacy spelling of ``media``."""
    title: str = ""
    subtext: str = ""
    mediaType: MediaType = "image"
    media: Optional[str] = None
    image: Optional[str] = None

    @field_validator("title", "subtext", mode="before")
    @classmethod
    def _text_default(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("mediaType", mode="before")
    @classmethod
    def _media_type_default(cls, value: Any) -> Any:
        return "image" if value in (None, "") else value


class ProductInput(BaseModel):
    name: str
    oldPrice: Decimal = Field(default=Decimal("0"), ge=0, le=MAX_PRICE)
    newPrice: Decimal = Field(default=Decimal("0"), ge=0, le=MAX_PRICE)
    image: str = ""
    link: str = "#"
    badge: str = ""
    strikeOldPrice: bool = True
    showOldPrice: bool = True

    @field_validator("oldPrice", "newPrice", mode="before")
    @classmethod
    def _price_default(cls, value: Any) -> Any:
        return Decimal("0") if value is None else value

    @field_validator("oldPrice", "newPrice")
    @classmethod
    def _quantize(cls, value: Decimal) -> Decimal:
        return to_money(value)

    @field_validator("image", "badge", mode="before")
    @classmethod
    def _text_default(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("link", mode="before")
    @classmethod
    def _link_default(cls, value: Any) -> Any:
        return "#" if value in (None, "") else value

    @field_validator("strikeOldPrice", "showOldPrice", mode="before")
    @classmethod
    def _flag_default(cls, value: Any) -> Any:
        return True if value is None else value


class GridMeta(BaseModel):
    title: str = ""
    gridColumns: int = Field(default=0, ge=0, le=MAX_INT)

    @field_validator("title", mode="before")
    @classmethod
    def _title_default(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("gridColumns", mode="before")
    @classmethod
    def _columns_default(cls, value: Any) -> Any:
        return 0 if value is None else value


class GridData(GridMeta):
    products: list[ProductInput] = Field(default_factory=list)

    @field_validator("products", mode="before")
    @classmethod
    def _products_default(cls, value: Any) -> Any:
        return [] if value is None else value


class SpotlightSectionInput(BaseModel):
    id: Optional[str] = None
    type: Literal["spotlight"]
    data: SpotlightData = Field(default_factory=SpotlightData)


class GridSectionInput(BaseModel):
    id: Optional[str] = None
    type: Literal["grid"]
    data: GridData = Field(default_factory=GridData)


SectionInput = Annotated[
    Union[SpotlightSectionInput, GridSectionInput],
    Field(discriminator="type"),
]


class ContentTreeInput(BaseModel):
    """A complete page snapshot as submitted by the admin console."""
    hero: HeroInput
    sections: list[SectionInput]

    @model_validator(mode="after")
    def _unique_section_ids(self) -> "ContentTreeInput":
        seen: set[str] = set()
        for section in self.sections:
            if not section.id:
                continue
            if section.id in seen:
                raise ValueError(f"Duplicate section id: {section.id}")
            seen.add(section.id)
        return self


class ReorderItem(BaseModel):
    id: str
    sortOrder: int = Field(
        ge=-MAX_INT - 1,
        le=MAX_INT,
        validation_alias=AliasChoices("sortOrder", "sort_order"),
    )


def validation_details(exc: Any) -> list[dict]:
    """Flatten pydantic (or FastAPI request) errors to ``{"loc", "msg"}`` pairs."""
    return [
        {
            "loc": ".".join(str(part) for part in error.get("loc", ())),
            "msg": error.get("msg", ""),
        }
        for error in exc.errors()
    ]


def parse_content_tree(payload: Any) -> ContentTreeInput:
    """
    Validate a raw save-all payload.

    Raises:
        ValidationFailure: payload is not an object, ``hero`` is missing,
            ``sections`` is not a list, or a section has no usable ``type``.
    """
    if isinstance(payload, ContentTreeInput):
        return payload
    if not isinstance(payload, dict):
        raise ValidationFailure("Content tree must be a JSON object")

    try:
        return ContentTreeInput.model_validate(payload)
    except ValidationError as exc:
        raise ValidationFailure(
            "Invalid content tree", details=validation_details(exc)
        ) from exc


def validate_input(model_cls: type[BaseModel], data: Any) -> Any:
    """Coerce ``data`` into ``model_cls`` or raise ValidationFailure."""
    if isinstance(data, model_cls):
        return data
    try:
        return model_cls.model_validate(data)
    except ValidationError as exc:
        raise ValidationFailure(
            f"Invalid {model_cls.__name__}", details=validation_details(exc)
        ) from exc

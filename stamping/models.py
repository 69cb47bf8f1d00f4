# stamping/models.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, NamedTuple

from stamping.errors import InvalidRequestError


class StampKind(Enum):
    TEXT = "TEXT"
    IMAGE = "IMAGE"
    MARKUP = "HTML"
    DOCUMENT = "PDF"

    @classmethod
    def parse(cls, value: "str | StampKind | None") -> "StampKind | None":
        if value is None or isinstance(value, StampKind):
            return value
        key = str(value).strip().upper()
        if not key:
            return None
        for kind in cls:
            if key in (kind.name, kind.value):
                return kind
        raise InvalidRequestError(f"Unknown stamp type: {value!r}")


class StampPosition(Enum):
    TOP_LEFT = "TOP_LEFT"
    TOP_RIGHT = "TOP_RIGHT"
    BOTTOM_LEFT = "BOTTOM_LEFT"
    BOTTOM_RIGHT = "BOTTOM_RIGHT"
    CENTER = "CENTER"
    CUSTOM = "CUSTOM"
    HEADER = "HEADER"
    FOOTER = "FOOTER"
    LEFT_MARGIN = "LEFT_MARGIN"
    RIGHT_MARGIN = "RIGHT_MARGIN"

    @classmethod
    def parse(cls, value: "str | StampPosition | None") -> "StampPosition":
        if isinstance(value, StampPosition):
            return value
        key = (value or "").strip().upper()
        if not key:
            return cls.CENTER
        try:
            return cls(key)
        except ValueError:
            raise InvalidRequestError(f"Unknown stamp position: {value!r}") from None


class Placement(NamedTuple):
    """Bottom-left corner of the content box in page coordinates."""

    x: float
    y: float


def _opt_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    return float(value)


def _float(value: Any, default: float) -> float:
    v = _opt_float(value)
    return default if v is None else v


@dataclass(frozen=True)
class StampSpec:
    """
    One stamp call's configuration. Defaults are applied here, once,
    and the invariants are checked on construction:
      - opacity in [0, 1]
      - scale > 0
      - CUSTOM position carries both x and y
    """
    kind: StampKind | None
    position: StampPosition = StampPosition.CENTER
    x: float | None = None
    y: float | None = None
    opacity: float = 1.0
    rotation: float = 0.0
    scale: float = 1.0
    pages: str = "ALL"

    # TEXT only
    text: str | None = None
    font_size: float = 14.0
    font_color: str = "#000000"

    # explicit content box (text wrap width, markup/document page size)
    content_width: float | None = None
    content_height: float | None = None

    def __post_init__(self) -> None:
        if not (0.0 <= self.opacity <= 1.0):
            raise InvalidRequestError(f"Opacity must be between 0.0 and 1.0, got {self.opacity}")
        if self.scale <= 0:
            raise InvalidRequestError(f"Scale must be greater than 0, got {self.scale}")
        if self.position is StampPosition.CUSTOM and (self.x is None or self.y is None):
            raise InvalidRequestError("CUSTOM position requires both x and y")

    @property
    def normalized_rotation(self) -> float:
        return self.rotation % 360

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StampSpec":
        """Build from the camelCase request keys used by the HTTP surface."""
        return cls(
            kind=StampKind.parse(data.get("stampType")),
            position=StampPosition.parse(data.get("position")),
            x=_opt_float(data.get("x")),
            y=_opt_float(data.get("y")),
            opacity=_float(data.get("opacity"), 1.0),
            rotation=_float(data.get("rotation"), 0.0),
            scale=_float(data.get("scale"), 1.0),
            pages=data.get("pages") or "ALL",
            text=data.get("text"),
            font_size=_float(data.get("fontSize"), 14.0),
            font_color=data.get("fontColor") or "#000000",
            content_width=_opt_float(data.get("stampWidth")),
            content_height=_opt_float(data.get("stampHeight")),
        )


@dataclass(frozen=True)
class CoverPageFields:
    logo_url: str | None = None
    logo_text: str | None = None
    article_title: str | None = None
    authors: str | None = None
    add_current_date: bool = False
    citation_text: str | None = None
    add_doi: bool = False
    doi: str | None = None
    additional_link: str | None = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CoverPageFields":
        return cls(
            logo_url=data.get("logoUrl"),
            logo_text=data.get("logoText"),
            article_title=data.get("articleTitle"),
            authors=data.get("authors"),
            add_current_date=bool(data.get("addCurrentDate", False)),
            citation_text=data.get("citationText"),
            add_doi=bool(data.get("addDoi", False)),
            doi=data.get("doi"),
            additional_link=data.get("additionalLink"),
        )


@dataclass(frozen=True)
class CompositeBlockConfig:
    """Options for the single combined stamp block (logo, text, markup, DOI, date, ad)."""
    strategy: str | None = None
    position: str = "CENTER"
    alignment: str | None = None
    add_logo: bool = False
    add_text: bool = False
    text_content: str | None = None
    add_html: bool = False
    html_content: str | None = None
    add_doi: bool = False
    doi_value: str | None = None
    add_date: bool = False
    is_ad: bool = False
    ad_link: str | None = None
    optional_text: str | None = None
    publisher_id: str | None = None
    jcode: str | None = None

    @property
    def is_new_page(self) -> bool:
        return (self.strategy or "").strip().lower() == "new_page"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CompositeBlockConfig":
        c = data.get("configuration") or {}
        return cls(
            strategy=data.get("strategy"),
            position=(c.get("position") or "CENTER").upper(),
            alignment=c.get("alignment"),
            add_logo=bool(c.get("addLogo", False)),
            add_text=bool(c.get("addText", False)),
            text_content=c.get("textContent"),
            add_html=bool(c.get("addHtml", False)),
            html_content=c.get("htmlContent"),
            add_doi=bool(c.get("addDoi", False)),
            doi_value=c.get("doiValue"),
            add_date=bool(c.get("addDate", False)),
            is_ad=bool(c.get("isAd", False)),
            ad_link=c.get("adLink"),
            optional_text=c.get("optionalText"),
            publisher_id=data.get("publisherId"),
            jcode=data.get("jcode"),
        )


@dataclass
class StampResult:
    success: bool
    message: str
    output_file_path: str | None = None
    file_size_bytes: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "message": self.message,
            "outputFilePath": self.output_file_path,
            "fileSizeBytes": self.file_size_bytes,
        }

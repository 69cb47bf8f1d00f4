# stamping/services/ad_models.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

# Ad feed JSON (camelCase keys; the feed spells the journal code "journlcode")


def _list(data: Dict[str, Any], key: str) -> List[Any]:
    value = data.get(key)
    return list(value) if isinstance(value, list) else []


@dataclass(frozen=True)
class AdData:
    ad_string: str | None = None
    ad_html: str | None = None
    ad_id: str | None = None
    ad_start_date: str | None = None
    ad_end_date: str | None = None
    ad_frequency: str | None = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AdData":
        return cls(
            ad_string=data.get("adString"),
            ad_html=data.get("adHtml"),
            ad_id=data.get("adId"),
            ad_start_date=data.get("adStartDate"),
            ad_end_date=data.get("adEndDate"),
            ad_frequency=data.get("adFrequency"),
        )


@dataclass(frozen=True)
class AdLocation:
    position_id: str | None = None
    position_name: str | None = None
    ad_data: List[AdData] = field(default_factory=list)

    def is_position(self, name: str) -> bool:
        return (self.position_name or "").strip().lower() == name

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AdLocation":
        return cls(
            position_id=data.get("positionId"),
            position_name=data.get("positionName"),
            ad_data=[AdData.from_dict(d) for d in _list(data, "adData") if isinstance(d, dict)],
        )


@dataclass(frozen=True)
class Section:
    section_id: str | None = None
    section_path: List[str] = field(default_factory=list)
    ad_location: List[AdLocation] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Section":
        return cls(
            section_id=data.get("sectionId"),
            section_path=[str(p) for p in _list(data, "sectionPath")],
            ad_location=[AdLocation.from_dict(d) for d in _list(data, "adLocation") if isinstance(d, dict)],
        )


@dataclass(frozen=True)
class AdResponse:
    publisher_id: str | None = None
    journal_code: str | None = None
    sections: List[Section] = field(default_factory=list)

    def locations(self) -> List[AdLocation]:
        """Every ad location, in feed order."""
        return [loc for section in self.sections for loc in section.ad_location]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AdResponse":
        return cls(
            publisher_id=data.get("publisherId"),
            journal_code=data.get("journlcode"),
            sections=[Section.from_dict(d) for d in _list(data, "section") if isinstance(d, dict)],
        )

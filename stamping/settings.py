# stamping/settings.py
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List

from dotenv import load_dotenv

# Local dev convenience: loads from .env if present.
load_dotenv()


@dataclass(frozen=True)
class Settings:
    ad_asset_base_url: str
    ad_fetch_timeout_seconds: float
    doi_resolver_base: str
    cors_origins: List[str]
    log_level: str
    output_root: str | None


def _split_csv(raw: str | None) -> List[str]:
    return [part.strip() for part in (raw or "").split(",") if part.strip()]


def load_settings() -> Settings:
    return Settings(
        ad_asset_base_url=os.getenv("AD_ASSET_BASE_URL") or "https://hwmaint.genome.cshlp.org/adsystem/",
        ad_fetch_timeout_seconds=float(os.getenv("AD_FETCH_TIMEOUT_SECONDS") or 10),
        doi_resolver_base=os.getenv("DOI_RESOLVER_BASE") or "https://doi.org/",
        cors_origins=_split_csv(os.getenv("CORS_ORIGINS")) or ["*"],
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        output_root=os.getenv("STAMP_OUTPUT_ROOT") or None,
    )


_settings_singleton: Settings | None = None


def get_settings() -> Settings:
    global _settings_singleton
    if _settings_singleton is None:
        _settings_singleton = load_settings()
    return _settings_singleton

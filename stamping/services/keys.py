# stamping/services/keys.py
from __future__ import annotations

from pathlib import PurePath


def stamped_filename(original: str | None) -> str:
    # report.pdf -> report_stamped.pdf
    name = (original or "").strip().replace("\n", " ").replace("\r", " ").replace('"', "")
    if not name:
        return "stamped.pdf"
    if name.lower().endswith(".pdf"):
        return name[:-4] + "_stamped.pdf"
    return name + "_stamped.pdf"


def stamped_filename_for_path(path: str | None) -> str:
    return stamped_filename(PurePath(path).name if path else None)

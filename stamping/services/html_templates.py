# stamping/services/html_templates.py
from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import List

from jinja2 import Environment, FileSystemLoader, select_autoescape

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"

_jinja = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=select_autoescape(["html", "xml"]),
)


def render_html(template_name: str, context: dict) -> str:
    tpl = _jinja.get_template(template_name)
    return tpl.render(**context)


def long_date(d: date) -> str:
    # e.g. "March 5, 2024"
    return f"{d:%B} {d.day}, {d.year}"


def text_lines(value: str | None) -> List[str]:
    """Lines of a free-text field, for <br/>-joined output; empty when blank."""
    if not value or not value.strip():
        return []
    return value.split("\n")


def doi_url(value: str | None, resolver_base: str) -> str | None:
    if not value or not value.strip():
        return None
    if value.startswith("http"):
        return value
    return resolver_base + value

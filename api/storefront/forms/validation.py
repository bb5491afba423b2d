"""Synchronous field checks for media forms."""

from __future__ import annotations

import math
import re
import typing

if typing.TYPE_CHECKING:  # pragma: no cover
    from storefront.forms.session import MediaForm

_MARKUP_RE = re.compile(r"<(.|\n)*?>")


def visible_text(markup: str | None) -> str:
    """Strip tags from rich-text HTML and trim surrounding whitespace."""
    if not markup:
        return ""
    return _MARKUP_RE.sub("", markup).strip()


def parse_price(value: str | float | int | None) -> float | None:
    """Return a positive finite price, or None when the value is not one."""
    if value is None or isinstance(value, bool):
        return None
    text = str(value).strip()
    if not text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    if not math.isfinite(number) or number <= 0:
        return None
    return number


def validate(form: "MediaForm") -> dict[str, str]:
    """Return a field-name to message map; an empty map means the form may be submitted."""
    schema = form.schema
    errors: dict[str, str] = {}
    if not form.title.strip():
        errors["title"] = "Title is required."
    if schema.category_required and not (form.category or "").strip():
        errors["category"] = "Category is required."
    if schema.has_service_terms:
        if parse_price(form.price) is None:
            errors["price"] = "Enter a valid price."
        if not (form.concepts_and_revisions or "").strip():
            errors["concepts_and_revisions"] = "Concepts and revisions info is required."
        if not (form.project_duration or "").strip():
            errors["project_duration"] = "Project duration is required."
    minimum = schema.description_min_length
    if len(visible_text(form.description)) < minimum:
        errors["description"] = f"Description must be at least {minimum} characters."
    if not form.is_edit and not form.media.media:
        if schema.multi_media:
            errors["media"] = "At least one image is required."
        else:
            errors["media"] = "Image is required."
    return errors

"""Query-string options and their flattening."""
from __future__ import annotations

import dataclasses
import datetime as _dt
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .errors import InvalidInputError


def url_field(
    name: str,
    *,
    omitempty: bool = True,
    comma: bool = False,
    default: Any = None,
) -> Any:
    """Declare a dataclass field that is sent as the query parameter ``name``.

    Example:
        >>> @dataclass
        ... class MyOptions:
        ...     ids: list = url_field("ids", comma=True)
    """
    tag = name
    if omitempty:
        tag += ",omitempty"
    if comma:
        tag += ",comma"
    return dataclasses.field(default=default, metadata={"url": tag})


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, _dt.datetime):
        text = value.isoformat()
        if value.utcoffset() == _dt.timedelta(0):
            text = text[: -len("+00:00")] + "Z"
        return text
    if isinstance(value, _dt.date):
        return value.isoformat()
    return str(value)


def _is_empty(value: Any) -> bool:
    if value is None or value is False:
        return True
    if isinstance(value, (str, bytes, list, tuple, set, dict)):
        return len(value) == 0
    if isinstance(value, (int, float)):
        return value == 0
    return False


def _parse_tag(tag: str) -> tuple[str, set[str]]:
    name, *flags = tag.split(",")
    return name, set(flags)


def flatten_options(options: Any) -> list[tuple[str, str]]:
    """Flatten ``options`` into ``(key, value)`` query pairs.

    ``options`` is a mapping or a dataclass instance whose fields may carry
    ``url`` metadata (see :func:`url_field`).

    Raises:
        InvalidInputError: If ``options`` is neither a mapping nor a dataclass.
    """
    pairs: list[tuple[str, str]] = []

    if isinstance(options, Mapping):
        for key, value in options.items():
            if value is None:
                continue
            if isinstance(value, (list, tuple, set)):
                pairs.append((str(key), ",".join(_format_value(v) for v in value)))
            else:
                pairs.append((str(key), _format_value(value)))
        return pairs

    if not dataclasses.is_dataclass(options) or isinstance(options, type):
        raise InvalidInputError(
            f"options expects a mapping or dataclass instance, got {type(options).__name__}"
        )

    for f in dataclasses.fields(options):
        name, flags = _parse_tag(f.metadata.get("url", f.name))
        if name == "-":
            continue
        value = getattr(options, f.name)
        if "omitempty" in flags and _is_empty(value):
            continue
        if value is None:
            pairs.append((name, ""))
        elif isinstance(value, (list, tuple, set)):
            if "comma" in flags:
                pairs.append((name, ",".join(_format_value(v) for v in value)))
            else:
                pairs.extend((name, _format_value(v)) for v in value)
        else:
            pairs.append((name, _format_value(value)))
    return pairs


@dataclass
class ListOptions:
    """General list options that can be used for most collections of entities.

    ``page_info`` drives cursor pagination; ``page`` is the deprecated
    page-number form.
    """

    page_info: Optional[str] = url_field("page_info")
    page: Optional[int] = url_field("page")
    limit: Optional[int] = url_field("limit")
    since_id: Optional[int] = url_field("since_id")
    created_at_min: Optional[_dt.datetime] = url_field("created_at_min")
    created_at_max: Optional[_dt.datetime] = url_field("created_at_max")
    updated_at_min: Optional[_dt.datetime] = url_field("updated_at_min")
    updated_at_max: Optional[_dt.datetime] = url_field("updated_at_max")
    order: Optional[str] = url_field("order")
    fields: Optional[str] = url_field("fields")
    vendor: Optional[str] = url_field("vendor")
    ids: Optional[list[int]] = url_field("ids", comma=True)


@dataclass
class CountOptions:
    """General count options that can be used for most collection counts."""

    created_at_min: Optional[_dt.datetime] = url_field("created_at_min")
    created_at_max: Optional[_dt.datetime] = url_field("created_at_max")
    updated_at_min: Optional[_dt.datetime] = url_field("updated_at_min")
    updated_at_max: Optional[_dt.datetime] = url_field("updated_at_max")

"""Option descriptors — the field table behind query and multipart encoding.

Every options model declares, per field, how the value travels on the wire:

* ``scalar``: rendered as text (the default);
* ``json``: JSON-encoded into a single text value (keyboards, entity lists);
* ``nested``: another options model whose fields are spliced into the parent;
* ``file``: an :class:`~botwire.files.InputFile` (a multipart part when local,
  its URL or ``file_id`` otherwise).

The table for a model class is read from its pydantic field declarations once
and cached, so encoding never has to guess a field's kind from its value.
"""

from __future__ import annotations

import enum
import functools
import math
from decimal import Decimal
from typing import Any, Iterable, Iterator, List, Mapping, Optional, Tuple

from pydantic import BaseModel, Field
from pydantic_core import to_json

from botwire.exceptions import EncodingError, InvalidArgumentError
from botwire.files import InputFile, RemoteFile


class FieldKind(str, enum.Enum):
    """Wire encoding of one options field."""

    SCALAR = "scalar"
    JSON = "json"
    NESTED = "nested"
    FILE = "file"


_KIND_KEY = "wire_kind"
_KEEP_ZERO_KEY = "keep_zero"


def scalar_field(default: Any = None, *, keep_zero: bool = False, **kwargs: Any) -> Any:
    """Declare a scalar field. *keep_zero* emits ``0`` instead of omitting it."""
    return Field(default, json_schema_extra={_KIND_KEY: FieldKind.SCALAR.value, _KEEP_ZERO_KEY: keep_zero}, **kwargs)


def json_field(default: Any = None, **kwargs: Any) -> Any:
    """Declare a field that is JSON-encoded into one value."""
    return Field(default, json_schema_extra={_KIND_KEY: FieldKind.JSON.value}, **kwargs)


def nested_field(default: Any = None, **kwargs: Any) -> Any:
    """Declare a field holding options that are flattened into the parent."""
    return Field(default, json_schema_extra={_KIND_KEY: FieldKind.NESTED.value}, **kwargs)


def file_field(default: Any = None, **kwargs: Any) -> Any:
    """Declare a field holding an :class:`~botwire.files.InputFile`."""
    return Field(default, json_schema_extra={_KIND_KEY: FieldKind.FILE.value}, **kwargs)


class FieldSpec(BaseModel):
    """One row of an options class's field table."""

    attr: str
    name: str
    kind: FieldKind
    default: Any = None
    keep_zero: bool = False

    model_config = {"frozen": True}


class OptionDescriptor(BaseModel):
    """A field of one options value, ready for encoding."""

    name: str
    kind: FieldKind
    present: bool
    value: Any = None

    model_config = {"frozen": True, "arbitrary_types_allowed": True}


@functools.lru_cache(maxsize=None)
def field_table(cls: type) -> Tuple[FieldSpec, ...]:
    """Return the cached field table of an options class, in declaration order."""
    specs = []
    for attr, info in cls.model_fields.items():
        extra = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else {}
        specs.append(
            FieldSpec(
                attr=attr,
                name=info.alias or attr,
                kind=FieldKind(extra.get(_KIND_KEY, FieldKind.SCALAR.value)),
                default=None if info.is_required() else info.default,
                keep_zero=bool(extra.get(_KEEP_ZERO_KEY, False)),
            )
        )
    return tuple(specs)


class Options(BaseModel):
    """Base class of every per-call options record.

    Fields left at their zero/default value are never sent.
    """

    model_config = {"populate_by_name": True, "arbitrary_types_allowed": True}

    def descriptors(self) -> List[OptionDescriptor]:
        """Describe every declared field, present or not."""
        result = []
        for spec in field_table(type(self)):
            value = getattr(self, spec.attr)
            result.append(
                OptionDescriptor(
                    name=spec.name,
                    kind=spec.kind,
                    present=not is_omitted(value, spec.default, spec.keep_zero),
                    value=value,
                )
            )
        return result


def is_omitted(value: Any, default: Any = None, keep_zero: bool = False) -> bool:
    """Return True when *value* is at its zero/default state and must not be sent."""
    if value is None:
        return True
    if isinstance(value, Options):
        return False
    if isinstance(value, InputFile):
        return value.is_empty
    if isinstance(value, bool):
        # a field documented as defaulting to True is only worth sending as false
        return value is bool(default)
    if isinstance(value, (int, float)):
        return value == 0 and not keep_zero
    if isinstance(value, (str, bytes, list, tuple, dict)):
        return len(value) == 0
    return False


def _kind_of(value: Any) -> FieldKind:
    if isinstance(value, Options):
        return FieldKind.NESTED
    if isinstance(value, InputFile):
        return FieldKind.FILE
    if isinstance(value, (BaseModel, list, tuple, dict)):
        return FieldKind.JSON
    return FieldKind.SCALAR


def flatten(descriptors: Iterable[OptionDescriptor]) -> Iterator[OptionDescriptor]:
    """Yield the present descriptors, splicing nested options in place."""
    for descriptor in descriptors:
        if not descriptor.present:
            continue
        if descriptor.kind is FieldKind.NESTED:
            yield from flatten(descriptor.value.descriptors())
        else:
            yield descriptor


def describe(options: Optional[Options]) -> List[OptionDescriptor]:
    """Flat list of the fields *options* actually sends."""
    if options is None:
        return []
    return list(flatten(options.descriptors()))


def describe_params(params: Mapping[str, Any]) -> List[OptionDescriptor]:
    """Describe positional call parameters. Everything but ``None`` is sent."""
    descriptors = [
        OptionDescriptor(name=name, kind=_kind_of(value), present=True, value=value)
        for name, value in params.items()
        if value is not None
    ]
    return list(flatten(descriptors))


def encode_json(value: Any) -> str:
    """Compact JSON for a structured value, ``None`` members dropped."""
    try:
        return to_json(value, exclude_none=True).decode("utf-8")
    except (ValueError, TypeError) as exc:
        raise EncodingError(f"cannot JSON-encode {type(value).__name__}: {exc}") from exc


def format_scalar(value: Any) -> str:
    """Locale-independent text for a scalar value."""
    if isinstance(value, enum.Enum):
        value = value.value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise EncodingError(f"cannot encode non-finite float {value!r}")
        return format(Decimal(repr(value)), "f")
    if isinstance(value, str):
        return value
    if isinstance(value, (BaseModel, list, tuple, dict)):
        return encode_json(value)
    raise EncodingError(f"cannot encode value of type {type(value).__name__}")


def render_value(descriptor: OptionDescriptor) -> str:
    """Text form of a non-nested descriptor's value."""
    if descriptor.kind is FieldKind.JSON:
        return encode_json(descriptor.value)
    if descriptor.kind is FieldKind.FILE:
        if isinstance(descriptor.value, RemoteFile):
            return descriptor.value.ref
        raise InvalidArgumentError(f"{descriptor.name}: a local file can only be sent in a multipart body")
    return format_scalar(descriptor.value)

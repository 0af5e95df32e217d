"""Query serializer — options and call parameters to URL query strings."""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple
from urllib.parse import urlencode

from botwire.descriptors import OptionDescriptor, Options, describe, describe_params, flatten, render_value


def pairs(descriptors: Iterable[OptionDescriptor]) -> List[Tuple[str, str]]:
    """Render the present descriptors as ``(name, text)`` pairs, in order."""
    return [(descriptor.name, render_value(descriptor)) for descriptor in flatten(descriptors)]


def encode(descriptors: Iterable[OptionDescriptor]) -> str:
    """Percent-encode descriptors as ``key=value&...``."""
    return urlencode(pairs(descriptors))


def serialize(options: Optional[Options]) -> str:
    """Serialize *options* into ``key=value&...``; ``None`` yields ``""``.

    Fields are emitted in declaration order and only when set. Nested options
    are flattened into the same level; structured fields are JSON-encoded.

    Raises:
        EncodingError: A structured field cannot be JSON-encoded.
        InvalidArgumentError: A file field holds a local file.
    """
    return encode(describe(options))


def serialize_params(params: Mapping[str, Any]) -> str:
    """Serialize positional call parameters with the same value rules."""
    return encode(describe_params(params))


def join(*queries: str) -> str:
    """Join query fragments with ``&``, skipping empty ones."""
    return "&".join(query for query in queries if query)


def form_fields(descriptors: Iterable[OptionDescriptor]) -> Dict[str, str]:
    """Render descriptors as a field mapping for a form-encoded POST."""
    return dict(pairs(descriptors))

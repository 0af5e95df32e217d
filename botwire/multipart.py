"""Multipart composer for calls that upload files.

A call goes multipart only when at least one of its file references is local.
Local files become file parts named after their slot (``photo``, ``thumb``);
remote references and every other present field become text parts.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Tuple, Union

from pydantic import BaseModel

from botwire.descriptors import FieldKind, OptionDescriptor, flatten, render_value
from botwire.exceptions import InvalidArgumentError
from botwire.files import InputFile, LocalFile, RemoteFile

logger = logging.getLogger("botwire.multipart")


class MultipartPart(BaseModel):
    """One named part of a multipart body. ``filename`` is set for file parts only."""

    name: str
    content: Union[bytes, str]
    filename: Optional[str] = None

    model_config = {"frozen": True}

    @property
    def is_file(self) -> bool:
        return self.filename is not None


class MultipartBody(BaseModel):
    """An ordered list of parts with unique names."""

    parts: List[MultipartPart] = []

    @property
    def names(self) -> List[str]:
        return [part.name for part in self.parts]

    def get(self, name: str) -> Optional[MultipartPart]:
        for part in self.parts:
            if part.name == name:
                return part
        return None

    def to_files(self) -> List[Tuple[str, Tuple[Optional[str], Union[bytes, str]]]]:
        """Render the parts as the ``files=`` argument of :mod:`requests`.

        A ``None`` filename makes :mod:`requests` emit a plain form field.
        """
        return [(part.name, (part.filename, part.content)) for part in self.parts]


def requires_multipart(*refs: Optional[InputFile]) -> bool:
    """Return True iff at least one reference is a non-empty local file."""
    return any(isinstance(ref, LocalFile) and not ref.is_empty for ref in refs)


def file_part(name: str, ref: InputFile) -> MultipartPart:
    """Part for a file slot: a file part when local, a text part when remote."""
    if isinstance(ref, LocalFile):
        return MultipartPart(name=name, content=ref.content, filename=ref.filename)
    if isinstance(ref, RemoteFile):
        return MultipartPart(name=name, content=ref.ref)
    raise InvalidArgumentError(f"{name}: unsupported file reference {type(ref).__name__}")


def field_parts(fields: Iterable[OptionDescriptor]) -> List[MultipartPart]:
    """Text parts (or file parts, for ``file`` fields) for every present field."""
    parts = []
    for descriptor in flatten(fields):
        if descriptor.kind is FieldKind.FILE:
            parts.append(file_part(descriptor.name, descriptor.value))
        else:
            parts.append(MultipartPart(name=descriptor.name, content=render_value(descriptor)))
    return parts


def assemble(parts: Iterable[MultipartPart]) -> MultipartBody:
    """Build a body, rejecting duplicate part names."""
    body = MultipartBody(parts=list(parts))
    seen = set()
    for name in body.names:
        if name in seen:
            raise InvalidArgumentError(f"duplicate multipart part {name!r}")
        seen.add(name)
    return body


def compose(
    name: str,
    primary: Optional[InputFile],
    auxiliary: Optional[Dict[str, Optional[InputFile]]] = None,
    fields: Iterable[OptionDescriptor] = (),
) -> MultipartBody:
    """Compose the body of an upload call.

    Args:
        name: Slot of the primary file (``"photo"``, ``"document"``, ...).
        primary: The file the call is about.
        auxiliary: Further file slots such as ``{"thumb": ...}``; ``None`` or
            empty references are skipped.
        fields: Descriptors of the remaining parameters; absent ones are dropped.

    Raises:
        InvalidArgumentError: *primary* is missing or empty, or two parts
            would share a name.
    """
    if primary is None or primary.is_empty:
        raise InvalidArgumentError(f"{name}: a file is required")

    parts = [file_part(name, primary)]
    for slot, ref in (auxiliary or {}).items():
        if ref is None or ref.is_empty:
            continue
        parts.append(file_part(slot, ref))
    parts.extend(field_parts(fields))

    body = assemble(parts)
    logger.debug(
        "Multipart body composed",
        extra={"slot": name, "part_count": len(body.parts), "file_parts": sum(part.is_file for part in body.parts)},
    )
    return body

"""File references for uploads.

An :class:`InputFile` is either a :class:`LocalFile` (raw bytes that travel
inside a multipart body) or a :class:`RemoteFile` (a URL or a ``file_id``
the platform already knows). ``None`` in an options field means the file is
absent, which is distinct from both variants.
"""

from __future__ import annotations

import os
from typing import Union

from pydantic import BaseModel


class InputFile(BaseModel):
    """Base of the two file reference variants. Use the ``from_*`` constructors."""

    model_config = {"frozen": True}

    @property
    def is_local(self) -> bool:
        return isinstance(self, LocalFile)

    @property
    def is_empty(self) -> bool:
        # a bare reference carries nothing and counts as absent
        return True

    @classmethod
    def from_path(cls, path: Union[str, os.PathLike]) -> "LocalFile":
        """Read *path* fully into memory and name the upload after its basename."""
        with open(path, "rb") as fh:
            content = fh.read()
        return LocalFile(content=content, filename=os.path.basename(os.fspath(path)))

    @classmethod
    def from_bytes(cls, content: bytes, filename: str = "file") -> "LocalFile":
        return LocalFile(content=content, filename=filename)

    @classmethod
    def from_id(cls, file_id: str) -> "RemoteFile":
        """Reference a file previously uploaded to the platform."""
        return RemoteFile(ref=file_id)

    @classmethod
    def from_url(cls, url: str) -> "RemoteFile":
        """Let the platform fetch the file from *url*."""
        return RemoteFile(ref=url)


class LocalFile(InputFile):
    """File content uploaded as a multipart part."""

    content: bytes
    filename: str = "file"

    @property
    def is_empty(self) -> bool:
        return not self.content


class RemoteFile(InputFile):
    """A URL or ``file_id``, sent as a plain string field."""

    ref: str

    @property
    def is_empty(self) -> bool:
        return not self.ref

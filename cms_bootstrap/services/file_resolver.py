from __future__ import annotations

import mimetypes
import os
from pathlib import Path

from cms_bootstrap.schemas.seed import FileDescriptor

DEFAULT_MIME = "application/octet-stream"


def get_file_data(file_name: str, upload_dir: str | Path) -> FileDescriptor:
    """Describe a seed upload by name. Raises FileNotFoundError if it is missing.

    The MIME type comes from the extension alone; contents are never read.
    """
    file_path = Path(upload_dir) / file_name
    size = os.stat(file_path).st_size
    mime_type, _ = mimetypes.guess_type(file_name, strict=True)
    return FileDescriptor(
        path=str(file_path),
        name=file_name,
        size=size,
        type=mime_type or DEFAULT_MIME,
    )

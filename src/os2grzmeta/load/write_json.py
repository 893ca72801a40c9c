"""
Write the metadata template as indented JSON.
- camelCase keys as in the GRZ schema, unset fields as null.
- The target file is replaced atomically; a failed write leaves no partial file behind.
"""

from __future__ import annotations
import logging
import os
import tempfile
from pathlib import Path
from pydantic_core import PydanticSerializationError
from os2grzmeta.core.errors import OutputError
from os2grzmeta.models.metadata import Metadata

log = logging.getLogger(__name__)

def to_json(metadata: Metadata) -> str:
    try:
        return metadata.model_dump_json(by_alias=True, indent=2)
    except PydanticSerializationError as e:
        raise OutputError(f"Cannot serialize metadata: {e}") from e

def write_metadata(metadata: Metadata, filename: str | Path) -> Path:
    target = Path(filename)
    payload = to_json(metadata)

    tmp_name = None
    try:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=target.parent)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload)
            f.write("\n")
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, target)
    except OSError as e:
        if tmp_name and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        log.error("Cannot write %s: %s", target, e, exc_info=True)
        raise OutputError(f"Cannot write {target}: {e}") from e

    log.info("Saved metadata template: %s", target)
    return target

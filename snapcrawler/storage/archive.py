"""
Zip packaging of previously captured artifacts for bulk download.
Missing or unreadable objects are skipped; an archive is always produced.
"""

import io
import re
import zipfile
from typing import Iterable

from snapcrawler.core import MAX_ARCHIVE_FILES, logger
from snapcrawler.errors import StorageFailure
from snapcrawler.models import ArtifactKind
from snapcrawler.storage.blob_store import BlobStore

# Names as produced by naming.artifact_key, last segment only
_SAFE_NAME = re.compile(r"^[^/\\\x00-\x1f]+$")


def is_safe_name(name: str, kind: ArtifactKind) -> bool:
    return (
        isinstance(name, str)
        and bool(_SAFE_NAME.match(name))
        and ".." not in name
        and name.endswith(f".{kind.extension}")
    )


def build_archive(store: BlobStore, kind: ArtifactKind, names: Iterable[str]) -> bytes:
    buffer = io.BytesIO()
    added = 0
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for name in list(names)[:MAX_ARCHIVE_FILES]:
            if not is_safe_name(name, kind):
                logger.warning(f"[ARCHIVE] skipped unsafe name {name!r}", extra={'context': 'archive'})
                continue
            key = f"{kind.prefix}/{name}"
            try:
                data = store.get(key)
            except StorageFailure as e:
                logger.warning(f"[ARCHIVE] skipped {key}: {e}", extra={'context': 'archive'})
                continue
            if data is None:
                logger.warning(f"[ARCHIVE] skipped missing {key}", extra={'context': 'archive'})
                continue
            archive.writestr(name, data)
            added += 1
    logger.info(f"[ARCHIVE] packaged {added} {kind.prefix} file(s)", extra={'context': 'archive'})
    return buffer.getvalue()

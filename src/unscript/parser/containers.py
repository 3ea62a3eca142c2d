"""Zip container access for Highland and Fade In documents."""

from __future__ import annotations

import re
import zipfile
from io import BytesIO

from unscript.config import get_logger
from unscript.exceptions import MalformedContainerError

logger = get_logger(__name__)


def unpack(data: bytes, pattern: str, source: str = "archive") -> bytes:
    """Return the first archive member whose name matches a pattern.

    Args:
        data: Raw zip bytes
        pattern: Regular expression searched in each member name
        source: Name used in error messages

    Returns:
        Uncompressed member bytes

    Raises:
        MalformedContainerError: If the data is not a zip archive or no
            member matches
    """
    matcher = re.compile(pattern)
    try:
        with zipfile.ZipFile(BytesIO(data)) as archive:
            names = archive.namelist()
            for name in names:
                if matcher.search(name):
                    logger.debug("Unpacking archive member", source=source, member=name)
                    return archive.read(name)
    except zipfile.BadZipFile as e:
        raise MalformedContainerError(
            message=f"Not a valid zip archive: {source}",
            hint="Highland and Fade In documents are zip files; re-export it.",
            details={"source": source, "expected_member": pattern},
        ) from e

    raise MalformedContainerError(
        message=f"Archive has no member matching '{pattern}': {source}",
        details={"source": source, "expected_member": pattern, "members": names},
    )

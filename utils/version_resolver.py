#!/usr/bin/env python3
"""Extract the release version from a Maven-style project manifest.

The version is read from the ``<version>`` element that follows the
project's own ``<artifactId>`` line, so that a ``<parent>`` or dependency
version appearing earlier in the file is never picked up.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from configs.config import Config

logger = logging.getLogger(__name__)

_VERSION_RE = re.compile(r"<version>(.*?)</version>")


class VersionNotFound(Exception):
    """Raised when the manifest has no usable identifier/version pair."""
    def __init__(self, message: str, code: str = "UNKNOWN") -> None:
        super().__init__(message)
        self.code = code


def identifier_marker(artifact_id: str) -> str:
    return f"<artifactId>{artifact_id}</artifactId>"


def resolve_version(manifest_text: str, artifact_id: Optional[str] = None, lookahead: Optional[int] = None) -> str:
    """Return the version declared next to ``artifact_id`` in ``manifest_text``.

    Args:
        manifest_text: Full manifest contents
        artifact_id: Project identifier to anchor on (defaults to Config.ARTIFACT_ID)
        lookahead: Lines after the identifier line to search (defaults to
            Config.VERSION_LOOKAHEAD_LINES); the identifier line itself is
            always searched

    Returns:
        The declared version, whitespace-stripped

    Raises:
        VersionNotFound: If the identifier marker is absent, no version marker
            follows within the window, or the declared version is empty
    """
    manifest_config = Config.get_manifest_config()
    artifact_id = artifact_id or manifest_config["artifact_id"]
    if lookahead is None:
        lookahead = manifest_config["lookahead"]
    marker = identifier_marker(artifact_id)

    lines = (manifest_text or "").splitlines()
    start = next((i for i, line in enumerate(lines) if marker in line), None)
    if start is None:
        raise VersionNotFound(f"Could not find {marker} in manifest", code="IDENTIFIER_MISSING")

    # The version must come after the marker when both share a line.
    window = [lines[start].split(marker, 1)[1]] + lines[start + 1:start + 1 + max(lookahead, 0)]
    for line in window:
        match = _VERSION_RE.search(line)
        if match is None:
            continue
        version = match.group(1).strip()
        if not version:
            raise VersionNotFound(f"Empty <version> following {marker} in manifest", code="VERSION_EMPTY")
        logger.debug(f"Resolved version {version} for {artifact_id}")
        return version

    raise VersionNotFound(
        f"Could not find <version> within {lookahead} line(s) after {marker} in manifest",
        code="VERSION_MISSING",
    )

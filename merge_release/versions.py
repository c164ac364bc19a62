"""Version parsing and bumping utilities.

Release tags are named {repo}-{major}.{minor}.{patch}. Only suffixes made of
exactly three numerals count as versions; anything else restarts at 1.0.0.
"""

from __future__ import annotations

import re

import semver

DEFAULT_VERSION = "1.0.0"

_VERSION_RE = re.compile(r"^(\d+)\.(\d+)\.(\d+)$")


def parse_version(version_str: str) -> semver.Version | None:
    """Parse a strict major.minor.patch string, or return None.

    Leading zeros are tolerated ("01.2.3" → 1.2.3); prerelease and build
    metadata are not.
    """
    m = _VERSION_RE.match(version_str)
    if m is None:
        return None
    major, minor, patch = (int(part) for part in m.groups())
    return semver.Version(major, minor, patch)


def tag_suffix(tag: str, repo: str) -> str:
    """Strip the "{repo}-" prefix from a tag name."""
    prefix = f"{repo}-"
    return tag[len(prefix) :] if tag.startswith(prefix) else tag


def propose_version(last_tag: str | None, repo: str) -> str:
    """Propose the next version from the most recent release tag.

    Examples:
        None → "1.0.0"
        "widget-2.3.1" → "2.3.2"
        "widget-beta" → "1.0.0"
    """
    if not last_tag:
        return DEFAULT_VERSION
    version = parse_version(tag_suffix(last_tag, repo))
    if version is None:
        return DEFAULT_VERSION
    return str(version.bump_patch())


def tag_name(repo: str, version: str) -> str:
    return f"{repo}-{version}"

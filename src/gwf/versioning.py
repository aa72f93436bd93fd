"""Semantic version parsing and bumping."""

import re
from typing import Iterable, NamedTuple, Optional

BUMP_KEYWORDS = ("major", "minor", "patch")

_IDENTIFIERS = r"[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*"
_VERSION_RE = re.compile(
    rf"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)(?:-{_IDENTIFIERS})?(?:\+{_IDENTIFIERS})?$"
)


class Version(NamedTuple):
    """A ``major.minor.patch`` version, ordered numerically."""

    major: int
    minor: int
    patch: int

    @classmethod
    def parse(cls, text: str) -> "Version":
        """Parse ``1.2.3`` or ``v1.2.3``.

        A pre-release or build suffix (``-rc.1``, ``+build.5``) is accepted and
        dropped; only the numeric core is kept.

        Raises:
            ValueError: If the text is not a three-component version
        """
        candidate = text.strip()
        if candidate.startswith("v"):
            candidate = candidate[1:]
        match = _VERSION_RE.match(candidate)
        if not match:
            raise ValueError(f"Not a semantic version: {text!r}")
        return cls(*(int(part) for part in match.groups()))

    def bump(self, part: str) -> "Version":
        """Increment ``part`` and zero every lower component."""
        if part == "major":
            return Version(self.major + 1, 0, 0)
        if part == "minor":
            return Version(self.major, self.minor + 1, 0)
        if part == "patch":
            return Version(self.major, self.minor, self.patch + 1)
        raise ValueError(f"Unknown version component: {part!r}")

    @property
    def tag(self) -> str:
        return f"v{self}"

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


def parse_version(text: str) -> Optional[Version]:
    """Like ``Version.parse`` but returns None for anything unparseable."""
    try:
        return Version.parse(text)
    except ValueError:
        return None


def latest_version(tags: Iterable[str]) -> Optional[Version]:
    """Return the highest version among ``tags``, ignoring non-version tags."""
    versions = [version for version in map(parse_version, tags) if version is not None]
    return max(versions, default=None)

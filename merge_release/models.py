"""Data models for merge-release.

These Pydantic models carry the run's inputs and the resolved release
between the pipeline phases.
"""

from __future__ import annotations

from pydantic import BaseModel

from .versions import tag_name


class ReleaseOptions(BaseModel):
    """Inputs collected from the command line.

    Attributes:
        dry_run: Print mutating git commands instead of running them.
        yes: Auto-confirm prompts (accept the proposed version, overwrite
             an existing tag).
        tag_version: Version supplied up front; skips the version prompt.
        remote: Remote to fetch from and push to.
    """

    dry_run: bool = False
    yes: bool = False
    tag_version: str | None = None
    remote: str = "origin"


class ReleasePlan(BaseModel):
    """A resolved release: what gets merged where, and how it is tagged.

    Attributes:
        repo: Base name of the working copy's top-level directory.
        source: Branch being merged (the branch checked out at start).
        target: Branch receiving the merge.
        last_tag: Most recent {repo}-* tag, or None for a first release.
        version: Version chosen for this release.
    """

    repo: str
    source: str
    target: str
    last_tag: str | None = None
    version: str

    @property
    def tag(self) -> str:
        return tag_name(self.repo, self.version)

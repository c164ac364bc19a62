"""Release pipeline: resolve → checkout → version → merge → tag → push.

This module orchestrates one merge-release run:
1. Read the current (source) branch and the working copy's root
2. Fetch and resolve the target branch
3. Check out the target branch, fast-forwarding it from the remote
4. Propose the next version from the latest {repo}-X.Y.Z tag
5. Merge the source branch with --no-ff
6. Create (or, when confirmed, move) the annotated release tag and push it
7. Push the target branch

Nothing is rolled back: if a later step fails, the merge commit stays and
the operator finishes by hand.
"""

from __future__ import annotations

from pathlib import Path

import click

from .branches import current_branch, materialize_target, resolve_target
from .models import ReleaseOptions, ReleasePlan
from .shell import Executor, fatal, git, git_ok, step
from .versions import propose_version


def find_toplevel() -> Path:
    """Return the top-level directory of the working copy."""
    root = git("rev-parse", "--show-toplevel", check=False)
    if not root:
        fatal("Not inside a git working copy")
    return Path(root)


def find_last_tag(repo: str) -> str | None:
    """Find the highest {repo}-* tag by version sort, or None."""
    tags = git("tag", "--list", f"{repo}-*", "--sort=-v:refname", check=False)
    return tags.splitlines()[0] if tags else None


def choose_version(proposed: str, options: ReleaseOptions) -> str:
    """Pick the release version: pre-supplied, auto-confirmed, or prompted."""
    supplied = (options.tag_version or "").strip()
    if supplied:
        return supplied
    if options.yes:
        return proposed
    answer = click.prompt("Version?", default=proposed).strip()
    return answer or proposed


def negotiate_version(
    repo: str, source: str, target: str, options: ReleaseOptions
) -> ReleasePlan:
    step("Choosing release version")

    last_tag = find_last_tag(repo)
    print(f"  Last tag: {last_tag or '<none>'}")
    proposed = propose_version(last_tag, repo)
    plan = ReleasePlan(
        repo=repo,
        source=source,
        target=target,
        last_tag=last_tag,
        version=choose_version(proposed, options),
    )
    print(f"  Tag: {plan.tag}")
    return plan


def merge(plan: ReleasePlan, execute: Executor) -> None:
    """Merge the source branch into the checked-out target with --no-ff."""
    step(f"Merging {plan.source} into {plan.target}")

    if not execute("merge", "--no-ff", "--no-edit", plan.source):
        fatal(f"Merging {plan.source} into {plan.target} failed; resolve it by hand")


def tag_exists(tag: str, remote: str) -> bool:
    """Check for the tag locally, then on the remote."""
    if git_ok("rev-parse", "-q", "--verify", f"refs/tags/{tag}"):
        return True
    return bool(git("ls-remote", "--tags", remote, f"refs/tags/{tag}", check=False))


def apply_tag(
    plan: ReleasePlan, remote: str, options: ReleaseOptions, execute: Executor
) -> bool:
    """Tag the merge commit and push the tag.

    An existing tag is only moved with --yes or after confirmation.

    Returns:
        True if the tag was created or moved, False if it was left alone.
    """
    tag = plan.tag
    step(f"Tagging {tag}")

    if tag_exists(tag, remote):
        if not options.yes and not click.confirm(
            f"Tag {tag} already exists. Move it to the new merge commit?",
            default=False,
        ):
            print(f"  Skipped: {tag} left unchanged")
            return False
        if not execute("tag", "-f", "-a", tag, "-m", ""):
            fatal(f"Could not move tag {tag}")
        if not execute("push", "--force", remote, f"refs/tags/{tag}"):
            fatal(f"Could not force-push tag {tag} to {remote}")
        print(f"  Moved {tag}")
        return True

    if not execute("tag", "-a", tag, "-m", ""):
        fatal(f"Could not create tag {tag}")
    if not execute("push", remote, f"refs/tags/{tag}"):
        fatal(f"Could not push tag {tag} to {remote}")
    print(f"  Created {tag}")
    return True


def push_branch(target: str, remote: str, execute: Executor) -> None:
    step(f"Pushing {target}")

    if not execute("push", remote, target):
        fatal(f"Could not push {target} to {remote}")


def run_merge_release(options: ReleaseOptions) -> ReleasePlan:
    """Execute the full merge-and-tag release.

    Args:
        options: Command-line inputs (dry run, auto-confirm, version, remote).

    Returns:
        The plan that was carried out.
    """
    execute = Executor(dry_run=options.dry_run)
    if options.dry_run:
        step("Dry run: commands that change the repository are only printed")

    source = current_branch()
    root = find_toplevel()
    remote = options.remote

    target = resolve_target(remote, execute)
    materialize_target(target, remote, execute)
    if source == target:
        fatal(f"Current branch is {target}; cannot merge a branch into itself")

    plan = negotiate_version(root.name, source, target, options)
    merge(plan, execute)
    tagged = apply_tag(plan, remote, options, execute)
    push_branch(target, remote, execute)

    summary = f"Merged {source} into {target}"
    summary += f" and tagged {plan.tag}" if tagged else f" ({plan.tag} unchanged)"
    print(f"\n{'=' * 60}\nDone! {summary}\n{'=' * 60}")
    return plan

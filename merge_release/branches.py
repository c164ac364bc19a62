"""Branch discovery and checkout.

The remote's default branch is found by trying an ordered list of
resolvers; the first one that yields a usable name wins. Each resolver
takes the remote name and returns a branch name or None.
"""

from __future__ import annotations

import re
from collections.abc import Callable

from .shell import Executor, fatal, git, git_ok, step

Resolver = Callable[[str], str | None]

# A branch with this name always wins over the remote's default branch.
PREFERRED_BRANCH = "main"

# Names git prints when a remote's HEAD is unknown or detached.
UNUSABLE_NAMES = {"HEAD", "(unknown)"}

_REMOTE_SHOW_HEAD_RE = re.compile(r"^\s*HEAD branch:\s*(\S+)\s*$", re.MULTILINE)


def current_branch() -> str:
    """Return the checked-out branch, failing on a detached HEAD."""
    branch = git("symbolic-ref", "--short", "-q", "HEAD", check=False)
    if not branch:
        fatal("Could not determine the current branch (detached HEAD?)")
    return branch


def local_branch_exists(name: str) -> bool:
    return git_ok("show-ref", "--verify", "--quiet", f"refs/heads/{name}")


def remote_branch_exists(remote: str, name: str) -> bool:
    return bool(git("ls-remote", "--heads", remote, f"refs/heads/{name}", check=False))


def from_remote_head(remote: str) -> str | None:
    """Read refs/remotes/<remote>/HEAD, as set up by clone or set-head."""
    ref = git("symbolic-ref", "--short", f"refs/remotes/{remote}/HEAD", check=False)
    return ref.removeprefix(f"{remote}/") or None


def from_remote_symref(remote: str) -> str | None:
    """Ask the remote where its HEAD points (ref: refs/heads/<b>\\tHEAD)."""
    output = git("ls-remote", "--symref", remote, "HEAD", check=False)
    for line in output.splitlines():
        if line.startswith("ref: ") and line.endswith("\tHEAD"):
            ref = line[len("ref: ") :].split("\t", 1)[0]
            return ref.removeprefix("refs/heads/") or None
    return None


def from_remote_show(remote: str) -> str | None:
    """Parse the "HEAD branch:" line of git remote show."""
    output = git("remote", "show", remote, check=False, untranslated=True)
    m = _REMOTE_SHOW_HEAD_RE.search(output)
    return m.group(1) if m else None


def local_branch(name: str) -> Resolver:
    def resolve(remote: str) -> str | None:
        return name if local_branch_exists(name) else None

    return resolve


def remote_branch(name: str) -> Resolver:
    def resolve(remote: str) -> str | None:
        return name if remote_branch_exists(remote, name) else None

    return resolve


DEFAULT_BRANCH_RESOLVERS: list[Resolver] = [
    from_remote_head,
    from_remote_symref,
    from_remote_show,
    local_branch("main"),
    local_branch("master"),
    remote_branch("main"),
    remote_branch("master"),
]


def resolve_default_branch(
    remote: str, resolvers: list[Resolver] | None = None
) -> str:
    """Return the first usable branch name produced by the resolver chain.

    Raises:
        SystemExit: If no resolver produces a usable name.
    """
    if resolvers is None:
        resolvers = DEFAULT_BRANCH_RESOLVERS
    for resolver in resolvers:
        name = resolver(remote)
        if name and name not in UNUSABLE_NAMES:
            return name
    fatal(f"Could not determine the default branch of '{remote}'")


def select_target(default: str, remote: str) -> str:
    """Prefer main whenever it exists locally or on the remote."""
    if default == PREFERRED_BRANCH:
        return default
    if local_branch_exists(PREFERRED_BRANCH) or remote_branch_exists(
        remote, PREFERRED_BRANCH
    ):
        return PREFERRED_BRANCH
    return default


def sync_remote(remote: str, execute: Executor) -> None:
    """Fetch from the remote.

    Failure is ignored: an unreachable remote must not stop discovery,
    which falls back to local refs.
    """
    if not execute("fetch", remote):
        print(f"  Could not fetch from {remote}; using local refs")


def materialize_target(target: str, remote: str, execute: Executor) -> None:
    """Check out the target branch, creating a tracking branch if needed."""
    step(f"Checking out {target}")

    if local_branch_exists(target):
        if not execute("checkout", target):
            fatal(f"Could not check out {target}")
        # Offline runs merge into the local branch as it is.
        if not execute("pull", "--ff-only", remote, target):
            print(f"  Could not fast-forward {target} from {remote}; continuing")
    elif not execute("checkout", "-b", target, "--track", f"{remote}/{target}"):
        fatal(f"Could not create {target} tracking {remote}/{target}")


def resolve_target(remote: str, execute: Executor) -> str:
    """Fetch, then work out which branch the release merges into."""
    step("Resolving target branch")

    sync_remote(remote, execute)
    default = resolve_default_branch(remote)
    target = select_target(default, remote)
    if target != default:
        print(f"  Default branch: {default} (preferring {target})")
    print(f"  Target: {target}")
    return target

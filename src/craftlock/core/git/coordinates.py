"""Git coordinates: parsing, ref classification and GitHub URL normalization.

A git coordinate names a repository plus an optional ref and an optional
location inside it. The string form follows the npm convention::

    git+https://github.com/acme/crafts.git
    git+https://github.com/acme/crafts.git#main
    git+https://github.com/acme/crafts.git#v1.2.0#path:crafts/auth
    git+https://github.com/acme/crafts.git#main#file:agents/reviewer.md

Suffixes are peeled off in a fixed order: ``#file:`` first, then
``#path:``, then a bare ``#<ref>``. The bare ref is classified by
heuristics only, so the classification is lossy: a branch literally named
like a 40-character hex hash is read as a commit, and a branch starting
with ``v`` is read as a tag.

Everything here is pure string handling. No network or filesystem access.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

_GIT_PREFIX = "git+"
_FILE_MARKER = "#file:"
_PATH_MARKER = "#path:"

_TAG_RE = re.compile(r"^\d+\.\d+")
_COMMIT_RE = re.compile(r"^[0-9a-f]{40}$")
_REPO_NAME_RE = re.compile(r"[/:]([^/:]+?)(?:\.git)?/?$")

_GITHUB_TREE_RE = re.compile(r"^https?://github\.com/([^/]+)/([^/]+)/tree/([^/]+)/(.+)$")
_GITHUB_BLOB_RE = re.compile(r"^https?://github\.com/([^/]+)/([^/]+)/blob/([^/]+)/(.+)$")
_GITHUB_REPO_RE = re.compile(r"^https?://github\.com/([^/]+)/([^/]+?)/?$")


class RefKind(str, Enum):
    """What a bare ``#<ref>`` suffix was classified as."""

    BRANCH = "branch"
    TAG = "tag"
    COMMIT = "commit"


def classify_ref(ref: str) -> RefKind:
    """Classify a bare git ref.

    Rules, applied in order:

    1. Starts with ``v`` or with ``<digits>.<digits>`` -> tag.
    2. Exactly 40 lowercase hex characters -> commit.
    3. Anything else -> branch.
    """
    if ref.startswith("v") or _TAG_RE.match(ref):
        return RefKind.TAG
    if _COMMIT_RE.match(ref):
        return RefKind.COMMIT
    return RefKind.BRANCH


def is_full_commit_hash(value: str) -> bool:
    """Return True for a 40-character lowercase hex commit hash."""
    return bool(_COMMIT_RE.match(value))


def repository_name(url: str) -> str:
    """Best-effort repository name: last path segment without ``.git``."""
    match = _REPO_NAME_RE.search(url)
    return match.group(1) if match else ""


@dataclass(frozen=True)
class GitCoordinate:
    """A repository URL plus optional ref and in-repository location.

    At most one of ``branch``/``tag``/``commit`` may be set. When both
    ``file`` and ``path`` are present, ``file`` wins and the subpath is not
    used for manifest lookup.

    Attributes:
        url: Repository URL without the ``git+`` prefix or any suffix.
        branch: Branch to clone.
        tag: Tag to clone.
        commit: Exact commit to check out.
        path: Subdirectory holding the craft (monorepos).
        file: Single file that is the craft.
        name: Repository name derived from ``url`` when not given.
    """

    url: str
    branch: str | None = None
    tag: str | None = None
    commit: str | None = None
    path: str | None = None
    file: str | None = None
    name: str = ""

    def __post_init__(self) -> None:
        refs = [r for r in (self.branch, self.tag, self.commit) if r]
        if len(refs) > 1:
            raise ValueError(
                f"Only one of branch, tag or commit may be set for {self.url}"
            )
        if not self.name:
            object.__setattr__(self, "name", repository_name(self.url))

    @property
    def ref(self) -> str | None:
        """The requested ref, whichever kind it is."""
        return self.branch or self.tag or self.commit

    @property
    def ref_kind(self) -> RefKind | None:
        if self.branch:
            return RefKind.BRANCH
        if self.tag:
            return RefKind.TAG
        if self.commit:
            return RefKind.COMMIT
        return None

    @property
    def subpath(self) -> str | None:
        """The subdirectory used for manifest lookup (None for file refs)."""
        return None if self.file else self.path

    def to_spec(self) -> str:
        """Render the ``git+<url>#<ref>#path:<p>#file:<f>`` string form.

        ``parse_git_url(c.to_spec())`` recovers the same coordinate.
        """
        spec = _GIT_PREFIX + self.url
        if self.ref:
            spec += f"#{self.ref}"
        if self.path:
            spec += f"{_PATH_MARKER}{self.path}"
        if self.file:
            spec += f"{_FILE_MARKER}{self.file}"
        return spec

    def describe(self) -> str:
        """Short human-readable label used in log and error messages."""
        label = self.url
        if self.ref:
            label += f"#{self.ref}"
        if self.file:
            label += f"{_FILE_MARKER}{self.file}"
        elif self.path:
            label += f"{_PATH_MARKER}{self.path}"
        return label


def parse_git_url(text: str) -> GitCoordinate:
    """Split a git coordinate string into its parts.

    Args:
        text: Coordinate string, optionally ``git+`` prefixed.

    Returns:
        The parsed ``GitCoordinate``.
    """
    url = text.strip()
    if url.startswith(_GIT_PREFIX):
        url = url[len(_GIT_PREFIX):]

    file: str | None = None
    path: str | None = None
    if _FILE_MARKER in url:
        url, _, file = url.partition(_FILE_MARKER)
    if _PATH_MARKER in url:
        url, _, path = url.partition(_PATH_MARKER)

    branch = tag = commit = None
    if "#" in url:
        url, _, ref = url.partition("#")
        ref = ref.split("#", 1)[0]
        if ref:
            kind = classify_ref(ref)
            if kind is RefKind.TAG:
                tag = ref
            elif kind is RefKind.COMMIT:
                commit = ref
            else:
                branch = ref

    return GitCoordinate(
        url=url,
        branch=branch,
        tag=tag,
        commit=commit,
        path=path or None,
        file=file or None,
    )


def normalize_github_url(text: str) -> str:
    """Convert GitHub web links into coordinate strings.

    - ``https://github.com/o/r/tree/<branch>/<dir>`` ->
      ``git+https://github.com/o/r.git#<branch>#path:<dir>``
    - ``https://github.com/o/r/blob/<branch>/<file>`` ->
      ``git+https://github.com/o/r.git#<branch>#file:<file>``
    - ``https://github.com/o/r`` -> ``git+https://github.com/o/r.git``

    Strings that are already ``git+`` coordinates or ``.git`` URLs, and
    anything unrecognized, are returned unchanged.
    """
    if text.startswith(_GIT_PREFIX) or text.endswith(".git") or ".git#" in text:
        return text

    match = _GITHUB_TREE_RE.match(text)
    if match:
        owner, repo, branch, path = match.groups()
        return f"git+https://github.com/{owner}/{repo}.git#{branch}{_PATH_MARKER}{path}"
    match = _GITHUB_BLOB_RE.match(text)
    if match:
        owner, repo, branch, file = match.groups()
        return f"git+https://github.com/{owner}/{repo}.git#{branch}{_FILE_MARKER}{file}"
    match = _GITHUB_REPO_RE.match(text)
    if match:
        owner, repo = match.groups()
        return f"git+https://github.com/{owner}/{repo}.git"
    return text


def looks_like_git(text: str) -> bool:
    """Return True if a dependency string names a git source."""
    return text.startswith(_GIT_PREFIX) or text.endswith(".git") or ".git#" in text

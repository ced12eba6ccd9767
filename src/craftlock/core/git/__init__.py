"""Git sources: coordinate parsing, type inference and single-repo resolution.

Import order matters here: ``coordinates`` has no craftlock dependencies
and must load before anything that pulls in the manifest models.
"""

from craftlock.core.git.coordinates import (
    GitCoordinate,
    RefKind,
    classify_ref,
    is_full_commit_hash,
    looks_like_git,
    normalize_github_url,
    parse_git_url,
    repository_name,
)
from craftlock.core.git.inference import (
    DEFAULT_CRAFT_TYPE,
    infer_type_from_directory,
    infer_type_from_filename,
    infer_type_from_path,
)
from craftlock.core.git.runner import DEFAULT_GIT_TIMEOUT, GIT_EXECUTABLE, GitRunner
from craftlock.core.git.resolver import GitDependencyResolver, ResolvedGitInfo

__all__ = [
    "DEFAULT_CRAFT_TYPE",
    "DEFAULT_GIT_TIMEOUT",
    "GIT_EXECUTABLE",
    "GitCoordinate",
    "GitDependencyResolver",
    "GitRunner",
    "RefKind",
    "ResolvedGitInfo",
    "classify_ref",
    "infer_type_from_directory",
    "infer_type_from_filename",
    "infer_type_from_path",
    "is_full_commit_hash",
    "looks_like_git",
    "normalize_github_url",
    "parse_git_url",
    "repository_name",
]

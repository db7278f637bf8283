"""Core engine layer for gitcas.

This module provides the object codec, the tree format, the directory tree
builder, commit construction and repository scaffolding.
"""

from gitcas.core.codec import ObjectCodec, object_id_for
from gitcas.core.commit_builder import (
    CommitBuilder,
    CommitBuilderError,
    CommitInfo,
    Identity,
    parse_commit,
)
from gitcas.core.objects import ObjectKind, TreeEntry, parse_tree, serialize_tree
from gitcas.core.repository import find_git_dir, init_repository
from gitcas.core.tree_builder import TreeBuilder

__all__ = [
    "CommitBuilder",
    "CommitBuilderError",
    "CommitInfo",
    "Identity",
    "ObjectCodec",
    "ObjectKind",
    "TreeBuilder",
    "TreeEntry",
    "find_git_dir",
    "init_repository",
    "object_id_for",
    "parse_commit",
    "parse_tree",
    "serialize_tree",
]

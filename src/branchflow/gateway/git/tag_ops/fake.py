"""Fake implementation of Git tag operations for testing."""

from __future__ import annotations

from pathlib import Path
from typing import NamedTuple

from branchflow.gateway.git.tag_ops.abc import GitTagOps


class TagRecord(NamedTuple):
    tag_name: str
    ref: str
    message: str
    message_file: Path | None
    sign: bool
    signing_key: str | None


class FakeGitTagOps(GitTagOps):
    """In-memory fake implementation of Git tag operations.

    Mutation Tracking:
    -----------------
    - created_tags: TagRecord for every create_tag() call
    """

    def __init__(self, *, existing_tags: list[str] | None = None) -> None:
        self._tags = existing_tags if existing_tags is not None else []
        self._created_tags: list[TagRecord] = []

    def create_tag(
        self,
        cwd: Path,
        tag_name: str,
        *,
        ref: str,
        message: str,
        message_file: Path | None,
        sign: bool,
        signing_key: str | None,
    ) -> None:
        if tag_name in self._tags:
            raise RuntimeError(f"fatal: tag '{tag_name}' already exists")
        self._tags.append(tag_name)
        self._created_tags.append(
            TagRecord(
                tag_name=tag_name,
                ref=ref,
                message=message,
                message_file=message_file,
                sign=sign,
                signing_key=signing_key,
            )
        )

    def tag_exists(self, cwd: Path, tag_name: str) -> bool:
        return tag_name in self._tags

    @property
    def created_tags(self) -> list[TagRecord]:
        return self._created_tags.copy()

"""Writing blobs and trees straight into the repository's object database.

Snapshots are assembled without touching the index or the working tree:
every object goes through ``repo.odb`` and is addressed by its SHA-1, so
writing identical content twice is a no-op.
"""

from __future__ import annotations

from dataclasses import dataclass
from io import BytesIO
from typing import TYPE_CHECKING

from git.objects.fun import tree_to_stream
from gitdb import IStream
from gitdb.exc import ODBError
from gitdb.util import bin_to_hex, hex_to_bin

from gitlab_series.exceptions import ObjectWriteError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from git import Repo

BLOB_MODE = 0o100644
TREE_MODE = 0o040000
GITLINK_MODE = 0o160000


@dataclass(frozen=True)
class TreeEntry:
    """One entry of a tree object."""

    name: str
    hexsha: str
    mode: int = BLOB_MODE

    @classmethod
    def blob(cls, name: str, hexsha: str) -> TreeEntry:
        return cls(name, hexsha, BLOB_MODE)

    @classmethod
    def tree(cls, name: str, hexsha: str) -> TreeEntry:
        return cls(name, hexsha, TREE_MODE)

    @classmethod
    def gitlink(cls, name: str, hexsha: str) -> TreeEntry:
        """A submodule-style pointer to a commit, not its contents."""
        return cls(name, hexsha, GITLINK_MODE)

    @property
    def sort_key(self) -> bytes:
        # git orders sub-trees as if their name ended with '/'
        suffix = b"/" if self.mode == TREE_MODE else b""
        return self.name.encode("utf-8") + suffix


class ObjectWriter:
    """Stores blobs and trees in a repository's object database."""

    def __init__(self, repo: Repo) -> None:
        self._repo = repo

    def write_blob(self, content: str | bytes) -> str:
        """Store content as a blob and return its hex SHA."""
        data = content.encode("utf-8") if isinstance(content, str) else content
        return self._store("blob", data)

    def write_tree(self, entries: Iterable[TreeEntry]) -> str:
        """Store a tree built from entries and return its hex SHA.

        Raises:
            ObjectWriteError: On duplicate names or a failed write
        """
        ordered = sorted(entries, key=lambda e: e.sort_key)
        names = [e.name for e in ordered]
        # Duplicates are an error, never a silent replacement
        if len(names) != len(set(names)):
            raise ObjectWriteError(f"Duplicate tree entry names: {names}")

        buf = BytesIO()
        tree_to_stream(
            [(hex_to_bin(e.hexsha), e.mode, e.name) for e in ordered],
            buf.write,
        )
        return self._store("tree", buf.getvalue())

    def _store(self, type_name: str, data: bytes) -> str:
        try:
            istream = self._repo.odb.store(IStream(type_name, len(data), BytesIO(data)))
        except (OSError, ODBError) as e:
            raise ObjectWriteError(f"Failed to write {type_name} object: {e}") from e
        return bin_to_hex(istream.binsha).decode("ascii")

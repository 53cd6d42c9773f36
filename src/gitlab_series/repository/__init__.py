"""Local git repository access.

- open_repository / read_config_value: locate the repo and read its config
- ObjectWriter: content-addressed blob and tree writes
- RefStore: remote-tracking lookups, merge-base, atomic ref updates, fetch
- EmailResolver: author name to email lookups from history
"""

from .email import EmailResolver
from .objects import BLOB_MODE, GITLINK_MODE, TREE_MODE, ObjectWriter, TreeEntry
from .refs import SYNC_REF_PREFIX, RefStore, sync_refname
from .repo import open_repository, read_config_value

__all__ = [
    # Objects
    "BLOB_MODE",
    "GITLINK_MODE",
    "TREE_MODE",
    "ObjectWriter",
    "TreeEntry",
    # Refs
    "SYNC_REF_PREFIX",
    "RefStore",
    "sync_refname",
    # Email
    "EmailResolver",
    # Repo
    "open_repository",
    "read_config_value",
]

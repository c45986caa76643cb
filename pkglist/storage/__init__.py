"""Storage package — the persisted list and its backup.

Public re-exports so callers can write::

    from pkglist.storage import CommitManager, read_list
"""

from pkglist.storage.commit import CommitManager, read_list

__all__ = ["CommitManager", "read_list"]

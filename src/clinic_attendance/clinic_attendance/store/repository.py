from __future__ import annotations

from typing import Any, Dict, Optional, Protocol, Sequence


class RecordStore(Protocol):
    """Key-value record store.

    Writes overwrite unconditionally (last write wins) and there are no
    transactions: a read-check-then-write sequence by the caller is not atomic.
    Implementations raise ``StoreError`` on I/O failure.
    """

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    def set(self, key: str, record: Dict[str, Any]) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError

    def list_by_prefix(self, prefix: str) -> Sequence[Dict[str, Any]]:
        """Every record whose key starts with ``prefix``, in no particular order."""

        raise NotImplementedError

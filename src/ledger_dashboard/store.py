"""Ledger document stores.

A store supplies one raw ledger document per user. Fetching is the only
asynchronous step of building a report.
"""

import asyncio
import json
from collections.abc import Mapping
from pathlib import Path
from typing import Protocol

from ledger_dashboard.models.ledger import DataShapeError
from ledger_dashboard.utils.logging_config import get_logger

logger = get_logger(__name__)


class LedgerNotFoundError(Exception):
    """Raised when no ledger document exists for a user."""

    def __init__(self, user_id: str):
        """Initialize LedgerNotFoundError.

        Args:
            user_id: The user whose ledger was requested.
        """
        self.user_id = user_id
        super().__init__(f"User with ID '{user_id}' not found.")


class LedgerStore(Protocol):
    """Anything that can fetch a raw ledger document by user id."""

    async def fetch(self, user_id: str) -> object:
        """Return the raw ledger document for ``user_id``.

        Raises:
            LedgerNotFoundError: If the user has no ledger.
        """
        ...


class InMemoryLedgerStore:
    """Store backed by a dict of user id -> document."""

    def __init__(self, documents: Mapping[str, object] | None = None):
        self.documents = dict(documents or {})

    async def fetch(self, user_id: str) -> object:
        if user_id not in self.documents:
            raise LedgerNotFoundError(user_id)
        return self.documents[user_id]


class JsonLedgerStore:
    """Store reading one ``<user_id>.json`` document per user from a directory."""

    def __init__(self, data_dir: Path):
        """Initialize the store.

        Args:
            data_dir: Directory holding the ledger documents.
        """
        self.data_dir = data_dir

    def path_for(self, user_id: str) -> Path:
        """Resolve the document path for a user, constrained to the data directory.

        Raises:
            LedgerNotFoundError: If the id is empty or resolves outside the data directory.
        """
        if not user_id or not user_id.strip():
            raise LedgerNotFoundError(user_id)

        resolved_base = self.data_dir.resolve()
        resolved_path = (self.data_dir / f"{user_id}.json").resolve()
        try:
            resolved_path.relative_to(resolved_base)
        except ValueError:
            logger.warning(f"Rejected user id escaping the data directory: {user_id!r}")
            raise LedgerNotFoundError(user_id) from None
        return resolved_path

    async def fetch(self, user_id: str) -> object:
        """Read and decode a user's document without blocking the event loop."""
        return await asyncio.to_thread(self._read, user_id)

    def _read(self, user_id: str) -> object:
        path = self.path_for(user_id)
        if not path.is_file():
            raise LedgerNotFoundError(user_id)

        logger.debug(f"Reading ledger document {path}")
        with open(path, encoding="utf-8") as f:
            try:
                return json.load(f)
            except json.JSONDecodeError as e:
                raise DataShapeError(f"Ledger document for '{user_id}' is not valid JSON: {e}") from e

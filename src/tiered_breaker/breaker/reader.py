"""Side-effect free access to the shared breaker record."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..exceptions import StorageUnavailable
from ..models import Absent, BreakerRecord, Present, RecordLookup

if TYPE_CHECKING:
    from ..database import BreakerDB

logger = logging.getLogger(__name__)


class StateReader:
    """Reads the breaker record, resolving absence to the default record.

    Usage:
        reader = StateReader(db)
        record = await reader.read()
        if record.tier is Tier.MAINTENANCE:
            ...
    """

    def __init__(self, db: BreakerDB) -> None:
        self._db = db

    async def lookup(self) -> RecordLookup:
        """Point read that keeps absence explicit.

        Raises:
            StorageUnavailable: If the store fails or holds a corrupt record.
        """
        row = await self._db.fetch_breaker_row()
        if row is None:
            return Absent()
        try:
            return Present(BreakerRecord.from_row(row))
        except ValueError as e:
            logger.error("Corrupt breaker record: %s", e)
            raise StorageUnavailable("read", str(e)) from e

    async def read(self) -> BreakerRecord:
        """Return the stored record, or the default one if none is stored.

        Never creates a record.
        """
        lookup = await self.lookup()
        if isinstance(lookup, Present):
            return lookup.record
        return BreakerRecord.default()

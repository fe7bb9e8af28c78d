"""
Index Log - append-only listing of every profile write.

The index is a single text value holding one line per write:

    token<TAB>ip<TAB>method<TAB>url<TAB>time<TAB>parent_token<NEWLINE>

It is a log, not a table. Writing a token twice leaves two lines and
readers collapse them, the later line winning. Lines are only ever added
by the backend's append primitive, so concurrent writers never tear a line.
"""

from pydantic import ValidationError

from profstore.core.config import get_logger
from profstore.core.types import Profile, ProfileSummary
from profstore.storage.backends.base import CacheBackend
from profstore.storage.codec import FIELD_SEPARATOR, LINE_SEPARATOR, RecordCodec
from profstore.storage.keys import KeyNamer

logger = get_logger("storage.index")

FIELD_COUNT = 6


class IndexLog:
    """Appends to and scans the shared index key."""

    def __init__(
        self,
        backend: CacheBackend,
        keys: KeyNamer | None = None,
        codec: RecordCodec | None = None,
    ):
        self.backend = backend
        self.keys = keys or KeyNamer()
        self.codec = codec or RecordCodec()

    def append(self, profile: Profile, lifetime: int) -> bool:
        """Add the row for ``profile`` and refresh the index lifetime."""
        line = self.codec.index_line(profile)
        return self.backend.append(self.keys.index_key(), line.encode("utf-8"), lifetime)

    def _read_lines(self) -> list[str]:
        raw = self.backend.get(self.keys.index_key())
        if not raw:
            return []
        return raw.decode("utf-8", errors="replace").split(LINE_SEPARATOR)

    @staticmethod
    def parse_line(line: str) -> ProfileSummary | None:
        """
        Parse one index row.

        The split is bounded so a stray tab can only end up in the last
        field. Rows that still don't yield six valid fields return None.
        """
        fields = line.split(FIELD_SEPARATOR, FIELD_COUNT - 1)
        if len(fields) != FIELD_COUNT:
            logger.warning(f"Skipping malformed index line ({len(fields)} fields): {line!r}")
            return None

        token, ip, method, url, time, parent = fields
        try:
            return ProfileSummary(token=token, ip=ip, method=method, url=url, time=time, parent=parent)
        except ValidationError as e:
            logger.warning(f"Skipping malformed index line {line!r}: {e}")
            return None

    @staticmethod
    def _matches(summary: ProfileSummary, ip: str, url: str, method: str) -> bool:
        if ip and ip not in summary.ip:
            return False
        if url and url not in summary.url:
            return False
        if method and method not in summary.method:
            return False
        return True

    def find(
        self,
        ip: str = "",
        url: str = "",
        limit: int | None = None,
        method: str = "",
    ) -> list[ProfileSummary]:
        """
        List index rows matching every non-empty filter.

        Filters are substring matches. Rows are collapsed by token: a later
        row replaces the earlier one but keeps its position in the result.
        Every matching row, duplicates included, consumes one unit of
        ``limit``; None or a negative limit scans the whole log.
        """
        result: dict[str, ProfileSummary] = {}
        remaining = limit

        for line in self._read_lines():
            if remaining == 0:
                break

            if not line:
                continue

            summary = self.parse_line(line)
            if summary is None:
                continue

            if not self._matches(summary, ip, url, method):
                continue

            result[summary.token] = summary
            if remaining is not None:
                remaining -= 1

        return list(result.values())

    def compact(self, lifetime: int) -> int:
        """
        Rewrite the index with one row per token.

        Each token keeps the content of its last row at the position of its
        first row, so an unlimited find() returns the same result before and
        after. Malformed rows are dropped. Rows appended by other writers
        between the read and the rewrite are lost.

        Returns the number of rows removed.
        """
        lines = [line for line in self._read_lines() if line]
        latest: dict[str, str] = {}
        for line in lines:
            summary = self.parse_line(line)
            if summary is not None:
                latest[summary.token] = line

        dropped = len(lines) - len(latest)
        if dropped == 0:
            return 0

        blob = "".join(line + LINE_SEPARATOR for line in latest.values())
        if not self.backend.set(self.keys.index_key(), blob.encode("utf-8"), lifetime):
            logger.warning("Index compaction could not store the rewritten index")
            return 0

        logger.info(f"Compacted index: {len(lines)} rows -> {len(latest)} rows")
        return dropped

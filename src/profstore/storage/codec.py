"""
Record codec - Profile <-> stored record conversion.

Records are flat: a profile's children are stored as a list of tokens,
never as nested sub-trees. The Tree Builder reassembles the graph on read.
"""

from pydantic import ValidationError

from profstore.core.config import get_logger
from profstore.core.types import Profile, ProfileRecord

logger = get_logger("storage.codec")

FIELD_SEPARATOR = "\t"
LINE_SEPARATOR = "\n"


def _flatten(value: str) -> str:
    """Keep separators out of a field so every row splits into exactly six fields."""
    return value.replace(FIELD_SEPARATOR, " ").replace(LINE_SEPARATOR, " ")


class RecordCodec:
    """Serializes profiles into records, index rows, and bytes."""

    def encode(self, profile: Profile) -> ProfileRecord:
        """Flatten a profile into its storable record."""
        return ProfileRecord(
            token=profile.token,
            parent=profile.parent_token,
            children=profile.child_tokens,
            data=profile.collectors,
            ip=profile.ip,
            method=profile.method,
            url=profile.url,
            time=profile.time,
        )

    def decode(self, token: str, record: ProfileRecord) -> Profile:
        """
        Build a profile carrying the record's metadata and collectors.

        Parent and children links are left empty for the Tree Builder.
        """
        return Profile(
            token=token,
            ip=record.ip,
            method=record.method,
            url=record.url,
            time=record.time,
            collectors=record.data,
        )

    def dumps(self, record: ProfileRecord) -> bytes:
        return record.model_dump_json().encode("utf-8")

    def loads(self, raw: bytes) -> ProfileRecord | None:
        """Parse stored bytes; a corrupt payload is logged and treated as a miss."""
        try:
            return ProfileRecord.model_validate_json(raw)
        except ValidationError as e:
            logger.warning(f"Discarding undecodable profile record: {e}")
            return None

    def index_line(self, profile: Profile) -> str:
        """Format the index row for ``profile``, newline included."""
        fields = [
            profile.token,
            profile.ip,
            profile.method,
            profile.url,
            str(profile.time),
            profile.parent_token or "",
        ]
        return FIELD_SEPARATOR.join(_flatten(field) for field in fields) + LINE_SEPARATOR

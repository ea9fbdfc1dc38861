"""Column types shared by the models."""

from sqlalchemy import DateTime
from sqlalchemy.types import TypeDecorator

from photoshelf.utils.dates import to_utc


class UTCDateTime(TypeDecorator):
    """Aware UTC datetimes in and out.

    SQLite keeps no offset, so values are converted to UTC before binding and
    read back with UTC attached.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return to_utc(value)

    def process_result_value(self, value, dialect):
        return to_utc(value)

from sqlalchemy import Column, Integer, Text, DateTime
from sqlalchemy.sql import func
from tagger.models import Base


class File(Base):
    __tablename__ = "files"
    # AUTOINCREMENT keeps SQLite from handing out a rowid that was used before.
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True)
    # Not unique: tracking the same filename twice creates two rows.
    filename = Column(Text, nullable=False, index=True)
    last_seen_at = Column(DateTime, nullable=True)
    # Set when a tracked file is known to be missing from disk.
    orphaned_at = Column(DateTime, nullable=True)
    updated_at = Column(DateTime, server_default=func.current_timestamp(), onupdate=func.current_timestamp(), nullable=False)
    created_at = Column(DateTime, server_default=func.current_timestamp(), nullable=False)

    def __repr__(self) -> str:
        return f"<File id={self.id} filename={self.filename!r}>"

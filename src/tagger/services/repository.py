from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from typing import Iterator, Optional, Union

from sqlalchemy import insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from tagger.lib.config import TaggerConfig
from tagger.lib.database import get_engine, get_sessionmaker, init_db
from tagger.lib.errors import ConflictError, NotFoundError, SchemaError, StorageError, TaggerError
from tagger.models.file import File
from tagger.models.filetag import FileTag
from tagger.models.tag import Tag

logger = logging.getLogger(__name__)


class Repository:
    """Small repository/service layer wrapping one SQLAlchemy session.

    Every operation runs in its own transaction and commits. Storage
    failures roll the session back and surface as ``StorageError`` (or its
    ``ConflictError`` subclass) so the repository stays usable afterwards.
    Not thread-safe: callers sharing one instance across threads must
    serialize access themselves.
    """

    def __init__(self, session: Session, engine=None):
        self.session = session
        # set when the repository owns its engine (see init())
        self.engine = engine

    def close(self) -> None:
        self.session.close()
        if self.engine is not None:
            self.engine.dispose()

    def __enter__(self) -> "Repository":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @contextmanager
    def _storage(self, action: str) -> Iterator[None]:
        try:
            yield
            # also ends read transactions so WAL snapshots are not held open
            self.session.commit()
        except TaggerError:
            self.session.rollback()
            raise
        except IntegrityError as exc:
            self.session.rollback()
            logger.info("%s rejected: %s", action, exc.orig)
            raise ConflictError(f"{action}: {exc.orig}") from exc
        except (SQLAlchemyError, ValueError, TypeError) as exc:
            # ValueError/TypeError come from rows whose values cannot be decoded
            self.session.rollback()
            logger.error("%s failed: %s", action, exc)
            raise StorageError(f"{action}: {exc}") from exc

    # File helpers
    def create_file(self, filename: str) -> int:
        """Track ``filename`` and return the new row's id.

        No duplicate check is made; see ``ensure_file`` for get-or-create.
        """
        with self._storage(f"create file {filename!r}"):
            f = File(filename=filename)
            self.session.add(f)
        logger.debug("created file id=%s filename=%r", f.id, filename)
        return f.id

    def get_file(self, filename: str) -> Optional[int]:
        """Return the id of a file tracked under ``filename``, or None.

        When the filename was tracked more than once the oldest row wins.
        """
        with self._storage(f"get file {filename!r}"):
            row = (self.session.query(File.id)
                   .filter(File.filename == filename)
                   .order_by(File.id)
                   .first())
        return row[0] if row else None

    def ensure_file(self, filename: str) -> tuple[int, bool]:
        """Return ``(file_id, created)``, creating the file row if needed."""
        file_id = self.get_file(filename)
        if file_id is not None:
            return file_id, False
        return self.create_file(filename), True

    # Tag helpers
    def create_tag(self, name: str) -> int:
        """Create a tag and return its id using ``INSERT ... RETURNING``."""
        with self._storage(f"create tag {name!r}"):
            tag_id = self.session.execute(insert(Tag).values(name=name).returning(Tag.id)).scalar_one()
        logger.debug("created tag id=%s name=%r", tag_id, name)
        return tag_id

    def get_tag(self, name: str) -> Optional[int]:
        with self._storage(f"get tag {name!r}"):
            row = (self.session.query(Tag.id)
                   .filter(Tag.name == name)
                   .order_by(Tag.id)
                   .first())
        return row[0] if row else None

    def ensure_tag(self, name: str) -> tuple[int, bool]:
        """Return ``(tag_id, created)``, creating the tag row if needed."""
        tag_id = self.get_tag(name)
        if tag_id is not None:
            return tag_id, False
        return self.create_tag(name), True

    # Associations
    def tag_file(self, tag_id: int, file_id: int) -> None:
        """Apply a tag to a file.

        Raises:
            NotFoundError: the tag or the file does not exist.
            ConflictError: the file already carries this tag.
            StorageError: any other storage failure.
        """
        with self._storage(f"tag file id={file_id} with tag id={tag_id}"):
            if self.session.get(Tag, tag_id) is None:
                raise NotFoundError(f"tag id={tag_id} does not exist")
            if self.session.get(File, file_id) is None:
                raise NotFoundError(f"file id={file_id} does not exist")
            self.session.execute(insert(FileTag).values(file_id=file_id, tag_id=tag_id))
        logger.debug("tagged file id=%s with tag id=%s", file_id, tag_id)

    def get_files_for_tag(self, tag_id: int) -> list[File]:
        """Return every file carrying ``tag_id``, in storage order.

        An unknown tag yields an empty list. A row that cannot be decoded
        raises ``StorageError``.
        """
        with self._storage(f"get files for tag id={tag_id}"):
            return (self.session.query(File)
                    .join(FileTag, FileTag.file_id == File.id)
                    .filter(FileTag.tag_id == tag_id)
                    .all())


def init(target: Union[TaggerConfig, str, os.PathLike]) -> Repository:
    """Open the database, apply pending migrations and return a Repository.

    ``target`` is a ``TaggerConfig`` or a database location (a filesystem
    path, ``:memory:`` or a SQLAlchemy URL).

    Raises:
        ConfigError: the config carries an unusable value.
        StorageError: the database location cannot be opened.
        SchemaError: the schema could not be brought up to date.
    """
    config = target if isinstance(target, TaggerConfig) else TaggerConfig(database=os.fspath(target))
    try:
        engine = get_engine(config.database, journal_mode=config.journal_mode, echo=config.echo)
    except SQLAlchemyError as exc:
        raise StorageError(f"cannot open database {config.database!r}: {exc}") from exc
    try:
        init_db(engine, config.migrations_location)
    except SchemaError:
        engine.dispose()
        raise
    Session = get_sessionmaker(engine)
    return Repository(Session(), engine=engine)

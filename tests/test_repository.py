import pytest
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError

from tagger.lib.database import InMemoryAdapter
from tagger.lib.config import TaggerConfig
from tagger.lib.errors import ConfigError, ConflictError, NotFoundError, StorageError
from tagger.models.file import File
from tagger.services.repository import Repository, init


def make_repo():
    adapter = InMemoryAdapter()
    return Repository(adapter.session())


def test_get_file_not_found_then_found():
    repo = make_repo()
    assert repo.get_file("abc") is None
    file_id = repo.create_file("abc")
    assert repo.get_file("abc") == file_id


def test_get_tag_not_found_then_found():
    repo = make_repo()
    assert repo.get_tag("abc") is None
    tag_id = repo.create_tag("abc")
    assert repo.get_tag("abc") == tag_id


def test_create_file_allows_duplicate_names():
    repo = make_repo()
    first = repo.create_file("a.txt")
    second = repo.create_file("a.txt")
    assert first != second
    # lookups resolve to the oldest row
    assert repo.get_file("a.txt") == first


def test_ids_are_not_reused_after_delete():
    repo = make_repo()
    a = repo.create_file("a")
    repo.session.execute(text("DELETE FROM files WHERE id = :id"), {"id": a})
    repo.session.commit()
    b = repo.create_file("b")
    assert b > a


def test_get_files_for_tag():
    repo = make_repo()
    a = repo.create_file("a")
    b = repo.create_file("b")
    c = repo.create_file("c")
    t = repo.create_tag("tag")

    repo.tag_file(t, a)
    repo.tag_file(t, b)

    files = repo.get_files_for_tag(t)
    assert {f.id for f in files} == {a, b}
    assert c not in {f.id for f in files}
    assert {f.filename for f in files} == {"a", "b"}
    assert all(isinstance(f, File) and f.created_at is not None for f in files)


def test_get_files_for_unknown_tag_is_empty():
    repo = make_repo()
    repo.create_file("a")
    assert repo.get_files_for_tag(12345) == []


def test_tag_file_unknown_ids_raise_not_found():
    repo = make_repo()
    f = repo.create_file("a")
    t = repo.create_tag("tag")
    with pytest.raises(NotFoundError):
        repo.tag_file(t + 100, f)
    with pytest.raises(NotFoundError):
        repo.tag_file(t, f + 100)
    assert repo.get_files_for_tag(t) == []


def test_tag_file_twice_raises_conflict_and_repo_stays_usable():
    repo = make_repo()
    f = repo.create_file("a")
    t = repo.create_tag("tag")
    repo.tag_file(t, f)
    with pytest.raises(ConflictError):
        repo.tag_file(t, f)

    g = repo.create_file("b")
    repo.tag_file(t, g)
    assert {x.id for x in repo.get_files_for_tag(t)} == {f, g}


def test_undecodable_row_raises_storage_error():
    repo = make_repo()
    t = repo.create_tag("tag")
    repo.session.execute(text(
        "INSERT INTO files (id, filename, created_at, updated_at) "
        "VALUES (99, 'bad', 'not-a-date', 'not-a-date')"
    ))
    repo.session.execute(text("INSERT INTO file_tags (file_id, tag_id) VALUES (99, :t)"), {"t": t})
    repo.session.commit()

    with pytest.raises(StorageError):
        repo.get_files_for_tag(t)


def test_ensure_file_and_tag():
    repo = make_repo()
    file_id, created = repo.ensure_file("a")
    assert created is True
    assert repo.ensure_file("a") == (file_id, False)

    tag_id, created = repo.ensure_tag("tag")
    assert created is True
    assert repo.ensure_tag("tag") == (tag_id, False)


def test_init_file_database_uses_wal_and_persists(tmp_path):
    db = tmp_path / "data.sqlite3"
    with init(db) as repo:
        mode = repo.session.execute(text("PRAGMA journal_mode")).scalar()
        assert mode.lower() == "wal"
        a = repo.create_file("a")
        t = repo.create_tag("tag")
        repo.tag_file(t, a)

    with init(str(db)) as repo:
        t = repo.get_tag("tag")
        assert t is not None
        assert [f.filename for f in repo.get_files_for_tag(t)] == ["a"]


def test_foreign_keys_enforced():
    repo = make_repo()
    repo.create_tag("tag")
    with pytest.raises(IntegrityError):
        repo.session.execute(text("INSERT INTO file_tags (file_id, tag_id) VALUES (42, 1)"))
        repo.session.commit()
    repo.session.rollback()


def test_init_rejects_unknown_journal_mode(tmp_path):
    with pytest.raises(ConfigError):
        init(TaggerConfig(database=str(tmp_path / "t.db"), journal_mode="bogus"))


def test_init_unusable_database_directory_raises_storage_error(tmp_path):
    blocker = tmp_path / "afile"
    blocker.write_text("")
    with pytest.raises(StorageError):
        init(blocker / "sub" / "d.db")

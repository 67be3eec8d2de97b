from tagger.lib.database import InMemoryAdapter, normalize_db_url
from tagger.models.file import File


def test_inmemory_adapter_basic():
    adapter = InMemoryAdapter()
    session = adapter.session()
    f = File(filename="/tmp/a.jpg")
    session.add(f)
    session.commit()
    q = session.query(File).filter_by(filename="/tmp/a.jpg").one()
    assert q.id == f.id
    assert q.created_at is not None
    assert q.updated_at is not None
    assert q.last_seen_at is None
    assert q.orphaned_at is None


def test_normalize_db_url(tmp_path):
    assert normalize_db_url("sqlite:///x.db") == "sqlite:///x.db"
    assert normalize_db_url(":memory:") == "sqlite:///:memory:"
    target = tmp_path / "nested" / "tags.db"
    assert normalize_db_url(str(target)) == f"sqlite:///{target.as_posix()}"
    # parent directory is created so sqlite can open the file
    assert target.parent.is_dir()

import json
from datetime import datetime, timedelta, timezone

import pytest

from sitecms.application.cms.create_version import create_version
from sitecms.application.cms.list_versions import (
    get_version_content,
    get_version_index,
    list_versions,
)
from sitecms.application.cms.rollback_content import rollback_to_version
from sitecms.application.cms.update_content import update_content
from sitecms.application.exceptions import CorruptVersion, SnapshotFailed, VersionNotFound, WriteFailed
from sitecms.normalizers.version import normalize_version
from sitecms.storage.base import StorageError
from sitecms.storage.keys import content_key, version_index_key, version_key
from sitecms.storage.objects import write_json
from sitecms.utils.versioning import generate_version_id, next_version_id, parse_version_id

EDITOR = "a@x.com"


def current_bytes(store, section="hero"):
    stored = store.get(content_key(section))
    return stored.body if stored else None


def fail_puts(monkeypatch, store, predicate):
    original_put = store.put

    def put(key, body, **kwargs):
        if predicate(key):
            raise StorageError(f"simulated failure writing {key}")
        return original_put(key, body, **kwargs)

    monkeypatch.setattr(store, "put", put)


def is_snapshot_key(key):
    return key.startswith("_versions/") and not key.endswith("_index.json")


# ------------------------
# Version ids
# ------------------------
def test_version_id_is_second_precision_and_key_safe():
    moment = datetime(2024, 5, 1, 13, 45, 9, 123000, tzinfo=timezone.utc)
    version_id = generate_version_id(moment)

    assert version_id == "2024-05-01T13-45-09"
    assert ":" not in version_id and "/" not in version_id


def test_version_id_converts_to_utc():
    moment = datetime(2024, 5, 1, 10, 0, 0, tzinfo=timezone(timedelta(hours=-3)))
    assert generate_version_id(moment) == "2024-05-01T13-00-00"


def test_parse_version_id_round_trips_to_timestamp():
    parsed = parse_version_id("2024-05-01T13-45-09")
    assert parsed == datetime(2024, 5, 1, 13, 45, 9, tzinfo=timezone.utc)


def test_parse_version_id_rejects_garbage():
    with pytest.raises(ValueError):
        parse_version_id("not-a-version")


def test_next_version_id_moves_past_newest():
    moment = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)

    assert next_version_id(moment) == "2024-05-01T12-00-00"
    assert next_version_id(moment, "2024-05-01T11-59-59") == "2024-05-01T12-00-00"
    assert next_version_id(moment, "2024-05-01T12-00-00") == "2024-05-01T12-00-01"
    assert next_version_id(moment, "2024-05-01T12-00-05") == "2024-05-01T12-00-06"


# ------------------------
# create_version
# ------------------------
def test_create_version_without_current_document_is_noop(store, clock):
    assert create_version(section="hero", editor=EDITOR) is None
    assert store.get(version_index_key("hero")) is None
    assert list_versions(section="hero") == []


def test_create_version_snapshots_current_bytes(store, clock):
    write_json(store, content_key("hero"), {"subtitle": "v1"})
    before = current_bytes(store)

    version_id = create_version(section="hero", editor=EDITOR, note="first")

    assert version_id == "2024-05-01T12-00-00"
    assert store.get(version_key("hero", version_id)).body == before

    [entry] = list_versions(section="hero")
    assert entry.id == version_id
    assert entry.created_by == EDITOR
    assert entry.size == len(before)
    assert entry.note == "first"
    assert entry.created_at == "2024-05-01T12:00:00.000Z"


def test_index_is_persisted_with_camel_case_entries(store, clock):
    write_json(store, content_key("about"), {"title": "About"})
    version_id = create_version(section="about", editor=EDITOR)

    persisted = json.loads(store.get(version_index_key("about")).body)

    assert persisted["section"] == "about"
    assert persisted["versions"][0]["id"] == version_id
    assert persisted["versions"][0]["createdBy"] == EDITOR
    assert "note" not in persisted["versions"][0]


def test_versions_are_listed_newest_first(store, clock):
    write_json(store, content_key("hero"), {"n": 0})
    created = []
    for n in range(1, 5):
        created.append(create_version(section="hero", editor=EDITOR))
        write_json(store, content_key("hero"), {"n": n})

    ids = [entry.id for entry in list_versions(section="hero")]

    assert ids == list(reversed(created))
    assert ids == sorted(ids, reverse=True)


def test_versions_within_same_second_stay_unique(store, monkeypatch):
    frozen = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)
    monkeypatch.setattr("sitecms.application.cms.create_version.utcnow", lambda: frozen)
    write_json(store, content_key("hero"), {"n": 0})

    first = create_version(section="hero", editor=EDITOR)
    second = create_version(section="hero", editor=EDITOR)

    assert first == "2024-05-01T12-00-00"
    assert second == "2024-05-01T12-00-01"
    assert [e.id for e in list_versions(section="hero")] == [second, first]


def test_retention_keeps_only_most_recent_ten(store, clock):
    write_json(store, content_key("gallery"), {"n": 0})
    created = [create_version(section="gallery", editor=EDITOR) for _ in range(15)]

    ids = [entry.id for entry in list_versions(section="gallery")]

    assert len(ids) == 10
    assert ids == list(reversed(created[-10:]))


def test_eviction_deletes_snapshot_blob(store, clock):
    write_json(store, content_key("hero"), {"n": 0})
    created = [create_version(section="hero", editor=EDITOR) for _ in range(11)]

    assert store.get(version_key("hero", created[0])) is None
    for version_id in created[1:]:
        assert store.get(version_key("hero", version_id)) is not None


def test_retention_limit_is_configurable(store, clock):
    write_json(store, content_key("hero"), {"n": 0})
    for _ in range(4):
        create_version(section="hero", editor=EDITOR, max_versions=3)

    assert len(list_versions(section="hero")) == 3


def test_failed_snapshot_copy_leaves_index_untouched(store, clock, monkeypatch):
    write_json(store, content_key("hero"), {"n": 0})
    create_version(section="hero", editor=EDITOR)
    index_before = store.get(version_index_key("hero")).body

    fail_puts(monkeypatch, store, is_snapshot_key)

    with pytest.raises(SnapshotFailed):
        create_version(section="hero", editor=EDITOR)

    assert store.get(version_index_key("hero")).body == index_before


def test_failed_index_save_discards_new_snapshot(store, clock, monkeypatch):
    write_json(store, content_key("hero"), {"n": 0})
    fail_puts(monkeypatch, store, lambda key: key.endswith("_index.json"))

    with pytest.raises(SnapshotFailed):
        create_version(section="hero", editor=EDITOR)

    assert [k for k in store.keys() if k.startswith("_versions/")] == []


def test_eviction_failure_is_tolerated(store, clock, monkeypatch):
    write_json(store, content_key("hero"), {"n": 0})
    for _ in range(10):
        create_version(section="hero", editor=EDITOR)

    def broken_delete(keys):
        raise StorageError("simulated delete failure")

    monkeypatch.setattr(store, "delete", broken_delete)

    version_id = create_version(section="hero", editor=EDITOR)

    versions = list_versions(section="hero")
    assert version_id is not None
    assert len(versions) == 10
    assert versions[0].id == version_id


# ------------------------
# Index access
# ------------------------
def test_index_is_created_lazily(store):
    index = get_version_index(section="footer")

    assert index.versions == []
    assert json.loads(store.get(version_index_key("footer")).body) == {
        "section": "footer",
        "versions": [],
    }


def test_get_version_content(store, clock):
    write_json(store, content_key("about"), {"title": "Old"})
    version_id = create_version(section="about", editor=EDITOR)

    assert get_version_content(section="about", version_id=version_id) == {"title": "Old"}
    assert get_version_content(section="about", version_id="2001-01-01T00-00-00") is None


# ------------------------
# rollback_to_version
# ------------------------
def test_rollback_restores_bytes_and_backs_up_live_document(store, clock):
    write_json(store, content_key("hero"), {"subtitle": "one"})
    v1 = create_version(section="hero", editor=EDITOR)
    v1_bytes = store.get(version_key("hero", v1)).body
    write_json(store, content_key("hero"), {"subtitle": "two"})
    live_before = current_bytes(store)

    result = rollback_to_version(section="hero", version_id=v1, editor="b@x.com")

    assert current_bytes(store) == v1_bytes
    backup_id = result["backup_version_id"]
    assert result["restored_version_id"] == v1
    assert backup_id != v1
    assert store.get(version_key("hero", backup_id)).body == live_before

    newest = list_versions(section="hero")[0]
    assert newest.id == backup_id
    assert newest.created_by == "b@x.com"
    assert newest.note == f"Rollback to version {v1}"


def test_rollback_uses_custom_note(store, clock):
    write_json(store, content_key("hero"), {"subtitle": "one"})
    v1 = create_version(section="hero", editor=EDITOR)

    rollback_to_version(section="hero", version_id=v1, editor=EDITOR, note="undo typo")

    assert list_versions(section="hero")[0].note == "undo typo"


def test_rollback_to_unknown_version_mutates_nothing(store, clock):
    write_json(store, content_key("hero"), {"subtitle": "one"})
    create_version(section="hero", editor=EDITOR)
    content_before = current_bytes(store)
    index_before = store.get(version_index_key("hero")).body

    with pytest.raises(VersionNotFound):
        rollback_to_version(section="hero", version_id="1999-01-01T00-00-00", editor=EDITOR)

    assert current_bytes(store) == content_before
    assert store.get(version_index_key("hero")).body == index_before


def test_rollback_fails_when_backup_fails(store, clock, monkeypatch):
    write_json(store, content_key("hero"), {"subtitle": "one"})
    v1 = create_version(section="hero", editor=EDITOR)
    write_json(store, content_key("hero"), {"subtitle": "two"})
    content_before = current_bytes(store)
    index_before = store.get(version_index_key("hero")).body

    fail_puts(monkeypatch, store, is_snapshot_key)

    with pytest.raises(SnapshotFailed):
        rollback_to_version(section="hero", version_id=v1, editor=EDITOR)

    assert current_bytes(store) == content_before
    assert store.get(version_index_key("hero")).body == index_before


def test_rollback_write_failure_is_reported(store, clock, monkeypatch):
    write_json(store, content_key("hero"), {"subtitle": "one"})
    v1 = create_version(section="hero", editor=EDITOR)
    write_json(store, content_key("hero"), {"subtitle": "two"})
    content_before = current_bytes(store)

    fail_puts(monkeypatch, store, lambda key: key == content_key("hero"))

    with pytest.raises(WriteFailed):
        rollback_to_version(section="hero", version_id=v1, editor=EDITOR)

    assert current_bytes(store) == content_before


def test_rollback_to_oldest_version_survives_its_own_eviction(store, clock):
    write_json(store, content_key("hero"), {"n": 0})
    oldest = create_version(section="hero", editor=EDITOR)
    oldest_bytes = store.get(version_key("hero", oldest)).body
    for n in range(1, 10):
        write_json(store, content_key("hero"), {"n": n})
        create_version(section="hero", editor=EDITOR)

    rollback_to_version(section="hero", version_id=oldest, editor=EDITOR)

    assert current_bytes(store) == oldest_bytes
    assert len(list_versions(section="hero")) == 10
    assert oldest not in [e.id for e in list_versions(section="hero")]


def test_rollback_without_live_document_skips_backup(store, clock):
    write_json(store, content_key("clients"), {"title": "Clients"})
    v1 = create_version(section="clients", editor=EDITOR)
    store.delete(content_key("clients"))

    result = rollback_to_version(section="clients", version_id=v1, editor=EDITOR)

    assert result["backup_version_id"] is None
    assert json.loads(current_bytes(store, "clients")) == {"title": "Clients"}


@pytest.mark.parametrize("version_id", ["_index", "../hero", "2024-05-01T12-00-00\n", ""])
def test_rollback_rejects_ids_outside_the_version_format(store, clock, version_id):
    write_json(store, content_key("hero"), {"subtitle": "one"})
    create_version(section="hero", editor=EDITOR)
    content_before = current_bytes(store)
    index_before = store.get(version_index_key("hero")).body

    with pytest.raises(VersionNotFound):
        rollback_to_version(section="hero", version_id=version_id, editor=EDITOR)

    assert current_bytes(store) == content_before
    assert store.get(version_index_key("hero")).body == index_before


def test_rollback_lookup_failure_is_a_storage_error(store, clock, monkeypatch):
    write_json(store, content_key("hero"), {"subtitle": "one"})
    v1 = create_version(section="hero", editor=EDITOR)
    index_before = store.get(version_index_key("hero")).body
    original_get = store.get

    def broken_get(key):
        raise StorageError("simulated read failure")

    monkeypatch.setattr(store, "get", broken_get)

    with pytest.raises(StorageError):
        rollback_to_version(section="hero", version_id=v1, editor=EDITOR)

    assert original_get(version_index_key("hero")).body == index_before


def test_version_content_ignores_the_index_key(store, clock):
    write_json(store, content_key("hero"), {"subtitle": "one"})
    create_version(section="hero", editor=EDITOR)

    assert get_version_content(section="hero", version_id="_index") is None


def test_corrupt_snapshot_is_reported(store):
    store.put(version_key("hero", "2024-01-01T00-00-00"), b"not json")

    with pytest.raises(CorruptVersion):
        get_version_content(section="hero", version_id="2024-01-01T00-00-00")


# ------------------------
# Malformed index entries
# ------------------------
def write_broken_index(store, section="hero"):
    write_json(
        store,
        version_index_key(section),
        {
            "section": section,
            "versions": [{"id": "zz-broken", "createdAt": "x", "createdBy": EDITOR, "size": 1}],
        },
    )


def test_malformed_newest_id_fails_the_snapshot(store, clock):
    write_json(store, content_key("hero"), {"subtitle": "one"})
    write_broken_index(store)

    with pytest.raises(SnapshotFailed):
        create_version(section="hero", editor=EDITOR)


def test_malformed_id_is_listed_without_snapshot_time(store):
    write_broken_index(store)

    [entry] = list_versions(section="hero")

    assert normalize_version(entry)["snapshot_at"] is None


# ------------------------
# update_content
# ------------------------
def test_update_survives_snapshot_failure(store, clock, monkeypatch):
    write_json(store, content_key("hero"), {"subtitle": "one"})
    fail_puts(monkeypatch, store, lambda key: key.startswith("_versions/"))

    result = update_content(section="hero", document={"subtitle": "two"}, editor=EDITOR)

    assert result["version_created"] is None
    assert json.loads(current_bytes(store)) == {"subtitle": "two"}
    assert [k for k in store.keys() if k.startswith("_versions/")] == []


def test_update_survives_corrupt_index(store, clock):
    write_json(store, content_key("hero"), {"subtitle": "one"})
    write_broken_index(store)

    result = update_content(section="hero", document={"subtitle": "two"}, editor=EDITOR)

    assert result["version_created"] is None
    assert json.loads(current_bytes(store)) == {"subtitle": "two"}


def test_update_write_failure_keeps_previous_document(store, clock, monkeypatch):
    write_json(store, content_key("hero"), {"subtitle": "one"})
    content_before = current_bytes(store)
    fail_puts(monkeypatch, store, lambda key: key == content_key("hero"))

    with pytest.raises(WriteFailed):
        update_content(section="hero", document={"subtitle": "two"}, editor=EDITOR)

    assert current_bytes(store) == content_before


# ------------------------
# End to end
# ------------------------
def test_edit_then_rollback_scenario(store, clock):
    doc1 = {"subtitle": "doc1"}
    doc2 = {"subtitle": "doc2"}

    first = update_content(section="hero", document=doc1, editor=EDITOR)
    assert first["version_created"] is None
    assert list_versions(section="hero") == []

    second = update_content(section="hero", document=doc2, editor=EDITOR)
    v1 = second["version_created"]
    assert get_version_content(section="hero", version_id=v1) == doc1

    result = rollback_to_version(section="hero", version_id=v1, editor="b@x.com")

    assert json.loads(current_bytes(store)) == doc1
    versions = list_versions(section="hero")
    assert [e.id for e in versions] == [result["backup_version_id"], v1]
    assert get_version_content(section="hero", version_id=versions[0].id) == doc2
    assert get_version_content(section="hero", version_id=versions[1].id) == doc1

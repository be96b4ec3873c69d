"""Tests for fingerprint.changes: classification and refresh."""

import asyncio

import pytest

from graphkeeper.fingerprint import (
    ChangeKind,
    FileChange,
    classify_change,
    compute_hash,
    detect_changes,
    refresh_fingerprints,
)


class TestClassifyChange:
    """Stored digest vs fresh digest."""

    @pytest.mark.parametrize(
        "stored, current, expected",
        [
            ("h1", "h1", ChangeKind.UNCHANGED),
            ("h1", "h2", ChangeKind.MODIFIED),
            (None, "h1", ChangeKind.ADDED),
            ("h1", None, ChangeKind.DELETED),
            (None, None, ChangeKind.UNCHANGED),
        ],
    )
    def test_classification(self, stored, current, expected):
        assert classify_change(stored, current) is expected

    def test_is_change(self):
        assert not FileChange("/a", ChangeKind.UNCHANGED, "h").is_change
        assert FileChange("/a", ChangeKind.DELETED, None).is_change


class TestDetectChanges:
    """End-to-end detection against files on disk."""

    def test_new_file_is_added(self, fingerprints, tmp_path):
        path = tmp_path / "new.py"
        path.write_text("x = 1\n")

        changes = asyncio.run(detect_changes(fingerprints, [path]))

        assert [(c.path, c.kind) for c in changes] == [(str(path), ChangeKind.ADDED)]
        assert changes[0].digest == compute_hash("x = 1\n")

    def test_touch_without_edit_is_unchanged(self, fingerprints, tmp_path):
        path = tmp_path / "a.py"
        path.write_text("x = 1\n")
        fingerprints.update_file_snapshot(str(path), compute_hash("x = 1\n"))
        path.touch()

        changes = asyncio.run(detect_changes(fingerprints, [str(path)]))

        assert changes[0].kind is ChangeKind.UNCHANGED

    def test_edit_is_modified(self, fingerprints, tmp_path):
        path = tmp_path / "a.py"
        fingerprints.update_file_snapshot(str(path), compute_hash("x = 1\n"))
        path.write_text("x = 2\n")

        changes = asyncio.run(detect_changes(fingerprints, [str(path)]))

        assert changes[0].kind is ChangeKind.MODIFIED

    def test_line_ending_edit_is_modified(self, fingerprints, tmp_path):
        path = tmp_path / "a.py"
        path.write_bytes(b"x = 1\n")
        fingerprints.update_file_snapshot(str(path), compute_hash(b"x = 1\n"))
        path.write_bytes(b"x = 1\r\n")

        changes = asyncio.run(detect_changes(fingerprints, [str(path)]))

        assert changes[0].kind is ChangeKind.MODIFIED

    def test_non_utf8_edits_are_seen(self, fingerprints, tmp_path):
        path = tmp_path / "legacy.py"
        path.write_bytes("name = 'caf\xe9'\n".encode("latin-1"))

        first = asyncio.run(detect_changes(fingerprints, [str(path)]))
        assert first[0].kind is ChangeKind.ADDED
        refresh_fingerprints(fingerprints, first)

        path.write_bytes("name = 'na\xefve'\n".encode("latin-1"))
        second = asyncio.run(detect_changes(fingerprints, [str(path)]))

        assert second[0].kind is ChangeKind.MODIFIED

    def test_duplicate_paths_reported_once(self, fingerprints, tmp_path):
        path = tmp_path / "a.py"
        path.write_text("x = 1\n")

        changes = asyncio.run(detect_changes(fingerprints, [str(path), str(path)]))

        assert len(changes) == 1

    def test_missing_tracked_file_is_deleted(self, fingerprints, tmp_path):
        gone = str(tmp_path / "gone.py")
        fingerprints.update_file_snapshot(gone, "h1")

        changes = asyncio.run(detect_changes(fingerprints, []))

        assert [(c.path, c.kind) for c in changes] == [(gone, ChangeKind.DELETED)]

    def test_missing_tracked_can_be_skipped(self, fingerprints, tmp_path):
        fingerprints.update_file_snapshot(str(tmp_path / "gone.py"), "h1")

        changes = asyncio.run(
            detect_changes(fingerprints, [], include_missing_tracked=False)
        )

        assert changes == []

    def test_detection_does_not_persist(self, fingerprints, tmp_path):
        path = tmp_path / "a.py"
        path.write_text("x = 1\n")

        asyncio.run(detect_changes(fingerprints, [str(path)]))

        assert fingerprints.get_stored_hash(str(path)) is None


class TestRefreshFingerprints:
    """Writing fresh digests back."""

    def test_writes_added_and_modified(self, fingerprints):
        fingerprints.update_file_snapshot("/m.py", "old")
        changes = [
            FileChange("/a.py", ChangeKind.ADDED, "ha"),
            FileChange("/m.py", ChangeKind.MODIFIED, "new"),
            FileChange("/u.py", ChangeKind.UNCHANGED, "hu"),
        ]

        written = refresh_fingerprints(fingerprints, changes)

        assert written == 2
        assert fingerprints.get_all_snapshots() == {"/a.py": "ha", "/m.py": "new"}

    def test_removes_deleted(self, fingerprints):
        fingerprints.update_file_snapshot("/d.py", "h")

        written = refresh_fingerprints(
            fingerprints, [FileChange("/d.py", ChangeKind.DELETED, None)]
        )

        assert written == 1
        assert fingerprints.get_stored_hash("/d.py") is None

    def test_nothing_to_write(self, fingerprints):
        assert refresh_fingerprints(fingerprints, []) == 0

"""Tests for run summary fingerprinting and change detection."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from licenseplist.engines.summary import (
    compute_fingerprint,
    read_summary,
    should_skip,
    write_summary,
)
from licenseplist.exceptions import PersistenceError
from licenseplist.models import LibraryDescriptor, SourceKind


def _libs() -> list[LibraryDescriptor]:
    return [
        LibraryDescriptor("Alamofire", "5.0", SourceKind.REMOTE, "carthage", owner="Alamofire", repo="Alamofire"),
        LibraryDescriptor("SnapKit", "5.6", SourceKind.LOCAL, "cocoapods", license_body="MIT ..."),
    ]


class TestFingerprint:
    def test_deterministic(self):
        flags = {"single-page": False, "add-version-numbers": True}
        assert compute_fingerprint(_libs(), flags, "1.0") == compute_fingerprint(
            _libs(), dict(reversed(list(flags.items()))), "1.0"
        )

    def test_contents(self):
        text = compute_fingerprint(_libs(), {"add-version-numbers": False}, "1.2.3")
        parts = text.split("\n\n")
        assert parts[0] == "remote|Alamofire|5.0|Alamofire/Alamofire|"
        assert parts[1].startswith("local|SnapKit|5.6||")
        assert parts[-2] == "add-version-numbers: False"
        assert parts[-1] == "licenseplist version: 1.2.3"

    def test_body_is_hashed_not_embedded(self):
        text = compute_fingerprint(_libs(), {}, "1.0")
        assert "MIT ..." not in text

    def test_changes_with_body(self):
        libs = _libs()
        before = compute_fingerprint(libs, {}, "1.0")
        libs[1].license_body = "BSD ..."
        assert compute_fingerprint(libs, {}, "1.0") != before

    def test_changes_with_flags_and_version(self):
        base = compute_fingerprint(_libs(), {"add-version-numbers": False}, "1.0")
        assert compute_fingerprint(_libs(), {"add-version-numbers": True}, "1.0") != base
        assert compute_fingerprint(_libs(), {"add-version-numbers": False}, "2.0") != base

    def test_uses_renamed_name(self):
        lib = LibraryDescriptor("RxSwift", "6.0", SourceKind.REMOTE, "carthage", name_specified="Rx")
        assert compute_fingerprint([lib], {}, "1").startswith("remote|Rx|6.0")


class TestShouldSkip:
    def test_same_without_force(self):
        assert should_skip("a", "a", force=False) is True

    def test_same_with_force(self):
        assert should_skip("a", "a", force=True) is False

    def test_no_previous(self):
        assert should_skip("a", None, force=False) is False

    def test_changed(self):
        assert should_skip("a", "b", force=False) is False


class TestSummaryFile:
    def test_roundtrip_creates_directory(self, tmp_path):
        path = tmp_path / "out" / "prefix.latest_result.txt"
        write_summary(path, "fingerprint")
        assert read_summary(path) == "fingerprint"
        assert list(path.parent.iterdir()) == [path]

    def test_read_absent(self, tmp_path):
        assert read_summary(tmp_path / "missing.txt") is None

    def test_write_failure_raises(self, tmp_path):
        path = tmp_path / "summary.txt"
        with patch("pathlib.Path.write_text", side_effect=PermissionError("denied")):
            with pytest.raises(PersistenceError, match="denied"):
                write_summary(path, "x")

"""Tests for the plist, Markdown and HTML reporters."""

from __future__ import annotations

import plistlib

import pytest

from licenseplist.exceptions import PersistenceError
from licenseplist.models import LicenseRecord, SourceKind
from licenseplist.reporters import render_html, render_markdown, write_html, write_markdown, write_plist
from licenseplist.reporters.plist import item_file_name

_PREFIX = "com.example.Licenses"


def _records() -> list[LicenseRecord]:
    return [
        LicenseRecord("Alamofire", "5.0", "MIT <Alamofire>", SourceKind.REMOTE, "https://github.com/Alamofire/Alamofire"),
        LicenseRecord("Firebase/Core", None, "Apache", SourceKind.LOCAL),
        LicenseRecord("WebRTC", "M61", "BSD\n```code```", SourceKind.MANUAL),
    ]


class TestPlist:
    def test_root_and_items(self, tmp_path):
        root = write_plist(_records(), tmp_path, _PREFIX)
        assert root == tmp_path / f"{_PREFIX}.plist"

        doc = plistlib.loads(root.read_bytes())
        specifiers = doc["PreferenceSpecifiers"]
        assert [s["Title"] for s in specifiers] == ["Alamofire", "Firebase/Core", "WebRTC"]
        assert {s["Type"] for s in specifiers} == {"PSChildPaneSpecifier"}
        assert specifiers[1]["File"] == f"{_PREFIX}/Firebase-Core"

        item = plistlib.loads((tmp_path / _PREFIX / "Alamofire.plist").read_bytes())
        assert item["PreferenceSpecifiers"][0]["FooterText"] == "MIT <Alamofire>"

    def test_version_numbers(self, tmp_path):
        write_plist(_records(), tmp_path, _PREFIX, add_version_numbers=True)
        doc = plistlib.loads((tmp_path / f"{_PREFIX}.plist").read_bytes())
        titles = [s["Title"] for s in doc["PreferenceSpecifiers"]]
        assert titles == ["Alamofire (5.0)", "Firebase/Core", "WebRTC (M61)"]

    def test_single_page(self, tmp_path):
        write_plist(_records(), tmp_path, _PREFIX, single_page=True)
        doc = plistlib.loads((tmp_path / f"{_PREFIX}.plist").read_bytes())
        specifiers = doc["PreferenceSpecifiers"]
        assert {s["Type"] for s in specifiers} == {"PSGroupSpecifier"}
        assert specifiers[2]["FooterText"].startswith("BSD")
        assert list((tmp_path / _PREFIX).iterdir()) == []

    def test_stale_items_removed(self, tmp_path):
        items = tmp_path / _PREFIX
        items.mkdir()
        (items / "Old.plist").write_text("stale")
        write_plist(_records()[:1], tmp_path, _PREFIX)
        assert sorted(p.name for p in items.iterdir()) == ["Alamofire.plist"]

    def test_rewrite_is_byte_identical(self, tmp_path):
        write_plist(_records(), tmp_path, _PREFIX)
        first = (tmp_path / f"{_PREFIX}.plist").read_bytes()
        write_plist(_records(), tmp_path, _PREFIX)
        assert (tmp_path / f"{_PREFIX}.plist").read_bytes() == first

    def test_control_characters_are_sanitized(self, tmp_path):
        records = [LicenseRecord("GPL\x01Lib", None, "GPL\x0cpage two\x00", SourceKind.REMOTE)]
        write_plist(records, tmp_path, _PREFIX)
        doc = plistlib.loads((tmp_path / f"{_PREFIX}.plist").read_bytes())
        assert doc["PreferenceSpecifiers"][0]["Title"] == "GPLLib"
        item = plistlib.loads((tmp_path / _PREFIX / "GPLLib.plist").read_bytes())
        assert item["PreferenceSpecifiers"][0]["FooterText"] == "GPL\npage two"

        write_plist(records, tmp_path, _PREFIX, single_page=True)
        doc = plistlib.loads((tmp_path / f"{_PREFIX}.plist").read_bytes())
        assert doc["PreferenceSpecifiers"][0]["FooterText"] == "GPL\npage two"

    def test_unserializable_record_is_persistence_error(self, tmp_path):
        records = [LicenseRecord("Odd", None, 42, SourceKind.MANUAL)]
        with pytest.raises(PersistenceError):
            write_plist(records, tmp_path, _PREFIX, single_page=True)

    def test_item_file_name(self):
        assert item_file_name(_records()[1]) == "Firebase-Core"


class TestMarkdown:
    def test_render(self):
        text = render_markdown(_records(), add_version_numbers=True)
        assert text.startswith("# Acknowledgements\n")
        assert "## [Alamofire (5.0)](https://github.com/Alamofire/Alamofire)\n" in text
        assert "## Firebase/Core\n" in text
        # body containing a triple backtick gets a longer fence
        assert "````\nBSD\n```code```\n````" in text

    def test_write(self, tmp_path):
        path = tmp_path / "docs" / "LICENSES.md"
        write_markdown(_records(), path)
        assert path.read_text().count("## ") == 3


class TestHtml:
    def test_escapes_and_links(self):
        text = render_html(_records())
        assert "MIT &lt;Alamofire&gt;" in text
        assert '<a href="https://github.com/Alamofire/Alamofire">Alamofire</a>' in text
        assert text.count("<h2>") == 3

    def test_write(self, tmp_path):
        path = tmp_path / "licenses.html"
        write_html(_records(), path, add_version_numbers=True)
        assert "WebRTC (M61)" in path.read_text()

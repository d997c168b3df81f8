"""Tests for icon deduplication."""

import http.client
import logging
from pathlib import Path

import pytest

from model_docgen.nodes.base_node import DocumentationNode
from model_docgen.output.artifacts import OutputFolder
from model_docgen.output.icon_manager import IconManager, candidate_name, to_base36
from model_docgen.output.site_builder import SiteBuilder


@pytest.fixture
def icon_dir(tmp_path):
    """Two distinct icons that share the file name 'a.png'."""
    for sub in ('one', 'two'):
        (tmp_path / sub).mkdir()
        (tmp_path / sub / 'a.png').write_bytes(sub.encode())
    return tmp_path


class TestIconManager:

    def setup_method(self):
        self.folder = OutputFolder('icons')
        self.manager = IconManager(self.folder)

    def test_same_icon_stored_once(self, icon_dir):
        first = self.manager(icon_dir / 'one' / 'a.png')
        second = self.manager(icon_dir / 'one' / 'a.png')
        assert first == second == 'icons/a.png'
        assert len(self.folder.children) == 1
        assert self.manager.stored_count == 1

    def test_name_collision_gets_counter_suffix(self, icon_dir):
        assert self.manager(icon_dir / 'one' / 'a.png') == 'icons/a.png'
        assert self.manager(icon_dir / 'two' / 'a.png') == 'icons/a-1.png'
        assert self.folder.get('a.png').data == b'one'
        assert self.folder.get('a-1.png').data == b'two'

    def test_counter_uses_base36(self, tmp_path):
        for i in range(12):
            d = tmp_path / str(i)
            d.mkdir()
            (d / 'x.gif').write_bytes(bytes([i]))
            self.manager(d / 'x.gif')
        assert self.folder.get('x-9.gif') is not None
        assert self.folder.get('x-a.gif') is not None
        assert self.folder.get('x-b.gif') is not None

    def test_unrecognized_icons_yield_none(self):
        assert self.manager(None) is None
        assert self.manager('icons/relative.png') is None
        assert self.manager('ftp://example.org/a.png') is None
        assert self.manager(42) is None
        assert self.manager(['not', 'hashable']) is None
        assert self.folder.is_empty()

    def test_unreadable_icon_logs_warning(self, tmp_path, caplog):
        missing = tmp_path / 'missing.png'
        with caplog.at_level(logging.WARNING):
            assert self.manager(missing) is None
            assert self.manager(missing) is None
        assert caplog.text.count('Unable to store icon') == 1
        assert self.folder.is_empty()

    def test_file_url(self, icon_dir):
        url = (icon_dir / 'one' / 'a.png').as_uri()
        assert self.manager(url) == 'icons/a.png'
        assert self.folder.get('a.png').data == b'one'

    def test_url_and_path_to_same_file_are_distinct_icons(self, icon_dir):
        path = icon_dir / 'one' / 'a.png'
        assert self.manager(path) == 'icons/a.png'
        assert self.manager(path.as_uri()) == 'icons/a-1.png'

    def test_http_protocol_error_is_not_fatal(self, monkeypatch, caplog):
        def incomplete(icon):
            raise http.client.IncompleteRead(b'', 10)

        monkeypatch.setattr(self.manager, '_fetch', incomplete)
        with caplog.at_level(logging.WARNING):
            assert self.manager('https://example.org/a.png') is None
        assert 'Unable to store icon' in caplog.text
        assert self.folder.is_empty()

    def test_dot_file_collision_keeps_extension(self, monkeypatch):
        monkeypatch.setattr(self.manager, '_fetch', lambda icon: b'png')
        assert self.manager('https://example.org/one/.png') == 'icons/.png'
        assert self.manager('https://example.org/two/.png') == 'icons/-1.png'

    def test_name_without_extension_collision(self, monkeypatch):
        monkeypatch.setattr(self.manager, '_fetch', lambda icon: b'png')
        assert self.manager('https://example.org/one/logo') == 'icons/logo'
        assert self.manager('https://example.org/two/logo') == 'icons/logo-1'


class TestEncodedSeparators:
    """Encoded path separators never leave the icons folder."""

    def test_encoded_parent_segments_stripped(self):
        assert candidate_name('https://example.org/img/..%2F..%2Fescaped.png') == 'escaped.png'
        assert candidate_name('https://example.org/img/..%5C..%5Cescaped.png') == 'escaped.png'

    def test_dot_segments_fall_back_to_icon(self):
        assert candidate_name('https://example.org/img/%2E%2E') == 'icon'
        assert candidate_name('https://example.org/img/..%2F') == 'icon'
        assert candidate_name(Path('..')) == 'icon'

    def test_site_write_stays_in_output_dir(self, tmp_path, monkeypatch):
        monkeypatch.setattr(IconManager, '_fetch', staticmethod(lambda icon: b'png'))
        root = DocumentationNode('root')
        root.add_child(DocumentationNode('a', 'https://example.org/img/..%2F..%2Fescaped.png'))
        folder = OutputFolder()
        index = SiteBuilder(root).build(folder)

        out = tmp_path / 'site' / 'out'
        folder.write(str(out))
        assert index.tree[0]['icon'] == 'icons/escaped.png'
        assert (out / 'icons' / 'escaped.png').is_file()
        assert not (tmp_path / 'site' / 'escaped.png').exists()
        assert not (tmp_path / 'escaped.png').exists()


class TestHelpers:

    def test_to_base36(self):
        assert to_base36(0) == '0'
        assert to_base36(9) == '9'
        assert to_base36(10) == 'a'
        assert to_base36(35) == 'z'
        assert to_base36(36) == '10'
        assert to_base36(1295) == 'zz'

    def test_candidate_name(self):
        assert candidate_name(Path('/x/y/book.png')) == 'book.png'
        assert candidate_name('https://example.org/img/my%20icon.svg?v=2') == 'my icon.svg'
        assert candidate_name('http://example.org/') == 'icon'
        assert candidate_name('book.png') is None
        assert candidate_name(object()) is None

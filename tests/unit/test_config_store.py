"""
Unit tests for the properties-file config store
"""
import threading
import uuid

import pytest

from statslite.config import Config, ConfigStore, DEFAULT_CONFIG_FILE, HEADER, parse_properties
from statslite.errors import ConfigIOError


class TestFirstReload:
    """Test config creation on first use"""

    def test_creates_file_with_new_guid(self, config_path):
        """Missing file is created with opt-out disabled and a fresh UUID"""
        config = ConfigStore(config_path).reload()

        assert config_path.exists()
        assert config.opt_out is False
        assert str(uuid.UUID(config.unique_id)) == config.unique_id

        text = config_path.read_text()
        assert text.startswith(f"#{HEADER}")
        assert "opt-out=false" in text
        assert f"guid={config.unique_id}" in text

    def test_round_trip(self, config_path):
        """Reloading a fresh config yields the same values"""
        store = ConfigStore(config_path)
        created = store.reload()
        reloaded = ConfigStore(config_path).reload()

        assert reloaded == created
        assert reloaded.opt_out is False

    def test_reload_is_idempotent(self, config_path):
        """Repeated reloads of an unchanged file are equal"""
        store = ConfigStore(config_path)
        store.reload()

        assert store.reload() == store.reload()

    def test_creates_missing_directories(self, tmp_path):
        """Parent directories are created for the config file"""
        store = ConfigStore.in_directory(tmp_path / "plugins" / "Example")
        store.reload()

        assert store.path == tmp_path / "plugins" / "Example" / DEFAULT_CONFIG_FILE
        assert store.path.exists()


class TestParsing:
    """Test reading existing config files"""

    def test_opt_out_true(self, config_path):
        config_path.write_text("opt-out=true\nguid=abc\n")
        assert ConfigStore(config_path).reload() == Config(opt_out=True, unique_id="abc")

    def test_opt_out_case_insensitive(self, config_path):
        config_path.write_text("opt-out = TRUE\nguid=abc\n")
        assert ConfigStore(config_path).reload().opt_out is True

    def test_malformed_opt_out_defaults_false(self, config_path):
        config_path.write_text("opt-out=yes please\nguid=abc\n")
        assert ConfigStore(config_path).reload().opt_out is False

    def test_missing_guid_is_not_regenerated(self, config_path):
        """An existing file without guid passes through None"""
        config_path.write_text("opt-out=false\n")
        config = ConfigStore(config_path).reload()

        assert config.unique_id is None
        assert "guid" not in config_path.read_text()

    def test_external_opt_out_edit_is_seen(self, config_path):
        store = ConfigStore(config_path)
        guid = store.reload().unique_id

        config_path.write_text(f"opt-out=true\nguid={guid}\n")

        assert store.reload() == Config(opt_out=True, unique_id=guid)

    def test_parse_properties_comments_and_separators(self):
        text = "# comment\n! other comment\n\nopt-out: true\nguid=a=b\nflag\n"
        assert parse_properties(text) == {"opt-out": "true", "guid": "a=b", "flag": ""}


class TestSetOptOut:
    """Test persisting the opt-out flag"""

    def test_set_opt_out_keeps_guid(self, config_path):
        store = ConfigStore(config_path)
        guid = store.reload().unique_id

        updated = store.set_opt_out(True)

        assert updated == Config(opt_out=True, unique_id=guid)
        assert store.reload() == updated
        assert "opt-out=true" in config_path.read_text()

    def test_concurrent_reload_never_sees_partial_file(self, config_path):
        """Readers see either the old or the new file, never an empty one"""
        store = ConfigStore(config_path)
        guid = store.reload().unique_id
        done = threading.Event()
        reading = threading.Event()
        seen = []

        def read_loop():
            reader = ConfigStore(config_path)
            while not done.is_set():
                seen.append(reader.reload())
                reading.set()

        reader_thread = threading.Thread(target=read_loop, daemon=True)
        reader_thread.start()
        assert reading.wait(2.0)
        try:
            for i in range(200):
                store.set_opt_out(i % 2 == 0)
        finally:
            done.set()
            reader_thread.join(timeout=5.0)

        assert seen
        assert all(config.unique_id == guid for config in seen)

    def test_no_temporary_files_left(self, config_path):
        store = ConfigStore(config_path)
        store.reload()
        store.set_opt_out(True)
        store.set_opt_out(False)

        assert [p.name for p in config_path.parent.iterdir()] == [config_path.name]


class TestIOErrors:
    """Test I/O failure handling"""

    def test_unreadable_path_raises(self, tmp_path):
        """A directory in place of the file cannot be read"""
        path = tmp_path / "statslite.properties"
        path.mkdir()

        with pytest.raises(ConfigIOError):
            ConfigStore(path).reload()

    def test_unwritable_parent_raises(self, tmp_path):
        """Creating the file under a regular file fails"""
        blocker = tmp_path / "blocker"
        blocker.write_text("")

        with pytest.raises(ConfigIOError) as excinfo:
            ConfigStore(blocker / "statslite.properties").reload()

        assert isinstance(excinfo.value.__cause__, OSError)

"""
Unit tests for jobhub/config.py
"""

from pathlib import Path

from jobhub.config import DEFAULT_API_URL, ROOT_DIR, Settings, ensure_dirs, load_settings


def write_yaml(tmp_path, text):
    path = tmp_path / "settings.yaml"
    path.write_text(text, encoding="utf-8")
    return path


class TestLoadSettings:
    def test_missing_file_gives_defaults(self, tmp_path):
        settings = load_settings(tmp_path / "absent.yaml")

        assert settings.api_url == DEFAULT_API_URL
        assert settings.fetch_attempts == 1
        assert settings.use_mock is False

    def test_yaml_values(self, tmp_path):
        path = write_yaml(tmp_path, f"api_url: https://a.test\nfetch_timeout: 5\nuse_mock: yes\ndata_dir: {tmp_path}\n")
        settings = load_settings(path)

        assert settings.api_url == "https://a.test"
        assert settings.fetch_timeout == 5.0
        assert settings.use_mock is True
        assert settings.data_dir == tmp_path

    def test_environment_overrides_yaml(self, tmp_path, monkeypatch):
        path = write_yaml(tmp_path, "api_url: https://a.test\nfetch_attempts: 2\n")
        monkeypatch.setenv("JOBHUB_API_URL", "https://b.test")
        monkeypatch.setenv("JOBHUB_API_KEY", " key ")
        monkeypatch.setenv("JOBHUB_USE_MOCK", "false")

        settings = load_settings(path)

        assert settings.api_url == "https://b.test"
        assert settings.api_key == "key"
        assert settings.fetch_attempts == 2
        assert settings.use_mock is False

    def test_invalid_numbers_fall_back(self, tmp_path):
        path = write_yaml(tmp_path, "fetch_timeout: soon\nfetch_attempts: many\n")
        settings = load_settings(path)

        assert settings.fetch_timeout == Settings().fetch_timeout
        assert settings.fetch_attempts == 1

    def test_attempts_are_at_least_one(self, tmp_path, monkeypatch):
        monkeypatch.setenv("JOBHUB_FETCH_ATTEMPTS", "0")
        assert load_settings(tmp_path / "absent.yaml").fetch_attempts == 1

    def test_relative_data_dir_is_under_root(self, tmp_path):
        path = write_yaml(tmp_path, "data_dir: var/jobs\n")
        assert load_settings(path).data_dir == ROOT_DIR / "var" / "jobs"

    def test_non_mapping_yaml_is_ignored(self, tmp_path):
        path = write_yaml(tmp_path, "- just\n- a list\n")
        assert load_settings(path) == load_settings(tmp_path / "absent.yaml")


def test_ensure_dirs(tmp_path):
    target = tmp_path / "nested" / "data"
    ensure_dirs(Settings(data_dir=Path(target)))
    assert target.is_dir()

from pathlib import Path

from droid_factory.factory_settings import (
    default_settings_path,
    read_custom_droids_setting,
    strip_json_comments,
)


def test_default_settings_path(monkeypatch, tmp_path):
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
    assert default_settings_path() == tmp_path / ".factory" / "settings.json"


def test_enabled(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text('{"enableCustomDroids": true}')
    setting = read_custom_droids_setting(path)
    assert setting.enabled
    assert not setting.missing
    assert setting.error is None


def test_enabled_with_comments(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(
        "/* Factory settings */\n"
        "{\n"
        "  // toggled from /settings\n"
        '  "enableCustomDroids": true,\n'
        '  "url": "https://example.com"\n'
        "}\n"
    )
    assert read_custom_droids_setting(path).enabled


def test_truthy_string_is_not_enabled(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text('{"enableCustomDroids": "true"}')
    assert not read_custom_droids_setting(path).enabled


def test_missing(tmp_path):
    setting = read_custom_droids_setting(tmp_path / "settings.json")
    assert setting.missing
    assert not setting.enabled


def test_invalid_json(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{oops")
    setting = read_custom_droids_setting(path)
    assert not setting.enabled
    assert setting.error.startswith("Invalid JSON")


def test_strip_json_comments_keeps_urls():
    text = '{"a": "https://x.y/z"} // trailing is kept'
    assert strip_json_comments(text) == text

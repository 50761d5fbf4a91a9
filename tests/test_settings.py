import os

from thumbgen.settings import load_settings

ENV_VARS = ("THUMBGEN_TEMPLATES_DIR", "THUMBGEN_FONTS_DIR", "THUMBGEN_OUTPUT_DIR", "THUMBGEN_SEED")


def clear_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults_are_relative_to_base_dir(tmp_path, monkeypatch):
    clear_env(monkeypatch)
    settings = load_settings(tmp_path)
    assert settings.templates_dir == tmp_path / "templates"
    assert settings.fonts_dir == tmp_path / "assets" / "fonts"
    assert settings.output_dir == tmp_path / "out"
    assert settings.seed is None


def test_environment_overrides(tmp_path, monkeypatch):
    clear_env(monkeypatch)
    monkeypatch.setenv("THUMBGEN_OUTPUT_DIR", str(tmp_path / "elsewhere"))
    monkeypatch.setenv("THUMBGEN_TEMPLATES_DIR", "my-templates")
    monkeypatch.setenv("THUMBGEN_SEED", "42")

    settings = load_settings(tmp_path)
    assert settings.output_dir == tmp_path / "elsewhere"
    assert settings.templates_dir == tmp_path / "my-templates"
    assert settings.seed == 42


def test_invalid_seed_is_ignored(tmp_path, monkeypatch, capsys):
    clear_env(monkeypatch)
    monkeypatch.setenv("THUMBGEN_SEED", "lucky")
    assert load_settings(tmp_path).seed is None
    assert "WARNING" in capsys.readouterr().out


def test_dotenv_file_is_read(tmp_path, monkeypatch):
    clear_env(monkeypatch)
    (tmp_path / ".env").write_text("THUMBGEN_SEED=7\n", encoding="utf-8")
    try:
        assert load_settings(tmp_path).seed == 7
    finally:
        os.environ.pop("THUMBGEN_SEED", None)

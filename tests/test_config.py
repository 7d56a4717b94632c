"""Tests for settings resolution (env > .env > defaults)."""

from pathlib import Path

from opc.config import DEFAULT_BASE_URL, DEFAULT_CONTENT_DIR, load_settings, read_env_file


def test_defaults(tmp_path: Path) -> None:
    settings = load_settings(environ={}, env_file=tmp_path / ".env")
    assert settings.content_dir == DEFAULT_CONTENT_DIR
    assert settings.base_url == DEFAULT_BASE_URL
    assert settings.author == "博主"
    assert settings.strict is False


def test_env_file_values(tmp_path: Path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text(
        "# local overrides\n"
        "OPC_CONTENT_DIR=/srv/blog\n"
        "OPC_BASE_URL=\"https://example.org/blog/\"\n"
        "OPC_STRICT=yes\n"
        "UNRELATED=1\n"
        "not a setting line\n",
        encoding="utf-8",
    )
    settings = load_settings(environ={}, env_file=env_file)
    assert settings.content_dir == Path("/srv/blog")
    assert settings.base_url == "https://example.org/blog/"
    assert settings.strict is True
    assert "UNRELATED" not in read_env_file(env_file)


def test_environment_beats_env_file(tmp_path: Path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("OPC_AUTHOR=file\nOPC_STRICT=1\n", encoding="utf-8")
    settings = load_settings(environ={"OPC_AUTHOR": "env", "OPC_STRICT": "0"}, env_file=env_file)
    assert settings.author == "env"
    assert settings.strict is False

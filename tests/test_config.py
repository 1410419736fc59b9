import os

import pytest

from configurations.config import DEFAULT_GROUPING_COLUMNS, load_settings

ENV_VARS = [
    "SPLITTER_GROUPING_COLUMNS",
    "SPLITTER_PRIMARY_ENCODING",
    "SPLITTER_FALLBACK_ENCODING",
    "SPLITTER_ARCHIVE_NAME",
    "SPLITTER_LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # keep a stray .env in the working directory out of the tests
    monkeypatch.chdir(tmp_path)
    yield
    # load_dotenv writes straight into os.environ
    for name in ENV_VARS:
        os.environ.pop(name, None)


def test_defaults(tmp_path):
    settings = load_settings(str(tmp_path / "missing.env"))
    assert settings.grouping_columns == DEFAULT_GROUPING_COLUMNS
    assert settings.primary_encoding == "utf-8-sig"
    assert settings.fallback_encoding == "latin-1"
    assert settings.archive_name == "planilhas_por_operadora.zip"
    assert settings.log_level == "INFO"


def test_values_from_env_file(tmp_path):
    env = tmp_path / ".env"
    env.write_text(
        "SPLITTER_GROUPING_COLUMNS=Loja; Filial\n"
        "SPLITTER_FALLBACK_ENCODING=cp1252\n"
        "SPLITTER_ARCHIVE_NAME=lojas.zip\n"
        "SPLITTER_LOG_LEVEL=debug\n"
    )
    settings = load_settings(str(env))
    assert settings.grouping_columns == ("Loja", "Filial")
    assert settings.fallback_encoding == "cp1252"
    assert settings.archive_name == "lojas.zip"
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize("name, value", [
    ("SPLITTER_PRIMARY_ENCODING", "not-an-encoding"),
    ("SPLITTER_ARCHIVE_NAME", "out.tar"),
    ("SPLITTER_LOG_LEVEL", "LOUD"),
])
def test_invalid_values_are_rejected(monkeypatch, tmp_path, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(RuntimeError):
        load_settings(str(tmp_path / "missing.env"))

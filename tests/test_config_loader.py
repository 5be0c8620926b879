import os

from knowledge_base.utils.config_loader import DEFAULT_DATABASE_URL, load_config


def test_load_config_defaults(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)

    config = load_config()

    assert config.database_url == DEFAULT_DATABASE_URL
    assert config.export_dir == "exports"
    assert config.log_level == "INFO"


def test_load_config_reads_yaml_section(monkeypatch, tmp_path):
    config_file = tmp_path / "kb.yaml"
    config_file.write_text(
        "knowledge_base:\n  database_url: sqlite://custom.db\n  export_dir: out\n"
    )
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("KB_CONFIG_PATH", str(config_file))

    config = load_config()

    assert config.database_url == "sqlite://custom.db"
    assert config.export_dir == "out"


def test_environment_overrides_yaml(monkeypatch, tmp_path):
    config_file = tmp_path / "kb.yaml"
    config_file.write_text("knowledge_base:\n  log_level: WARNING\n")
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("KB_CONFIG_PATH", str(config_file))
    monkeypatch.setenv("KB_LOG_LEVEL", "DEBUG")

    assert load_config().log_level == "DEBUG"


def test_dotenv_file_is_loaded(monkeypatch, tmp_path):
    (tmp_path / ".env").write_text("KB_EXPORT_DIR=from-dotenv\n")
    monkeypatch.chdir(tmp_path)

    try:
        assert load_config().export_dir == "from-dotenv"
    finally:
        os.environ.pop("KB_EXPORT_DIR", None)

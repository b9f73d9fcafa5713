"""Unit tests for application settings configuration."""

from pathlib import Path

from atelier.config import Settings


def test_settings_uses_backend_env_file_independent_of_cwd():
    """Settings should always include backend/.env as an env source."""
    env_files = Settings.model_config.get("env_file")
    assert env_files is not None

    normalized = {str(Path(item)) for item in env_files}
    expected_backend_env = str(Path(__file__).resolve().parents[2] / ".env")

    assert expected_backend_env in normalized
    assert str(Path(".env")) in normalized


def test_unknown_store_backend_falls_back_to_sql():
    assert Settings(store_backend=" Memory ").store_backend == "memory"
    assert Settings(store_backend="redis").store_backend == "sql"


def test_default_seed_file_lives_in_backend_data():
    seed_file = Path(Settings().seed_file)
    assert seed_file.name == "seed.yaml"
    assert seed_file.parent == Path(__file__).resolve().parents[2] / "data"
    assert seed_file.exists()

import pytest


@pytest.fixture
def progress_file(tmp_path):
    return tmp_path / "progress.json"


@pytest.fixture
def cli_args(mock_home, progress_file, catalog_file, tmp_path, monkeypatch):
    """Global options pointing the CLI at temp storage and the test catalog."""
    monkeypatch.setenv("RIL_SANDBOX_DIR", str(tmp_path / "sandbox"))
    return ["--storage", str(progress_file), "--catalog", str(catalog_file)]

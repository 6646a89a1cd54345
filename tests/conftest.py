"""Global test configuration for codemosaic tests."""

import pytest


@pytest.fixture
def write_source(tmp_path):
    """Write a source file under tmp_path/src and return its path."""
    src_dir = tmp_path / "src"
    src_dir.mkdir(exist_ok=True)

    def _write(name: str, content) -> object:
        path = src_dir / name
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_bytes(content.encode("utf-8"))
        return path

    return _write


@pytest.fixture
def out_dir(tmp_path):
    """Existing, empty output directory."""
    path = tmp_path / "out"
    path.mkdir()
    return path


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    """Run from an empty directory with no CodeMosaic env overrides."""
    for name in (
        "SPLIT_PART_COUNT",
        "SPLIT_MAX_SIZE_MB",
        "SPLIT_MAX_CHARS",
        "SPLIT_BASE_NAME",
        "SPLIT_ENCODING",
        "SCAN_EXTENSIONS",
        "COMBINE_OUTPUT_NAME",
        "LIST_OUTPUT_NAME",
        "LOG_FORMAT",
    ):
        monkeypatch.delenv(name, raising=False)
    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    return workdir

"""
Shared fixtures for quarantine tests.
Creates isolated temporary directories with controlled test files.
"""
import pytest
import tempfile
from pathlib import Path
from typing import Dict
import sys

# Add src/ to sys.path so 'quarantiner' is importable without installation
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))


@pytest.fixture
def temp_dir():
    """Creates isolated temporary directory, auto-cleanup after test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def test_files(temp_dir) -> Dict[str, Path]:
    """
    Creates controlled test files:
    - a.txt and b.txt with identical content ("hello")
    - c.txt with different content ("world")
    - subdir/d.txt, a third copy of "hello", only visible when recursing
    - subdir/e.bin with unique content
    """
    files = {}

    files["a"] = temp_dir / "a.txt"
    files["b"] = temp_dir / "b.txt"
    files["c"] = temp_dir / "c.txt"
    files["a"].write_bytes(b"hello")
    files["b"].write_bytes(b"hello")
    files["c"].write_bytes(b"world")

    subdir = temp_dir / "subdir"
    subdir.mkdir()
    files["d"] = subdir / "d.txt"
    files["d"].write_bytes(b"hello")
    files["e"] = subdir / "e.bin"
    files["e"].write_bytes(b"unique payload")

    return files

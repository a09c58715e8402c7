from pathlib import Path

import pytest

from dfr_mcp.server import build_server


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A DFR project tree: PRPs, src, assets, docs."""
    prps = tmp_path / "PRPs"
    prps.mkdir()
    (prps / "a.md").write_text("# Combat system\n\nFrame data first.\n", encoding="utf-8")
    (prps / "stances.md").write_text("Light / Dark stance: 光\n", encoding="utf-8")
    (prps / "b.txt").write_text("not a prp", encoding="utf-8")
    (prps / "characters").mkdir()
    (prps / "characters" / "template.md").write_text("nested", encoding="utf-8")

    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "main.cpp").write_text("int main() {}", encoding="utf-8")
    (tmp_path / "src" / "Combat").mkdir()
    (tmp_path / "assets").mkdir()
    (tmp_path / "assets" / "logo.png").write_bytes(b"\x89PNG")
    (tmp_path / "docs").mkdir()

    (tmp_path / "secret.md").write_text("outside", encoding="utf-8")
    return tmp_path


@pytest.fixture
def server(project):
    return build_server(project)

import pytest
from pathlib import Path
from types import SimpleNamespace

from skills_manager.models import Source

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def write_skill(root: Path, dirname: str, name: str | None = None, description: str = "") -> str:
    """Create ``root/dirname/SKILL.md`` and return the skill's canonical path."""
    skill_dir = root / dirname
    skill_dir.mkdir(parents=True, exist_ok=True)
    lines = ["---"]
    if name:
        lines.append(f"name: {name}")
    if description:
        lines.append(f"description: {description}")
    lines += ["---", "", f"# {name or dirname}", ""]
    (skill_dir / "SKILL.md").write_text("\n".join(lines))
    return str(skill_dir.resolve())


@pytest.fixture
def fixtures_dir():
    return FIXTURES_DIR


@pytest.fixture
def make_skill():
    return write_skill


@pytest.fixture
def workspace(tmp_path):
    """A source directory and two (empty) target directories."""
    source_dir = tmp_path / "source"
    source_dir.mkdir()
    targets = [tmp_path / "target-a", tmp_path / "target-b"]
    for target in targets:
        target.mkdir()
    return SimpleNamespace(
        root=tmp_path,
        source_dir=source_dir,
        source=Source(name="local", path=str(source_dir)),
        targets=[str(t) for t in targets],
    )

"""Data model for skills, sources, targets and named collections."""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

TargetStatus = Literal["installed", "disabled", "not-installed"]

DEFINITION_FILE = "SKILL.md"
DISABLED_DIR = ".disabled"


@dataclass
class Source:
    """A directory tree scanned for skill definitions."""
    name: str
    path: str
    recursive: bool = False
    url: str | None = None


@dataclass
class RawSkillRecord:
    """One discovered definition file, before reconciliation with targets."""
    name: str
    description: str
    source_path: str
    source_name: str
    install_name: str = ""

    def __post_init__(self):
        if not self.install_name:
            self.install_name = Path(self.source_path).name


@dataclass
class InstalledEntry:
    """A symlink or directory found at the top level of a target (or its .disabled dir)."""
    name: str
    target_path: str
    full_path: str
    real_path: str | None
    disabled: bool
    is_symlink: bool


@dataclass
class Skill:
    """A reconciled skill with its per-target install state."""
    name: str
    description: str
    source_path: str
    source_name: str
    install_name: str = ""
    installed: bool = False
    disabled: bool = False
    target_status: dict[str, TargetStatus] = field(default_factory=dict)

    @property
    def skill_id(self) -> str:
        return self.source_path

    @property
    def enabled(self) -> bool:
        return self.installed and not self.disabled

    def link_name(self) -> str:
        """Directory name used for this skill inside each target."""
        return self.install_name or Path(self.source_path).name

    def refresh_flags(self):
        """Recompute ``installed``/``disabled`` from ``target_status``."""
        matched = [s for s in self.target_status.values() if s != "not-installed"]
        self.installed = bool(matched)
        self.disabled = self.installed and all(s == "disabled" for s in matched)


@dataclass
class NamedSkillGroup:
    """A user-defined collection of skill ids (canonical source paths)."""
    name: str
    skill_ids: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"name": self.name, "skill_ids": list(self.skill_ids)}

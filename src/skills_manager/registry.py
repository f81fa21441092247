"""Skill registry: the reconciled skills of one scan, keyed by canonical path."""
import os

from skills_manager.models import Skill, Source
from skills_manager.naming import canonical_path, name_sort_key
from skills_manager.scanner import scan


def sort_skills(skills: list[Skill]) -> list[Skill]:
    return sorted(skills, key=lambda s: name_sort_key(s.name))


class SkillRegistry:
    """Loads and reconciles skills from sources and targets."""

    def __init__(self, sources: list[Source], targets: list[str]):
        self.sources = list(sources)
        self.targets = list(targets)
        self.skills: dict[str, Skill] = {}
        self.refresh()

    def refresh(self):
        """Re-scan the filesystem, replacing every skill record."""
        self.skills = {skill.source_path: skill for skill in scan(self.sources, self.targets)}

    def get(self, skill_id: str) -> Skill | None:
        return self.skills.get(canonical_path(skill_id))

    def find(self, query: str) -> Skill | None:
        """Look a skill up by source path, declared name or install name.

        Only queries that look like paths are resolved against the filesystem,
        so a bare name never depends on the working directory.
        """
        wanted = query.strip()
        if os.sep in wanted or wanted.startswith("~"):
            return self.get(wanted)
        wanted = wanted.casefold()
        candidates = self.sorted()
        for skill in candidates:
            if skill.name.casefold() == wanted:
                return skill
        for skill in candidates:
            if skill.link_name().casefold() == wanted:
                return skill
        return None

    def sorted(self) -> list[Skill]:
        return sort_skills(list(self.skills.values()))

    def installed(self) -> list[Skill]:
        return [s for s in self.sorted() if s.installed]

    def available(self) -> list[Skill]:
        return [s for s in self.sorted() if not s.installed]

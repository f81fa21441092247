"""Skill list widget showing every skill with its install status."""
from rich.text import Text
from textual.widgets import Static
from textual.reactive import reactive

from skills_manager.models import Skill


def skill_state(skill: Skill) -> str:
    if not skill.installed:
        return "available"
    return "disabled" if skill.disabled else "installed"


def format_targets(skill: Skill) -> str:
    """Compact per-target summary, e.g. ``2/3``."""
    total = len(skill.target_status)
    linked = sum(1 for s in skill.target_status.values() if s != "not-installed")
    return f"{linked}/{total}" if total else ""


class SkillListWidget(Static):
    """Displays all skills with installed/disabled/available status."""
    skills_data: reactive[dict] = reactive(dict)

    def format_skill(self, name: str, state: str, selected: bool = False) -> str:
        """Format a single skill line as plain text (for testing)."""
        cursor = ">" if selected else " "
        if state == "installed":
            return f"{cursor} *  {name}"
        elif state == "disabled":
            return f"{cursor} -  {name} [disabled]"
        else:
            return f"{cursor}    {name}"

    def update_skills(self, skills: list[Skill], selected: int | None = None):
        if not skills:
            self.update(Text("  No skills found", style="dim"))
            self.skills_data = {"count": 0, "selected": None}
            return
        text = Text()
        for i, skill in enumerate(skills):
            state = skill_state(skill)
            if i > 0:
                text.append("\n")
            line = self.format_skill(skill.name, state, selected=i == selected)
            targets = format_targets(skill)
            if state == "installed":
                style = "bold"
            elif state == "disabled":
                style = "italic"
            else:
                style = "dim"
            if i == selected:
                style += " reverse"
            text.append(line, style=style)
            if targets and skill.installed:
                text.append(f"  {targets}", style="dim")
        self.skills_data = {"count": len(skills), "selected": selected}
        self.update(text)

"""Collections panel showing named skill groups and which are active."""
from rich.text import Text
from textual.widgets import Static

from skills_manager.models import NamedSkillGroup, Skill


def count_enabled_members(group: NamedSkillGroup, skills_by_id: dict[str, Skill]) -> int:
    return sum(
        1 for skill_id in group.skill_ids
        if skill_id in skills_by_id and skills_by_id[skill_id].enabled
    )


class GroupsWidget(Static):
    """Displays collections with their active state and member counts."""

    def format_groups(
        self,
        groups: list[NamedSkillGroup],
        active_groups: list[str],
        skills_by_id: dict[str, Skill] | None = None,
        selected: int | None = None,
    ) -> str:
        """Format collections as plain text (for testing)."""
        if not groups:
            return "  No collections defined"

        skills_by_id = skills_by_id or {}
        active = set(active_groups)
        lines = []
        for i, group in enumerate(groups):
            cursor = ">" if i == selected else " "
            mark = "◉" if group.name in active else "○"
            enabled = count_enabled_members(group, skills_by_id)
            lines.append(f"{cursor} {mark} {group.name}  {enabled}/{len(group.skill_ids)}")
        return "\n".join(lines)

    def update_groups(
        self,
        groups: list[NamedSkillGroup],
        active_groups: list[str],
        skills_by_id: dict[str, Skill] | None = None,
        selected: int | None = None,
    ) -> None:
        """Render collections with Rich styling."""
        if not groups:
            self.update(Text("  No collections defined", style="dim"))
            return

        plain = self.format_groups(groups, active_groups, skills_by_id, selected).split("\n")
        active = set(active_groups)
        text = Text()
        for i, (group, line) in enumerate(zip(groups, plain)):
            if i > 0:
                text.append("\n")
            style = "bold" if group.name in active else "dim"
            if i == selected:
                style += " reverse"
            text.append(line, style=style)
        self.update(text)

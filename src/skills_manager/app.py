"""Main Textual application: skill and collection panels with key bindings."""
from pathlib import Path

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.theme import Theme
from textual.widgets import Header, Footer, Static

from skills_manager.actions import (
    apply_toggle, disable_skill, enable_skill, install_skill, uninstall_skill,
)
from skills_manager.config import (
    DEFAULT_CONFIG_PATH, DEFAULT_GROUPS_PATH, load_config, load_group_state, save_group_state,
)
from skills_manager.errors import SkillsManagerError
from skills_manager.groups import plan_toggle
from skills_manager.models import Skill
from skills_manager.registry import SkillRegistry
from skills_manager.widgets.groups_panel import GroupsWidget
from skills_manager.widgets.skill_list import SkillListWidget


TERMINAL_THEME = Theme(
    name="terminal",
    primary="#ffffff",
    secondary="#333333",
    accent="#ffffff",
    foreground="#ffffff",
    background="#000000",
    surface="#000000",
    panel="#000000",
    dark=True,
    variables={
        "border": "#333333",
        "border-blurred": "#333333",
        "scrollbar": "#333333",
        "scrollbar-background": "#000000",
    },
)

MAINFRAME_THEME = Theme(
    name="mainframe",
    primary="#33ff33",
    secondary="#000000",
    accent="#33ff33",
    foreground="#33ff33",
    background="#000000",
    surface="#000000",
    panel="#000000",
    dark=True,
    variables={
        "footer-foreground": "#1a7a1a",
        "footer-background": "#000000",
        "footer-key-foreground": "#33ff33",
        "footer-description-foreground": "#1a7a1a",
        "border": "#0a1f0a",
        "border-blurred": "#0a1f0a",
        "scrollbar": "#0a1f0a",
        "scrollbar-background": "#000000",
    },
)


class SkillsManagerApp(App):
    """Terminal UI for installing, disabling and grouping skills."""

    TITLE = "SKILLS"
    CSS = """
    Screen { background: #000000; }
    * { background: transparent; }
    #main-row { height: 1fr; }
    #skills-column { width: 1fr; }
    #groups-column { width: 45; }
    #skills-panel { height: auto; border: tall $border; }
    #groups-panel { height: auto; border: tall $border; }
    .panel-title { text-style: bold; padding: 0 1; }
    #status { height: 1; padding: 0 1; text-style: italic; }
    Header { background: #000000; color: $foreground; }
    Footer { background: #000000; }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("tab", "switch_panel", "Panel", priority=True),
        Binding("down,j", "move(1)", "Down", show=False),
        Binding("up,k", "move(-1)", "Up", show=False),
        Binding("i", "install", "Install"),
        Binding("u", "uninstall", "Uninstall"),
        Binding("d", "toggle_disabled", "Disable/Enable"),
        Binding("g", "toggle_group", "Collection"),
        Binding("r", "rescan", "Rescan"),
        Binding("t", "toggle_theme", "Theme"),
    ]

    def __init__(
        self,
        config_path: Path = DEFAULT_CONFIG_PATH,
        groups_path: Path = DEFAULT_GROUPS_PATH,
    ):
        super().__init__()
        self.config = load_config(config_path)
        self.targets: list[str] = self.config["targets"]
        self._groups_path = groups_path
        self.group_state = load_group_state(groups_path)
        self.registry = SkillRegistry(self.config["sources"], self.targets)
        self._current_theme = "terminal"
        self._panel = "skills"
        self._skill_cursor = 0
        self._group_cursor = 0

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-row"):
            with VerticalScroll(id="skills-column"):
                with Vertical(id="skills-panel"):
                    yield Static("SKILLS", classes="panel-title")
                    yield SkillListWidget(id="skill-list")
            with VerticalScroll(id="groups-column"):
                with Vertical(id="groups-panel"):
                    yield Static("COLLECTIONS", classes="panel-title")
                    yield GroupsWidget(id="groups")
        yield Static("", id="status")
        yield Footer()

    def on_mount(self):
        self.register_theme(TERMINAL_THEME)
        self.register_theme(MAINFRAME_THEME)
        self.theme = "terminal"
        self._refresh_ui()

    def _skills(self) -> list[Skill]:
        return self.registry.sorted()

    def _selected_skill(self) -> Skill | None:
        skills = self._skills()
        if not skills:
            return None
        self._skill_cursor = min(self._skill_cursor, len(skills) - 1)
        return skills[self._skill_cursor]

    def _refresh_ui(self, message: str = ""):
        skills = self._skills()
        groups = self.group_state.skill_groups
        self._skill_cursor = max(0, min(self._skill_cursor, len(skills) - 1))
        self._group_cursor = max(0, min(self._group_cursor, len(groups) - 1))

        skill_list = self.query_one("#skill-list", SkillListWidget)
        skill_list.update_skills(
            skills, self._skill_cursor if self._panel == "skills" else None,
        )
        groups_widget = self.query_one("#groups", GroupsWidget)
        groups_widget.update_groups(
            groups,
            self.group_state.active_groups,
            self.registry.skills,
            self._group_cursor if self._panel == "groups" else None,
        )

        installed = sum(1 for s in skills if s.installed)
        disabled = sum(1 for s in skills if s.disabled)
        self.sub_title = f"{installed} installed  {disabled} disabled  {len(self.targets)} targets"
        self.query_one("#status", Static).update(message)

    def _run_skill_action(self, action, verb: str):
        skill = self._selected_skill()
        if skill is None:
            return
        try:
            result = action(skill, self.targets)
        except SkillsManagerError as exc:
            self.notify(str(exc), severity="error")
            message = f"{verb} {skill.name}: failed"
        else:
            message = f"{verb} {skill.name}"
            if result.conflicts:
                message += f" ({len(result.conflicts)} conflicting entries left in place)"
        self.registry.refresh()
        self._refresh_ui(message)

    def action_install(self):
        self._run_skill_action(install_skill, "Installed")

    def action_uninstall(self):
        self._run_skill_action(uninstall_skill, "Uninstalled")

    def action_toggle_disabled(self):
        skill = self._selected_skill()
        if skill is None or not skill.installed:
            return
        if skill.disabled:
            self._run_skill_action(enable_skill, "Enabled")
        else:
            self._run_skill_action(disable_skill, "Disabled")

    def action_toggle_group(self):
        groups = self.group_state.skill_groups
        if not groups:
            return
        group = groups[self._group_cursor]
        set_active = group.name not in self.group_state.active_groups
        try:
            plan = plan_toggle(
                self._skills(), groups, self.group_state.active_groups, group.name, set_active,
            )
            apply_toggle(plan.to_enable, plan.to_disable, self.targets)
        except SkillsManagerError as exc:
            self.notify(str(exc), severity="error")
            self.registry.refresh()
            self._refresh_ui()
            return

        self.group_state.active_groups = plan.active_groups
        save_group_state(groups, plan.active_groups, self._groups_path)
        message = f"{group.name} {'on' if set_active else 'off'}"
        if plan.missing_skill_ids:
            message += f" ({len(plan.missing_skill_ids)} missing skills skipped)"
        self.registry.refresh()
        self._refresh_ui(message)

    def action_switch_panel(self):
        self._panel = "groups" if self._panel == "skills" else "skills"
        self._refresh_ui()

    def action_move(self, step: int):
        if self._panel == "skills":
            self._skill_cursor += step
        else:
            self._group_cursor += step
        self._refresh_ui()

    def action_rescan(self):
        self.registry.refresh()
        self._refresh_ui("Rescanned")

    def action_toggle_theme(self):
        if self._current_theme == "terminal":
            self.theme = "mainframe"
            self._current_theme = "mainframe"
        else:
            self.theme = "terminal"
            self._current_theme = "terminal"

from skills_manager.models import Skill
from skills_manager.widgets.skill_list import SkillListWidget, format_targets, skill_state


def _skill(installed=False, disabled=False, status=None):
    return Skill(
        name="brainstorming", description="", source_path="/skills/brainstorming",
        source_name="local", installed=installed, disabled=disabled,
        target_status=status or {},
    )


def test_skill_list_format_available():
    w = SkillListWidget()
    line = w.format_skill("brainstorming", "available")
    assert "brainstorming" in line
    assert "*" not in line
    assert "[disabled]" not in line


def test_skill_list_format_installed():
    w = SkillListWidget()
    line = w.format_skill("brainstorming", "installed")
    assert "*" in line
    assert "brainstorming" in line


def test_skill_list_format_disabled():
    w = SkillListWidget()
    line = w.format_skill("brainstorming", "disabled")
    assert line.endswith("[disabled]")


def test_skill_list_format_selected():
    w = SkillListWidget()
    assert w.format_skill("brainstorming", "installed", selected=True).startswith(">")
    assert not w.format_skill("brainstorming", "installed").startswith(">")


def test_skill_state():
    assert skill_state(_skill()) == "available"
    assert skill_state(_skill(installed=True)) == "installed"
    assert skill_state(_skill(installed=True, disabled=True)) == "disabled"


def test_format_targets():
    status = {"/t1": "installed", "/t2": "disabled", "/t3": "not-installed"}
    assert format_targets(_skill(installed=True, status=status)) == "2/3"
    assert format_targets(_skill()) == ""

from skills_manager.models import Skill
from skills_manager.skill_sets import collect_enabled_skill_ids, plan_named_set_application


def skill(name: str, installed: bool = True, disabled: bool = False) -> Skill:
    return Skill(
        name=name, description="", source_path=f"/skills/{name}", source_name="test-source",
        installed=installed, disabled=disabled,
    )


def test_collect_enabled_skill_ids():
    skills = [skill("b"), skill("a"), skill("c", disabled=True), skill("d", installed=False)]
    assert collect_enabled_skill_ids(skills) == ["/skills/a", "/skills/b"]


def test_apply_set_enables_members_and_disables_the_rest():
    skills = [skill("a", disabled=True), skill("b"), skill("c"), skill("d", installed=False)]
    plan = plan_named_set_application(skills, ["/skills/a", "/skills/b", "/skills/d"])
    assert [s.name for s in plan.to_enable] == ["a"]
    assert [s.name for s in plan.to_disable] == ["c"]
    assert plan.missing_skill_ids == []


def test_apply_set_reports_missing_members():
    plan = plan_named_set_application([skill("a")], ["/skills/a", "/skills/gone"])
    assert plan.missing_skill_ids == ["/skills/gone"]
    assert plan.to_enable == []
    assert plan.to_disable == []


def test_empty_set_disables_everything_enabled():
    skills = [skill("a"), skill("b", disabled=True)]
    plan = plan_named_set_application(skills, [])
    assert [s.name for s in plan.to_disable] == ["a"]
    assert plan.to_enable == []

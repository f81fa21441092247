"""Single exclusive skill set: the predecessor of multi-collection toggling."""
from dataclasses import dataclass, field

from skills_manager.groups import normalize_skill_ids
from skills_manager.models import Skill
from skills_manager.naming import canonical_path, name_sort_key


@dataclass
class SkillSetPlan:
    to_enable: list[Skill] = field(default_factory=list)
    to_disable: list[Skill] = field(default_factory=list)
    missing_skill_ids: list[str] = field(default_factory=list)


def collect_enabled_skill_ids(skills: list[Skill]) -> list[str]:
    """Ids of every installed, enabled skill; useful for snapshotting a set."""
    return normalize_skill_ids(s.source_path for s in skills if s.enabled)


def plan_named_set_application(skills: list[Skill], skill_ids: list[str]) -> SkillSetPlan:
    """Plan making exactly ``skill_ids`` the enabled installed skills.

    Members that are disabled get enabled; every other enabled skill gets
    disabled. Members not installed are left alone and members not found on
    disk are reported.
    """
    wanted = normalize_skill_ids(skill_ids)
    members = set(wanted)
    by_id = {canonical_path(skill.source_path): skill for skill in skills}

    plan = SkillSetPlan(missing_skill_ids=[i for i in wanted if i not in by_id])
    for skill_id, skill in by_id.items():
        if not skill.installed:
            continue
        if skill_id in members:
            if skill.disabled:
                plan.to_enable.append(skill)
        elif not skill.disabled:
            plan.to_disable.append(skill)

    plan.to_enable.sort(key=lambda s: name_sort_key(s.name))
    plan.to_disable.sort(key=lambda s: name_sort_key(s.name))
    return plan

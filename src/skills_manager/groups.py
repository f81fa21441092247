"""Named skill collections and the active-collection toggle planner.

Collections are matched case-insensitively after whitespace normalization;
the first-seen spelling of a name is the one kept. Switching a collection on
is exclusive: afterwards only skills covered by the union of all active
collections may stay enabled.
"""
import logging
from dataclasses import dataclass, field
from typing import Iterable, Literal

from skills_manager.errors import GroupExists, GroupNotFound, InvalidGroupName
from skills_manager.models import NamedSkillGroup, Skill
from skills_manager.naming import canonical_path, group_key, name_sort_key, normalize_group_name

logger = logging.getLogger(__name__)


@dataclass
class TogglePlan:
    """Enable/disable work needed to switch one collection on or off."""
    active_groups: list[str]
    to_enable: list[Skill] = field(default_factory=list)
    to_disable: list[Skill] = field(default_factory=list)
    missing_skill_ids: list[str] = field(default_factory=list)


def normalize_skill_ids(raw: Iterable) -> list[str]:
    """Canonicalize, deduplicate and sort skill ids; non-strings and blanks are dropped."""
    ids = {
        canonical_path(value)
        for value in raw
        if isinstance(value, str) and value.strip()
    }
    return sorted(ids, key=name_sort_key)


def _entry_fields(entry) -> tuple[object, object]:
    if isinstance(entry, NamedSkillGroup):
        return entry.name, entry.skill_ids
    if isinstance(entry, dict):
        return entry.get("name"), entry.get("skill_ids", entry.get("skillIds"))
    return None, None


def normalize_groups(raw) -> list[NamedSkillGroup]:
    """Build a clean collection catalog from loosely-typed input.

    Accepts ``NamedSkillGroup`` objects or ``{"name", "skill_ids"}`` dicts.
    Entries without a usable name are skipped. Duplicate names (compared
    case-insensitively) merge their members under the first spelling seen.

    Returns:
        Collections sorted by name.
    """
    if not isinstance(raw, (list, tuple)):
        return []

    by_key: dict[str, NamedSkillGroup] = {}
    for entry in raw:
        name, skill_ids = _entry_fields(entry)
        if not isinstance(name, str):
            continue
        name = normalize_group_name(name)
        if not name:
            continue
        members = list(skill_ids) if isinstance(skill_ids, (list, tuple)) else []
        existing = by_key.get(name.casefold())
        if existing is None:
            by_key[name.casefold()] = NamedSkillGroup(name, normalize_skill_ids(members))
        else:
            logger.debug("Merging duplicate collection %r into %r", name, existing.name)
            existing.skill_ids = normalize_skill_ids(existing.skill_ids + members)

    return sorted(by_key.values(), key=lambda g: name_sort_key(g.name))


def normalize_active_groups(raw, groups: list[NamedSkillGroup]) -> list[str]:
    """Map active names onto canonical collection names, dropping unknown and repeated ones."""
    if not isinstance(raw, (list, tuple)):
        return []
    canonical = {group_key(g.name): g.name for g in groups}
    active: list[str] = []
    seen: set[str] = set()
    for entry in raw:
        if not isinstance(entry, str):
            continue
        key = group_key(entry)
        if key in seen or key not in canonical:
            continue
        seen.add(key)
        active.append(canonical[key])
    return active


def find_group(groups: list[NamedSkillGroup], name: str) -> NamedSkillGroup | None:
    key = group_key(name)
    if not key:
        return None
    return next((g for g in groups if group_key(g.name) == key), None)


def require_group(groups: list[NamedSkillGroup], name: str) -> NamedSkillGroup:
    group = find_group(groups, name)
    if group is None:
        raise GroupNotFound(normalize_group_name(name))
    return group


def next_active_groups(
    groups: list[NamedSkillGroup],
    active_groups: list[str],
    target_name: str,
    set_active: bool,
) -> list[str]:
    """Active list after switching ``target_name``; existing order is kept, new entries go last."""
    target = require_group(groups, target_name)
    current = normalize_active_groups(active_groups, groups)
    if set_active:
        if target.name not in current:
            current.append(target.name)
        return current
    return [name for name in current if name != target.name]


def resolve_active_skill_ids(groups: list[NamedSkillGroup], active_groups: list[str]) -> set[str]:
    """Union of members over every active collection."""
    active = {group_key(name) for name in active_groups}
    skill_ids: set[str] = set()
    for group in groups:
        if group_key(group.name) in active:
            skill_ids.update(group.skill_ids)
    return skill_ids


def _sorted_by_name(skills: list[Skill]) -> list[Skill]:
    return sorted(skills, key=lambda s: name_sort_key(s.name))


def plan_toggle(
    skills: list[Skill],
    groups,
    active_groups,
    target_group_name: str,
    set_active: bool,
) -> TogglePlan:
    """Plan switching one collection on or off.

    Switching on enables the collection's disabled members and disables every
    enabled skill outside the union of all now-active collections. Switching
    off disables the collection's enabled members unless another active
    collection still covers them. Members with no skill on disk are reported
    in ``missing_skill_ids``.

    Raises:
        GroupNotFound: no collection matches ``target_group_name``.
    """
    catalog = normalize_groups(groups)
    target = require_group(catalog, target_group_name)
    next_active = next_active_groups(catalog, active_groups, target.name, set_active)
    active_ids = resolve_active_skill_ids(catalog, next_active)
    target_ids = set(target.skill_ids)

    by_id = {canonical_path(skill.source_path): skill for skill in skills}
    missing = [skill_id for skill_id in target.skill_ids if skill_id not in by_id]

    to_enable: list[Skill] = []
    to_disable: list[Skill] = []
    for skill_id, skill in by_id.items():
        if not skill.installed:
            continue
        if set_active:
            if skill.disabled and skill_id in target_ids:
                to_enable.append(skill)
            elif not skill.disabled and skill_id not in active_ids:
                to_disable.append(skill)
        elif not skill.disabled and skill_id in target_ids and skill_id not in active_ids:
            to_disable.append(skill)

    return TogglePlan(
        active_groups=next_active,
        to_enable=_sorted_by_name(to_enable),
        to_disable=_sorted_by_name(to_disable),
        missing_skill_ids=missing,
    )


def groups_for_skill(groups: list[NamedSkillGroup], skill_id: str) -> list[str]:
    """Names of the collections containing ``skill_id``."""
    wanted = canonical_path(skill_id)
    names = [g.name for g in groups if wanted in g.skill_ids]
    return sorted(names, key=name_sort_key)


def is_covered_by_active_groups(
    groups: list[NamedSkillGroup], active_groups: list[str], skill_id: str,
) -> bool:
    return canonical_path(skill_id) in resolve_active_skill_ids(groups, active_groups)


def _require_name(raw: str) -> str:
    name = normalize_group_name(raw) if isinstance(raw, str) else ""
    if not name:
        raise InvalidGroupName("Collection name is required.")
    return name


def create_group(groups: list[NamedSkillGroup], name: str) -> list[NamedSkillGroup]:
    """Return the catalog with a new empty collection added."""
    name = _require_name(name)
    if find_group(groups, name) is not None:
        raise GroupExists(f"Collection already exists: {name!r}")
    return normalize_groups([*groups, NamedSkillGroup(name)])


def rename_group(
    groups: list[NamedSkillGroup], active_groups: list[str], name: str, new_name: str,
) -> tuple[list[NamedSkillGroup], list[str]]:
    """Rename a collection, carrying its active state over to the new name."""
    selected = require_group(groups, name)
    new_name = _require_name(new_name)
    duplicate = find_group(groups, new_name)
    if duplicate is not None and duplicate is not selected:
        raise GroupExists(f"Collection already exists: {new_name!r}")

    updated = normalize_groups([
        NamedSkillGroup(new_name, g.skill_ids) if g is selected else g
        for g in groups
    ])
    remapped = [
        new_name if group_key(active) == group_key(selected.name) else active
        for active in active_groups
    ]
    return updated, normalize_active_groups(remapped, updated)


def delete_group(
    groups: list[NamedSkillGroup], active_groups: list[str], name: str,
) -> tuple[list[NamedSkillGroup], list[str]]:
    selected = require_group(groups, name)
    updated = [g for g in groups if g is not selected]
    return updated, normalize_active_groups(active_groups, updated)


def set_group_membership(
    groups: list[NamedSkillGroup], name: str, skill_id: str, member: bool,
) -> list[NamedSkillGroup]:
    """Return the catalog with ``skill_id`` added to or removed from a collection."""
    selected = require_group(groups, name)
    wanted = canonical_path(skill_id)
    updated = []
    for group in groups:
        if group is not selected:
            updated.append(group)
            continue
        ids = set(group.skill_ids)
        if member:
            ids.add(wanted)
        else:
            ids.discard(wanted)
        updated.append(NamedSkillGroup(group.name, normalize_skill_ids(ids)))
    return normalize_groups(updated)


def plan_membership_change(
    skill: Skill,
    groups_before: list[NamedSkillGroup],
    groups_after: list[NamedSkillGroup],
    active_groups: list[str],
) -> Literal["enable", "disable"] | None:
    """What a membership edit means for an installed skill under the active collections."""
    if not skill.installed:
        return None
    before = is_covered_by_active_groups(groups_before, active_groups, skill.source_path)
    after = is_covered_by_active_groups(groups_after, active_groups, skill.source_path)
    if not before and after and skill.disabled:
        return "enable"
    if before and not after and not skill.disabled:
        return "disable"
    return None

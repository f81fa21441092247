"""Entry point for skills-manager."""
import argparse
import logging
import sys
from pathlib import Path

from skills_manager.actions import (
    ActionResult, apply_toggle, cleanup_broken_symlinks,
    disable_skill, enable_skill, install_skill, uninstall_skill,
)
from skills_manager.config import (
    DEFAULT_CONFIG_PATH, DEFAULT_GROUPS_PATH, load_config, load_group_state, save_group_state,
)
from skills_manager.errors import SkillsManagerError
from skills_manager.export import export_installed_skills
from skills_manager import groups as group_ops
from skills_manager.registry import SkillRegistry
from skills_manager.skill_sets import plan_named_set_application
from skills_manager.widgets.skill_list import format_targets, skill_state

SKILL_ACTIONS = {
    "install": install_skill,
    "uninstall": uninstall_skill,
    "enable": enable_skill,
    "disable": disable_skill,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="skills-manager", description="Skills Manager")
    parser.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="Path to config.toml")
    parser.add_argument("--groups", type=Path, default=DEFAULT_GROUPS_PATH, help="Path to groups.yaml")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="More logging (repeatable)")
    sub = parser.add_subparsers(dest="command")

    list_parser = sub.add_parser("list", help="List skills and their status")
    which = list_parser.add_mutually_exclusive_group()
    which.add_argument("--installed", action="store_true", help="Only installed skills")
    which.add_argument("--available", action="store_true", help="Only skills not installed")

    for name in SKILL_ACTIONS:
        action_parser = sub.add_parser(name, help=f"{name.capitalize()} a skill in every target")
        action_parser.add_argument("skill", help="Skill name, install name or source path")

    sub.add_parser("groups", help="List collections")

    group_parser = sub.add_parser("group", help="Manage a collection")
    group_sub = group_parser.add_subparsers(dest="group_command", required=True)
    for name, help_text in [
        ("create", "Create an empty collection"),
        ("delete", "Delete a collection"),
        ("on", "Activate a collection"),
        ("off", "Deactivate a collection"),
    ]:
        p = group_sub.add_parser(name, help=help_text)
        p.add_argument("name")
    rename_parser = group_sub.add_parser("rename", help="Rename a collection")
    rename_parser.add_argument("name")
    rename_parser.add_argument("new_name")
    for name, help_text in [("add", "Add a skill to a collection"), ("remove", "Remove a skill from a collection")]:
        p = group_sub.add_parser(name, help=help_text)
        p.add_argument("name")
        p.add_argument("skill")

    set_parser = sub.add_parser("apply-set", help="Enable exactly these installed skills")
    set_parser.add_argument("skills", nargs="+")

    sub.add_parser("cleanup", help="Remove broken links from targets")

    export_parser = sub.add_parser("export", help="Write installed skills manifest")
    export_parser.add_argument("output", nargs="?", default="installed-skills.json")

    sub.add_parser("tui", help="Open the terminal UI (default)")
    return parser


def _find_skill(registry: SkillRegistry, query: str):
    skill = registry.find(query)
    if skill is None:
        raise SkillsManagerError(f"Skill not found: {query!r}")
    return skill


def _print_result(result: ActionResult):
    print(f"{result.action} {result.skill.name}")
    for r in result.results:
        detail = f" ({r.detail})" if r.detail else ""
        print(f"  {r.target}: {r.outcome}{detail}")


def cmd_list(args, config) -> int:
    registry = SkillRegistry(config["sources"], config["targets"])
    skills = registry.sorted()
    if args.installed:
        skills = [s for s in skills if s.installed]
    elif args.available:
        skills = [s for s in skills if not s.installed]
    if not skills:
        print("No skills found")
        return 0
    for skill in skills:
        targets = format_targets(skill) if skill.installed else ""
        print(f"{skill_state(skill):<10} {skill.name:<32} {skill.source_name:<16} {targets}".rstrip())
    return 0


def cmd_skill_action(args, config) -> int:
    registry = SkillRegistry(config["sources"], config["targets"])
    skill = _find_skill(registry, args.skill)
    result = SKILL_ACTIONS[args.command](skill, config["targets"])
    _print_result(result)
    return 0


def cmd_groups(args, config) -> int:
    state = load_group_state(args.groups)
    if not state.skill_groups:
        print("No collections defined")
        return 0
    for group in state.skill_groups:
        mark = "*" if group.name in state.active_groups else " "
        print(f"{mark} {group.name} ({len(group.skill_ids)} skills)")
        for skill_id in group.skill_ids:
            print(f"    {skill_id}")
    return 0


def _toggle_group(name: str, set_active: bool, state, config) -> list[str]:
    registry = SkillRegistry(config["sources"], config["targets"])
    plan = group_ops.plan_toggle(
        registry.sorted(), state.skill_groups, state.active_groups, name, set_active,
    )
    apply_toggle(plan.to_enable, plan.to_disable, config["targets"])
    for skill in plan.to_enable:
        print(f"enabled  {skill.name}")
    for skill in plan.to_disable:
        print(f"disabled {skill.name}")
    for skill_id in plan.missing_skill_ids:
        print(f"missing  {skill_id}")
    return plan.active_groups


def _change_membership(args, state, config, member: bool):
    registry = SkillRegistry(config["sources"], config["targets"])
    skill = _find_skill(registry, args.skill)
    updated = group_ops.set_group_membership(state.skill_groups, args.name, skill.source_path, member)
    change = group_ops.plan_membership_change(skill, state.skill_groups, updated, state.active_groups)
    if change == "enable":
        enable_skill(skill, config["targets"])
        print(f"enabled  {skill.name}")
    elif change == "disable":
        disable_skill(skill, config["targets"])
        print(f"disabled {skill.name}")
    return updated


def cmd_group(args, config) -> int:
    state = load_group_state(args.groups)
    groups, active = state.skill_groups, state.active_groups
    command = args.group_command

    if command == "create":
        groups = group_ops.create_group(groups, args.name)
    elif command == "rename":
        groups, active = group_ops.rename_group(groups, active, args.name, args.new_name)
    elif command == "delete":
        groups, active = group_ops.delete_group(groups, active, args.name)
    elif command in ("on", "off"):
        active = _toggle_group(args.name, command == "on", state, config)
    elif command in ("add", "remove"):
        groups = _change_membership(args, state, config, member=command == "add")

    save_group_state(groups, active, args.groups)
    print(f"Active collections: {', '.join(active) if active else '(none)'}")
    return 0


def cmd_apply_set(args, config) -> int:
    registry = SkillRegistry(config["sources"], config["targets"])
    skill_ids = [_find_skill(registry, query).source_path for query in args.skills]
    plan = plan_named_set_application(registry.sorted(), skill_ids)
    apply_toggle(plan.to_enable, plan.to_disable, config["targets"])
    print(f"Enabled {len(plan.to_enable)}, disabled {len(plan.to_disable)}")
    return 0


def cmd_cleanup(args, config) -> int:
    removed = cleanup_broken_symlinks(config["targets"])
    print(f"Removed {removed} broken link{'' if removed == 1 else 's'}")
    return 0


def cmd_export(args, config) -> int:
    registry = SkillRegistry(config["sources"], config["targets"])
    skills = registry.sorted()
    path = export_installed_skills(skills, Path(args.output))
    count = sum(1 for s in skills if s.installed)
    print(f"Exported {count} installed skill{'' if count == 1 else 's'} to {path}")
    return 0


def cmd_tui(args, config) -> int:
    from skills_manager.app import SkillsManagerApp

    app = SkillsManagerApp(config_path=args.config, groups_path=args.groups)
    app.run()
    return 0


COMMANDS = {
    "list": cmd_list,
    "install": cmd_skill_action,
    "uninstall": cmd_skill_action,
    "enable": cmd_skill_action,
    "disable": cmd_skill_action,
    "groups": cmd_groups,
    "group": cmd_group,
    "apply-set": cmd_apply_set,
    "cleanup": cmd_cleanup,
    "export": cmd_export,
    "tui": cmd_tui,
}


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    level = [logging.WARNING, logging.INFO, logging.DEBUG][min(args.verbose, 2)]
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    try:
        config = load_config(args.config)
        return COMMANDS[args.command or "tui"](args, config)
    except SkillsManagerError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

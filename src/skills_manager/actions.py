"""Install, uninstall, enable and disable skills by mutating target symlinks.

Each action visits every configured target in order. Individual steps are
single OS primitives (symlink, rename, unlink) but the sequence across targets
is not transactional: on the first ``OSError`` an ``ActionError`` is raised
carrying the outcomes so far, and the in-memory ``Skill`` is left untouched.
"""
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Literal

from skills_manager.errors import ActionError
from skills_manager.models import DISABLED_DIR, Skill

logger = logging.getLogger(__name__)

TargetOutcome = Literal[
    "linked", "restored", "already-installed", "conflict",
    "removed", "absent", "disabled", "enabled", "failed",
]

MUTATING_OUTCOMES = {"linked", "restored", "removed", "disabled", "enabled"}


@dataclass
class TargetResult:
    target: str
    outcome: TargetOutcome
    detail: str = ""
    # set when a failing step had already touched the target
    mutated: bool = False

    @property
    def changed(self) -> bool:
        return self.mutated or self.outcome in MUTATING_OUTCOMES


@dataclass
class ActionResult:
    """Per-target outcomes of one action on one skill."""
    action: str
    skill: Skill
    results: list[TargetResult] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return any(r.changed for r in self.results)

    @property
    def conflicts(self) -> list[TargetResult]:
        return [r for r in self.results if r.outcome == "conflict"]


Step = Callable[[Path, Skill, list[str]], tuple[TargetOutcome, str]]


def _points_to(link: Path, source_path: str) -> bool:
    try:
        return str(link.resolve(strict=True)) == source_path
    except (OSError, RuntimeError):
        return False


def _run(action: str, skill: Skill, targets: list[str], step: Step) -> ActionResult:
    result = ActionResult(action=action, skill=skill)
    for target in targets:
        # steps record each filesystem change here as it happens
        progress: list[str] = []
        try:
            outcome, detail = step(Path(target), skill, progress)
        except OSError as exc:
            result.results.append(TargetResult(target, "failed", str(exc), mutated=bool(progress)))
            raise ActionError(action, skill, target, result.results, exc) from exc
        result.results.append(TargetResult(target, outcome, detail))
    return result


def _ensure_dir(path: Path, progress: list[str]):
    if path.is_dir():
        return
    path.mkdir(parents=True)
    progress.append(f"created {path}")


def _move_link(src: Path, dst: Path, progress: list[str]):
    """Move a link between a target and its ``.disabled`` dir.

    Relative links are recreated as absolute ones so they keep resolving to
    the same skill from their new location.
    """
    if not src.is_symlink() or os.path.isabs(os.readlink(src)):
        src.rename(dst)
        progress.append(f"moved {src} to {dst}")
        return
    dst.symlink_to(os.path.realpath(src), target_is_directory=True)
    progress.append(f"linked {dst}")
    src.unlink()
    progress.append(f"removed {src}")


def _install_step(target: Path, skill: Skill, progress: list[str]) -> tuple[TargetOutcome, str]:
    name = skill.link_name()
    _ensure_dir(target, progress)
    link = target / name

    if os.path.lexists(link):
        if link.is_symlink() and _points_to(link, skill.source_path):
            return "already-installed", ""
        logger.warning("Not installing %s: %s already exists and is not managed", skill.name, link)
        return "conflict", f"{link} already exists"

    disabled = target / DISABLED_DIR / name
    if os.path.lexists(disabled):
        _move_link(disabled, link, progress)
        logger.info("Restored %s from %s", link, disabled)
        return "restored", ""

    link.symlink_to(skill.source_path, target_is_directory=True)
    logger.info("Linked %s -> %s", link, skill.source_path)
    return "linked", ""


def _uninstall_step(target: Path, skill: Skill, progress: list[str]) -> tuple[TargetOutcome, str]:
    name = skill.link_name()
    # plain directories are never deleted, only links
    for path in (target / name, target / DISABLED_DIR / name):
        if path.is_symlink():
            path.unlink()
            progress.append(f"removed {path}")
            logger.info("Removed %s", path)
    return ("removed" if progress else "absent"), ""


def _disable_step(target: Path, skill: Skill, progress: list[str]) -> tuple[TargetOutcome, str]:
    name = skill.link_name()
    link = target / name
    if not link.is_symlink():
        return "absent", ""
    disabled_dir = target / DISABLED_DIR
    disabled = disabled_dir / name
    if os.path.lexists(disabled):
        logger.warning("Not disabling %s: %s already exists", skill.name, disabled)
        return "conflict", f"{disabled} already exists"
    _ensure_dir(disabled_dir, progress)
    _move_link(link, disabled, progress)
    logger.info("Disabled %s", link)
    return "disabled", ""


def _enable_step(target: Path, skill: Skill, progress: list[str]) -> tuple[TargetOutcome, str]:
    name = skill.link_name()
    disabled = target / DISABLED_DIR / name
    if not os.path.lexists(disabled):
        return "absent", ""
    link = target / name
    if os.path.lexists(link):
        logger.warning("Not enabling %s: %s already exists", skill.name, link)
        return "conflict", f"{link} already exists"
    _move_link(disabled, link, progress)
    logger.info("Enabled %s", link)
    return "enabled", ""



def install_skill(skill: Skill, targets: list[str]) -> ActionResult:
    """Link the skill into every target, reviving disabled links where present.

    A same-named entry that is not a link to this skill is left alone and
    reported as a ``"conflict"`` outcome.
    """
    result = _run("install", skill, targets, _install_step)
    skill.installed = True
    skill.disabled = False
    for target in targets:
        skill.target_status[target] = "installed"
    return result


def uninstall_skill(skill: Skill, targets: list[str]) -> ActionResult:
    """Remove the skill's links (enabled and disabled) from every target."""
    result = _run("uninstall", skill, targets, _uninstall_step)
    skill.installed = False
    skill.disabled = False
    for target in targets:
        skill.target_status[target] = "not-installed"
    return result


def disable_skill(skill: Skill, targets: list[str]) -> ActionResult:
    """Move the skill's top-level links into each target's ``.disabled`` dir."""
    result = _run("disable", skill, targets, _disable_step)
    skill.disabled = True
    for target in targets:
        if skill.target_status.get(target) == "installed":
            skill.target_status[target] = "disabled"
    return result


def enable_skill(skill: Skill, targets: list[str]) -> ActionResult:
    """Move the skill's links out of ``.disabled`` back to each target."""
    result = _run("enable", skill, targets, _enable_step)
    skill.disabled = False
    for target in targets:
        if skill.target_status.get(target) == "disabled":
            skill.target_status[target] = "installed"
    return result


def apply_toggle(to_enable: list[Skill], to_disable: list[Skill], targets: list[str]) -> list[ActionResult]:
    """Run a planned set of enables then disables."""
    results = [enable_skill(skill, targets) for skill in to_enable]
    results.extend(disable_skill(skill, targets) for skill in to_disable)
    return results


def cleanup_broken_symlinks(targets: list[str]) -> int:
    """Delete dangling links from every target and its ``.disabled`` dir."""
    removed = 0
    for target in targets:
        for directory in (Path(target), Path(target) / DISABLED_DIR):
            try:
                entries = list(os.scandir(directory))
            except OSError:
                continue
            for entry in entries:
                if entry.is_symlink() and not os.path.exists(entry.path):
                    os.unlink(entry.path)
                    logger.info("Removed broken link %s", entry.path)
                    removed += 1
    return removed

"""Source and target scanning, and reconciliation into per-target skill state.

Sources are directory trees holding skill definitions (``<skill>/SKILL.md``).
Targets are directories that expose skills as symlinks; disabled skills live
under ``<target>/.disabled/``. A target entry counts as an install of a source
skill only when it is a symlink resolving to the skill's canonical path.

Scans never raise for filesystem trouble: unreadable directories, vanished
entries and broken links are logged at DEBUG and left out of the results.
"""
import logging
import os
from pathlib import Path

from skills_manager.frontmatter import read_skill_meta
from skills_manager.models import (
    DEFINITION_FILE, DISABLED_DIR,
    InstalledEntry, RawSkillRecord, Skill, Source, TargetStatus,
)
from skills_manager.naming import canonical_path

logger = logging.getLogger(__name__)

SKIP_SCAN_DIRS = {"node_modules", ".git", ".hg", ".svn"}


def should_skip_dir(name: str) -> bool:
    """Hidden and dependency-cache directories are never descended into."""
    return name.startswith(".") or name in SKIP_SCAN_DIRS


def is_inside_any_target(path: str, targets: list[str]) -> bool:
    for target in targets:
        root = canonical_path(target)
        if path == root or path.startswith(root.rstrip(os.sep) + os.sep):
            return True
    return False


def _child_skill_dirs(root: Path) -> list[Path]:
    found = []
    try:
        with os.scandir(root) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as exc:
        logger.debug("Skipping unreadable source directory %s: %s", root, exc)
        return found
    for entry in entries:
        if should_skip_dir(entry.name):
            continue
        try:
            if not entry.is_dir(follow_symlinks=False):
                continue
        except OSError:
            continue
        skill_dir = Path(entry.path)
        if (skill_dir / DEFINITION_FILE).is_file():
            found.append(skill_dir)
    return found


def _nested_skill_dirs(root: Path) -> list[Path]:
    found = []

    def on_error(exc: OSError):
        logger.debug("Skipping unreadable source directory %s: %s", exc.filename, exc)

    for dirpath, dirnames, filenames in os.walk(root, onerror=on_error):
        dirnames[:] = sorted(d for d in dirnames if not should_skip_dir(d))
        # the source root itself is a container, not a skill
        if dirpath != str(root) and DEFINITION_FILE in filenames:
            found.append(Path(dirpath))
    return found


def scan_source(source: Source) -> list[RawSkillRecord]:
    """Find every skill definition under one source, sorted by path."""
    root = Path(os.path.expanduser(source.path))
    if not root.is_dir():
        logger.debug("Source %s does not exist at %s", source.name, root)
        return []

    skill_dirs = _nested_skill_dirs(root) if source.recursive else _child_skill_dirs(root)
    records = []
    for skill_dir in skill_dirs:
        try:
            meta = read_skill_meta(skill_dir / DEFINITION_FILE, skill_dir.name)
        except OSError as exc:
            logger.debug("Skipping unreadable definition in %s: %s", skill_dir, exc)
            continue
        records.append(RawSkillRecord(
            name=meta["name"],
            description=meta["description"],
            source_path=canonical_path(str(skill_dir)),
            source_name=source.name,
            install_name=skill_dir.name,
        ))
    records.sort(key=lambda r: r.source_path)
    return records


def discover(sources: list[Source], targets: list[str] | None = None) -> list[RawSkillRecord]:
    """Scan all sources and deduplicate by canonical path; later sources win.

    Skill directories that live inside a target are ignored so a target is
    never mistaken for a source of its own links.
    """
    targets = targets or []
    by_path: dict[str, RawSkillRecord] = {}
    for source in sources:
        for record in scan_source(source):
            if targets and is_inside_any_target(record.source_path, targets):
                continue
            by_path[record.source_path] = record
    return list(by_path.values())


def _resolve_link(path: str) -> str | None:
    try:
        return str(Path(path).resolve(strict=True))
    except (OSError, RuntimeError):
        return None


def _scan_entries(directory: Path, target: str, disabled: bool) -> list[InstalledEntry]:
    entries = []
    try:
        with os.scandir(directory) as it:
            items = sorted(it, key=lambda e: e.name)
    except OSError as exc:
        logger.debug("Skipping unreadable target directory %s: %s", directory, exc)
        return entries

    for item in items:
        if item.name.startswith("."):
            continue
        try:
            is_symlink = item.is_symlink()
            is_dir = item.is_dir(follow_symlinks=False)
        except OSError:
            continue
        if not (is_symlink or is_dir):
            continue
        real_path = _resolve_link(item.path) if is_symlink else None
        if is_symlink and real_path is None:
            logger.debug("Broken symlink in target: %s", item.path)
        entries.append(InstalledEntry(
            name=item.name,
            target_path=target,
            full_path=item.path,
            real_path=real_path,
            disabled=disabled,
            is_symlink=is_symlink,
        ))
    return entries


def scan_target(target_path: str) -> list[InstalledEntry]:
    """List enabled entries of a target followed by those under its ``.disabled`` dir."""
    target = Path(target_path)
    if not target.is_dir():
        return []
    entries = _scan_entries(target, target_path, disabled=False)
    disabled_dir = target / DISABLED_DIR
    if disabled_dir.is_dir():
        entries.extend(_scan_entries(disabled_dir, target_path, disabled=True))
    return entries


def new_target_status(targets: list[str]) -> dict[str, TargetStatus]:
    return {target: "not-installed" for target in targets}


def reconcile(
    raw_skills: list[RawSkillRecord],
    targets: list[str],
    installed_by_target: dict[str, list[InstalledEntry]],
) -> list[Skill]:
    """Join source records with target entries by symlink identity.

    Every skill gets exactly one status per configured target. Plain
    directories in a target are never attributed to a source.
    """
    links_by_target: dict[str, dict[str, InstalledEntry]] = {}
    for target in targets:
        links: dict[str, InstalledEntry] = {}
        for entry in installed_by_target.get(target, []):
            if entry.is_symlink and entry.real_path is not None:
                # enabled entries come first and take precedence
                links.setdefault(entry.real_path, entry)
        links_by_target[target] = links

    skills = []
    for raw in raw_skills:
        status = new_target_status(targets)
        install_name = raw.install_name
        for target in targets:
            match = links_by_target[target].get(raw.source_path)
            if match is None:
                continue
            status[target] = "disabled" if match.disabled else "installed"
            install_name = match.name
        skill = Skill(
            name=raw.name,
            description=raw.description,
            source_path=raw.source_path,
            source_name=raw.source_name,
            install_name=install_name,
            target_status=status,
        )
        skill.refresh_flags()
        skills.append(skill)
    return skills


def scan(sources: list[Source], targets: list[str]) -> list[Skill]:
    """Discover sources, scan every target and reconcile."""
    raw_skills = discover(sources, targets)
    installed = {target: scan_target(target) for target in targets}
    return reconcile(raw_skills, targets, installed)

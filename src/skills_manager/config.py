"""Configuration loading for skills-manager."""
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from skills_manager.errors import ConfigError
from skills_manager.groups import normalize_active_groups, normalize_groups
from skills_manager.models import NamedSkillGroup, Source
from skills_manager.naming import canonical_path, normalize_group_name

CONFIG_DIR = Path.home() / ".config" / "skills-manager"
DEFAULT_CONFIG_PATH = CONFIG_DIR / "config.toml"
DEFAULT_GROUPS_PATH = CONFIG_DIR / "groups.yaml"
DEFAULT_SOURCES_ROOT = Path.home() / ".skills-manager" / "sources"

# Skill directories of agents we know how to feed
KNOWN_TARGETS = [
    "~/.claude/skills",
    "~/.cursor/skills",
    "~/.codex/skills",
]


def default_targets() -> list[str]:
    """Known agent skill directories whose parent already exists."""
    targets = []
    for raw in KNOWN_TARGETS:
        path = os.path.expanduser(raw)
        if Path(path).parent.exists():
            targets.append(path)
    return targets


def _parse_sources(entries) -> list[Source]:
    sources = []
    for entry in entries if isinstance(entries, list) else []:
        if not isinstance(entry, dict):
            continue
        name, path = entry.get("name"), entry.get("path")
        if not isinstance(name, str) or not isinstance(path, str):
            continue
        url = entry.get("url")
        sources.append(Source(
            name=name,
            path=os.path.expanduser(path),
            recursive=bool(entry.get("recursive", False)),
            url=url if isinstance(url, str) and url else None,
        ))
    return sources


def _covers_sources_root(source: Source, root: str) -> bool:
    if source.name.lower() == "sources":
        return True
    path = canonical_path(source.path)
    return path == root or path.startswith(root + os.sep)


def load_config(
    config_path: Path = DEFAULT_CONFIG_PATH,
    sources_root: Path = DEFAULT_SOURCES_ROOT,
) -> dict:
    """Load sources and targets from TOML, falling back to defaults.

    A recursive ``sources`` source for ``sources_root`` is appended unless a
    configured source already is, or lives under, that root.
    """
    config = {"sources": [], "targets": default_targets()}

    if config_path.exists():
        try:
            with open(config_path, "rb") as f:
                user_config = tomllib.load(f)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid config at {config_path}: {exc}") from exc
        except OSError as exc:
            raise ConfigError(f"Cannot read config at {config_path}: {exc}") from exc
        if "sources" in user_config:
            config["sources"] = _parse_sources(user_config["sources"])
        if "targets" in user_config:
            targets = user_config["targets"] if isinstance(user_config["targets"], list) else []
            config["targets"] = [os.path.expanduser(t) for t in targets if isinstance(t, str)]

    root = canonical_path(str(sources_root))
    if not any(_covers_sources_root(s, root) for s in config["sources"]):
        config["sources"].append(Source(name="sources", path=str(sources_root), recursive=True))

    return config


@dataclass
class GroupState:
    """Persisted collections and which of them are active."""
    skill_groups: list[NamedSkillGroup] = field(default_factory=list)
    active_groups: list[str] = field(default_factory=list)
    migrated_from_legacy: bool = False


def resolve_group_state(raw: dict) -> GroupState:
    """Normalize group state, migrating legacy ``skill_sets``/``active_skill_set``.

    The legacy keys are only read when neither ``skill_groups`` nor
    ``active_groups`` is present.
    """
    if "skill_groups" in raw or "active_groups" in raw:
        groups = normalize_groups(raw.get("skill_groups"))
        return GroupState(groups, normalize_active_groups(raw.get("active_groups"), groups))

    groups = normalize_groups(raw.get("skill_sets"))
    legacy_active = raw.get("active_skill_set")
    legacy_active = normalize_group_name(legacy_active) if isinstance(legacy_active, str) else ""
    active = normalize_active_groups([legacy_active], groups) if legacy_active else []
    return GroupState(groups, active, migrated_from_legacy=bool(groups) or bool(legacy_active))


def load_group_state(path: Path = DEFAULT_GROUPS_PATH) -> GroupState:
    if not path.exists():
        return GroupState()
    try:
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid group state at {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Cannot read group state at {path}: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigError(f"Invalid group state at {path}: expected a mapping")
    return resolve_group_state(raw)


def save_group_state(
    groups: list[NamedSkillGroup],
    active_groups: list[str],
    path: Path = DEFAULT_GROUPS_PATH,
):
    """Write collections and active names as YAML; empty sections are omitted."""
    data = {}
    if groups:
        data["skill_groups"] = [g.to_dict() for g in groups]
    if active_groups:
        data["active_groups"] = list(active_groups)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, sort_keys=False)

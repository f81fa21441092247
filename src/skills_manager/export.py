"""Export of installed skills to a shareable JSON manifest."""
import json
import re
import subprocess
from datetime import datetime, timezone
from pathlib import Path
from urllib.parse import urlparse

from skills_manager.models import Skill
from skills_manager.naming import name_sort_key

SCHEMA_VERSION = 3

_GITHUB_SSH = re.compile(r"^[^@]+@github\.com:([^/]+)/([^/]+?)(?:\.git)?$", re.IGNORECASE)


def normalize_repo_url(raw: str) -> str:
    """Canonical https form of a repository URL (SSH and ``.git`` forms included)."""
    trimmed = raw.strip()
    m = _GITHUB_SSH.match(trimmed)
    if m:
        return f"https://github.com/{m.group(1)}/{m.group(2)}"
    parsed = urlparse(trimmed)
    if parsed.scheme in ("http", "https") and parsed.netloc:
        path = re.sub(r"\.git$", "", parsed.path, flags=re.IGNORECASE)
        return parsed._replace(path=path).geturl().rstrip("/")
    return trimmed


def _git(*args: str) -> str | None:
    try:
        proc = subprocess.run(["git", *args], capture_output=True, text=True, check=False)
    except OSError:
        return None
    if proc.returncode != 0:
        return None
    return proc.stdout.strip() or None


def detect_repo_install(source_path: str) -> dict:
    """``{repo_url, skill_path}`` for a skill living in a git checkout with an origin."""
    repo_root = _git("-C", source_path, "rev-parse", "--show-toplevel")
    if not repo_root:
        return {}
    remote = _git("-C", repo_root, "remote", "get-url", "origin")
    if not remote:
        return {}
    install = {"repo_url": normalize_repo_url(remote)}
    try:
        rel = Path(source_path).resolve().relative_to(Path(repo_root).resolve()).as_posix()
    except ValueError:
        rel = ""
    if rel and rel != ".":
        install["skill_path"] = rel
    return install


def build_manifest(skills: list[Skill]) -> dict:
    installed = sorted((s for s in skills if s.installed), key=lambda s: name_sort_key(s.name))
    return {
        "schema_version": SCHEMA_VERSION,
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "installed_skills": [
            {
                "name": s.name,
                "description": s.description,
                "install": detect_repo_install(s.source_path),
            }
            for s in installed
        ],
    }


def export_installed_skills(skills: list[Skill], output_path: Path) -> Path:
    """Write the manifest and return its absolute path."""
    output_path = Path(output_path).resolve()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(build_manifest(skills), indent=2) + "\n", encoding="utf-8")
    return output_path

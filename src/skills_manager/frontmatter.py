"""SKILL.md frontmatter reader."""
import logging
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)


def parse_frontmatter(text: str) -> dict:
    """Return the YAML mapping between the leading ``---`` fences, or ``{}``."""
    if not text.startswith("---"):
        return {}
    end = text.find("\n---", 3)
    if end == -1:
        return {}
    try:
        meta = yaml.safe_load(text[3:end].strip())
    except yaml.YAMLError as exc:
        logger.warning("Unparsable frontmatter: %s", exc)
        return {}
    return meta if isinstance(meta, dict) else {}


def read_skill_meta(skill_md: Path, fallback_name: str) -> dict:
    """Read ``{name, description}`` from a definition file.

    ``name`` falls back to ``fallback_name`` and ``description`` to ``""``.
    Raises ``OSError`` if the file cannot be read.
    """
    meta = parse_frontmatter(skill_md.read_text(encoding="utf-8", errors="replace"))
    name = meta.get("name")
    description = meta.get("description")
    return {
        "name": str(name).strip() if name else fallback_name,
        "description": str(description).strip() if description else "",
    }

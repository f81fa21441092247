"""Exception types raised by the skills manager."""


class SkillsManagerError(Exception):
    """Base class for all skills manager failures."""


class ConfigError(SkillsManagerError):
    """Configuration file is unreadable or malformed."""


class GroupNotFound(SkillsManagerError, KeyError):
    """No collection matches the requested name (case-insensitively)."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self):
        return f"Collection not found: {self.name!r}"


class GroupExists(SkillsManagerError, ValueError):
    """A collection with the requested name already exists."""


class InvalidGroupName(SkillsManagerError, ValueError):
    """Collection name is empty after normalization."""


class ActionError(SkillsManagerError):
    """A filesystem mutation failed partway through an action.

    ``results`` lists the per-target outcomes up to and including the failing
    target. Targets already mutated stay mutated; callers should re-scan.
    """

    def __init__(self, action: str, skill, target: str, results: list, cause: OSError):
        super().__init__(f"{action} {skill.name!r} failed at {target}: {cause}")
        self.action = action
        self.skill = skill
        self.target = target
        self.results = results
        self.cause = cause

    @property
    def partial(self) -> bool:
        """True if any target, the failing one included, was changed."""
        return any(r.changed for r in self.results)

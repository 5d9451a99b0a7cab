"""Directory name classification for reclaimable directories.

This module defines the names of directories that hold regenerable
content (dependency caches, build outputs, editor state, etc.) and
classifies a directory by its base name alone. Matching is exact and
case-sensitive: a directory called ``Build`` or ``node_modules_old`` is
never treated as temporary.
"""

from diskclean.filesystem.models import EntryKind

# Known temporary directory names, grouped by ecosystem.
# Extending this table is the only way to widen classification.
_TEMP_DIRECTORY_GROUPS: tuple[tuple[str, tuple[str, ...]], ...] = (
    (
        "node",
        (
            "node_modules",
            ".npm",
            ".yarn",
            ".pnpm-store",
            ".turbo",
            ".parcel-cache",
            ".webpack",
            ".rollup.cache",
            ".vite",
            ".next",
            ".nuxt",
            ".output",
            ".vercel",
            ".netlify",
            "bower_components",
        ),
    ),
    (
        "python",
        (
            ".venv",
            "venv",
            "env",
            ".env",
            "__pycache__",
            ".pytest_cache",
            ".mypy_cache",
            ".tox",
            ".eggs",
            ".ipynb_checkpoints",
        ),
    ),
    ("rust", ("target", ".fingerprint", ".cargo")),
    ("build", ("dist", "build", "out", ".build", "_build", ".gradle", ".mvn")),
    ("cache", (".cache", "cache", ".tmp", "tmp", "temp", ".temp")),
    ("version_manager", (".nvm", ".rvm", ".rbenv", ".pyenv")),
    ("ide", (".idea", ".vscode", ".vs", ".eclipse", ".settings")),
    ("os", (".DS_Store", "Thumbs.db", ".Trash")),
    (
        "other",
        ("coverage", ".coverage", ".nyc_output", "htmlcov", ".sass-cache", ".docusaurus"),
    ),
)

# Flat, ordered view of every known name
TEMP_DIRECTORY_NAMES: tuple[str, ...] = tuple(
    name for _, names in _TEMP_DIRECTORY_GROUPS for name in names
)

_TEMP_NAME_SET: frozenset[str] = frozenset(TEMP_DIRECTORY_NAMES)


def classify(name: str) -> EntryKind:
    """Classify a directory by its base name.

    Args:
        name: Directory base name (not a path).

    Returns:
        EntryKind.TEMPORARY if the name is a known temporary directory
        name, EntryKind.NORMAL otherwise.
    """
    if name in _TEMP_NAME_SET:
        return EntryKind.TEMPORARY
    return EntryKind.NORMAL


def is_temp_directory(name: str) -> bool:
    """Check if a directory base name is a known temporary directory name."""
    return classify(name) is EntryKind.TEMPORARY


def temp_directory_groups() -> dict[str, tuple[str, ...]]:
    """Get the known temporary directory names keyed by ecosystem group.

    Returns:
        Mapping of group name to the names in that group, in table order.
    """
    return dict(_TEMP_DIRECTORY_GROUPS)

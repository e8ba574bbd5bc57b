"""
Source discovery.

Collects Angular templates (``*.html``) and component logic files (``*.ts``)
below a root directory, in a stable sorted order. Test files, declaration
files, ``node_modules`` and hidden directories are left out.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Union

from ng_i18n_extract.utils.errors import SourceDirectoryNotFoundError
from ng_i18n_extract.utils.logging import get_logger

logger = get_logger(__name__)

MARKUP_SUFFIX = ".html"
LOGIC_SUFFIX = ".ts"

EXCLUDED_LOGIC_SUFFIXES = (".spec.ts", ".test.ts", ".d.ts")
EXCLUDED_LOGIC_NAMES = frozenset({"test.ts"})
TEST_DIRECTORIES = frozenset({"test", "tests"})
SKIPPED_DIRECTORIES = frozenset({"node_modules"})


@dataclass
class DiscoveredSources:
    """Files found under one source root."""

    markup_files: List[Path] = field(default_factory=list)
    logic_files: List[Path] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.markup_files) + len(self.logic_files)


def is_logic_file(path: Path, root: Path) -> bool:
    """TypeScript sources that are neither tests nor type declarations."""
    name = path.name
    if not name.endswith(LOGIC_SUFFIX) or name in EXCLUDED_LOGIC_NAMES:
        return False
    if name.endswith(EXCLUDED_LOGIC_SUFFIXES):
        return False
    relative_dirs = path.relative_to(root).parts[:-1]
    return not any(part in TEST_DIRECTORIES for part in relative_dirs)


def discover_sources(root: Union[str, Path]) -> DiscoveredSources:
    """
    Find templates and logic files below ``root``.

    Args:
        root: Directory to scan

    Returns:
        Sorted markup and logic file paths

    Raises:
        SourceDirectoryNotFoundError: If ``root`` is not a directory
    """
    root = Path(root)
    if not root.is_dir():
        raise SourceDirectoryNotFoundError(str(root))

    sources = DiscoveredSources()
    for directory, subdirs, files in os.walk(root):
        subdirs[:] = [d for d in subdirs if d not in SKIPPED_DIRECTORIES and not d.startswith(".")]
        for name in files:
            path = Path(directory) / name
            if name.endswith(MARKUP_SUFFIX):
                sources.markup_files.append(path)
            elif is_logic_file(path, root):
                sources.logic_files.append(path)

    sources.markup_files.sort()
    sources.logic_files.sort()
    logger.debug(f"Discovered {sources.total} source files under {root}")
    return sources

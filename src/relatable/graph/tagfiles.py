"""Tag File Scanner - Attaches tags declared in sidecar tag files.

A tag file is a UTF-8 text file with the tag extension (``.tags``) whose
lines are tags. ``dir.tags`` tags its containing directory; any other
``<stem>.tags`` tags every sibling whose name or stem is ``<stem>``.

The scan is strict: any IO failure aborts it with TagFileError. A tag file
that matches no sibling is only a warning.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from glob import escape, glob
from pathlib import Path
from typing import Iterator

from relatable.config import TagConfig
from relatable.errors import TagFileError
from relatable.graph.nodes import Directory, RootTag, Tag, path_node
from relatable.graph.registry import NodeRegistry
from relatable.graph.relations import Relation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TagFile:
    """A discovered tag file.

    Attributes:
        path: Path of the tag file as discovered.
        directory: Canonical path of the containing directory.
        stem: File name with the tag suffix removed.
        is_directory_file: True for the directory tag file (``dir.tags``).
    """

    path: Path
    directory: Path
    stem: str
    is_directory_file: bool


def canonicalize(path: Path | str) -> Path:
    """Resolve a path to its absolute, symlink-free form.

    Raises:
        TagFileError: If the path does not exist or cannot be resolved.
    """
    try:
        return Path(path).resolve(strict=True)
    except (OSError, RuntimeError) as e:
        raise TagFileError(f"Cannot canonicalize path ({e})", path) from e


def find_tag_files(root: Path | str, config: TagConfig | None = None) -> list[Path]:
    """Recursively find tag files under root, sorted.

    Hidden files and directories are included. Directories whose name
    carries the tag extension are not tag files. Dangling links are kept
    so that canonicalizing them fails the scan.
    """
    config = config or TagConfig()
    pattern = os.path.join(escape(str(root)), "**", f"*{config.suffix}")
    logger.debug("Searching for tag files using %s", pattern)
    return [
        Path(match)
        for match in sorted(glob(pattern, recursive=True, include_hidden=True))
        if not os.path.isdir(match)
    ]


def describe_tag_file(path: Path, config: TagConfig | None = None) -> TagFile:
    """Classify a tag file and canonicalize its containing directory.

    Raises:
        TagFileError: If the tag file or its directory cannot be resolved.
    """
    config = config or TagConfig()
    name = path.name
    canonicalize(path)
    return TagFile(
        path=path,
        directory=canonicalize(path.parent),
        stem=name[: -len(config.suffix)] if name.endswith(config.suffix) else path.stem,
        is_directory_file=name == config.directory_file,
    )


def read_tagfile(path: Path | str) -> list[str]:
    """Read a tag file.

    A tag file is simply a text file where each line is a tag. Line
    terminators (``\\n`` or ``\\r\\n``) are removed; nothing else is
    trimmed. Blank lines give empty-string tags.

    Raises:
        TagFileError: If the file cannot be opened, read or decoded.
    """
    tags: list[str] = []
    try:
        with open(path, "rb") as f:
            for raw in f:
                if raw.endswith(b"\n"):
                    raw = raw[:-1]
                    if raw.endswith(b"\r"):
                        raw = raw[:-1]
                tags.append(raw.decode("utf-8"))
    except OSError as e:
        raise TagFileError(f"Cannot read tag file ({e.strerror or e})", path) from e
    except UnicodeDecodeError as e:
        raise TagFileError(f"Tag file is not valid UTF-8 ({e.reason})", path) from e
    return tags


def _iter_siblings(directory: Path) -> Iterator[os.DirEntry[str]]:
    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda entry: entry.name)
    except OSError as e:
        raise TagFileError(f"Cannot list directory ({e.strerror or e})", directory) from e
    yield from entries


def _is_dir(entry: os.DirEntry[str]) -> bool:
    try:
        return entry.is_dir()
    except OSError as e:
        raise TagFileError(f"Cannot stat entry ({e.strerror or e})", entry.path) from e


def match_targets(
    tagfile: TagFile, registry: NodeRegistry, config: TagConfig | None = None
) -> list[int]:
    """Resolve the nodes a tag file attaches to.

    The directory tag file targets its directory. Otherwise every sibling
    whose full name or own stem equals the tag file's stem is a target;
    siblings carrying the tag extension never are.

    Returns:
        Target handles, possibly empty.
    """
    config = config or TagConfig()
    if tagfile.is_directory_file:
        target = registry.get_or_create(Directory(path=tagfile.directory))
        logger.debug("%s is a directory tag file, attach target: %s", tagfile.path, target)
        return [target]

    targets: list[int] = []
    for entry in _iter_siblings(tagfile.directory):
        sibling = Path(entry.name)
        if sibling.suffix == config.suffix:
            continue
        if sibling.stem != tagfile.stem and sibling.name != tagfile.stem:
            continue
        canonical = canonicalize(entry.path)
        target = registry.get_or_create(path_node(canonical, _is_dir(entry)))
        logger.debug("Found %s, assigned it %s", canonical, target)
        targets.append(target)

    if not targets:
        logger.warning("Tag file %s has no associated files", tagfile.path)
    return targets


def add_tags_to_graph(
    root: Path | str, registry: NodeRegistry, config: TagConfig | None = None
) -> int:
    """Scan every tag file under root and record its tags.

    For each tag: RootTag --HAS_TAG--> Tag, and for each target
    target --HAS_TAG--> Tag and Tag --TAG_ASSIGNED_TO--> target.

    Returns:
        Number of tag files processed.

    Raises:
        TagFileError: On any canonicalization or read failure.
    """
    config = config or TagConfig()
    graph = registry.graph
    tag_root = registry.get_or_create(RootTag())

    tag_files = find_tag_files(root, config)
    for path in tag_files:
        logger.debug("Visiting tag file %s", path)
        tagfile = describe_tag_file(path, config)
        registry.get_or_create(Directory(path=tagfile.directory))
        targets = match_targets(tagfile, registry, config)

        for tag in read_tagfile(path):
            logger.debug("Tag file contains tag %r", tag)
            t = registry.get_or_create(Tag(name=tag))
            graph.update_edge(tag_root, t, Relation.HAS_TAG)
            for target in targets:
                logger.debug("Attaching tag %s to %s", t, target)
                graph.update_edge(target, t, Relation.HAS_TAG)
                graph.update_edge(t, target, Relation.TAG_ASSIGNED_TO)

    return len(tag_files)

"""
relatable - Tag files and directory structure in one graph

relatable reads sidecar ``.tags`` files, walks the directory tree they sit
in, and builds a single directed graph where files, directories and tags
are nodes connected by typed relations.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("relatable")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"  # Not installed
__license__ = "MIT"

from relatable.errors import ConfigError, RelatableError, TagFileError
from relatable.graph import (
    Directory,
    Edge,
    File,
    NodeKind,
    NodeRegistry,
    Relation,
    RootDirectory,
    RootTag,
    Tag,
    TagGraph,
    build,
    get_tagged_files,
)

__all__ = [
    "__version__",
    "ConfigError",
    "RelatableError",
    "TagFileError",
    "Directory",
    "Edge",
    "File",
    "NodeKind",
    "NodeRegistry",
    "Relation",
    "RootDirectory",
    "RootTag",
    "Tag",
    "TagGraph",
    "build",
    "get_tagged_files",
]

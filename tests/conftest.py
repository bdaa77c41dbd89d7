"""Shared pytest fixtures."""

import pytest

from tests.core.graph_test_helpers import make_tree, tags


@pytest.fixture
def photos(tmp_path):
    """A small tagged tree.

    photos/
      dir.tags          red, blue
      img.png
      img/              (directory)
        dir.tags        nested
        a.txt
      image.png
      img.tags          favorite
      orphan.tags       lonely
      notes.txt
    """
    root = tmp_path / "photos"
    root.mkdir()
    make_tree(
        root,
        {
            "dir.tags": tags("red", "blue"),
            "img.png": "png",
            "img": {
                "dir.tags": tags("nested"),
                "a.txt": "a",
            },
            "image.png": "png",
            "img.tags": tags("favorite"),
            "orphan.tags": tags("lonely"),
            "notes.txt": "notes",
        },
    )
    return root

"""Tests for factory.py - Assembling the complete tag graph."""

import os

import pytest

from relatable.config import TagConfig
from relatable.errors import RelatableError, TagFileError
from relatable.graph.factory import build, build_graph, get_tagged_files
from relatable.graph.nodes import Directory, File, NodeKind, RootDirectory, RootTag, Tag
from relatable.graph.relations import Relation
from tests.core.graph_test_helpers import (
    dir_node,
    edge_strings,
    file_node,
    make_tree,
    node_strings,
    tags,
    targets_of,
)


class TestBuild:
    def test_returns_frozen_graph_and_registry(self, photos_graph):
        graph, registry = photos_graph

        assert registry.graph is graph
        assert graph.frozen
        with pytest.raises(RelatableError):
            graph.add_node(Tag("late"))

    def test_get_tagged_files_returns_registry(self, photos):
        registry = get_tagged_files(photos)

        assert registry.find(RootTag()) is not None
        assert registry.graph.frozen

    def test_one_node_per_path_across_passes(self, photos_graph, photos):
        """img.png and img/ are created by the scan and reused by the walk."""
        graph, registry = photos_graph

        paths = [
            (node.kind, node.path)
            for _, node in graph.iter_nodes()
            if isinstance(node, (File, Directory))
        ]
        assert len(paths) == len(set(paths))
        img_png = registry.find(file_node(photos / "img.png"))
        assert targets_of(registry, file_node(photos / "img.png"), Relation.PARENT) == {
            dir_node(photos)
        }
        assert targets_of(registry, file_node(photos / "img.png"), Relation.HAS_TAG) == {
            Tag("favorite")
        }
        assert img_png is not None

    def test_node_set(self, photos_graph, photos):
        _, registry = photos_graph

        assert node_strings(registry, photos) == [
            "./",
            "ROOT_DIR",
            "ROOT_TAG",
            "[blue]",
            "[favorite]",
            "[lonely]",
            "[nested]",
            "[red]",
            "image.png",
            "img.png",
            "img/",
            "img/a.txt",
            "notes.txt",
        ]

    def test_full_edge_set(self, photos_graph, photos):
        _, registry = photos_graph

        assert edge_strings(registry, photos) == {
            # tags
            "ROOT_TAG -HAS_TAG-> [red]",
            "ROOT_TAG -HAS_TAG-> [blue]",
            "ROOT_TAG -HAS_TAG-> [nested]",
            "ROOT_TAG -HAS_TAG-> [favorite]",
            "ROOT_TAG -HAS_TAG-> [lonely]",
            "./ -HAS_TAG-> [red]",
            "./ -HAS_TAG-> [blue]",
            "[red] -TAG_ASSIGNED_TO-> ./",
            "[blue] -TAG_ASSIGNED_TO-> ./",
            "img/ -HAS_TAG-> [nested]",
            "[nested] -TAG_ASSIGNED_TO-> img/",
            "img.png -HAS_TAG-> [favorite]",
            "[favorite] -TAG_ASSIGNED_TO-> img.png",
            "img/ -HAS_TAG-> [favorite]",
            "[favorite] -TAG_ASSIGNED_TO-> img/",
            # structure
            "ROOT_DIR -CHILD-> ./",
            "./ -PARENT-> ROOT_DIR",
            "./ -CHILD-> image.png",
            "image.png -PARENT-> ./",
            "./ -CHILD-> img.png",
            "img.png -PARENT-> ./",
            "./ -CHILD-> img/",
            "img/ -PARENT-> ./",
            "img/ -CHILD-> img/a.txt",
            "img/a.txt -PARENT-> img/",
            "./ -CHILD-> notes.txt",
            "notes.txt -PARENT-> ./",
        }

    def test_dir_tags_scoping(self, photos_graph, photos):
        _, registry = photos_graph

        for sibling in ("img.png", "image.png", "notes.txt"):
            assert targets_of(registry, file_node(photos / sibling), Relation.HAS_TAG) <= {
                Tag("favorite")
            }
        assert targets_of(registry, Tag("red"), Relation.TAG_ASSIGNED_TO) == {dir_node(photos)}

    def test_image_png_not_tagged(self, photos_graph, photos):
        _, registry = photos_graph

        assert targets_of(registry, file_node(photos / "image.png"), Relation.HAS_TAG) == set()

    def test_tag_files_not_in_graph(self, photos_graph, photos):
        _, registry = photos_graph

        for name in ("dir.tags", "img.tags", "orphan.tags"):
            assert registry.find(file_node(photos / name)) is None

    def test_root_wiring(self, photos_graph, photos):
        graph, registry = photos_graph
        root_dir = registry.find(RootDirectory())
        root = registry.find(dir_node(photos))

        assert [e.target for e in graph.outgoing(root_dir)] == [root]
        assert [e.source for e in graph.incoming(root_dir)] == [root]
        assert list(graph.outgoing(root, {Relation.PARENT})) != []
        assert {graph.node(e.target) for e in graph.outgoing(root, {Relation.PARENT})} == {
            RootDirectory()
        }

    def test_counts_by_kind(self, photos_graph):
        graph, _ = photos_graph
        counts = {}
        for _, node in graph.iter_nodes():
            counts[node.kind] = counts.get(node.kind, 0) + 1

        assert counts == {
            NodeKind.ROOT_TAG: 1,
            NodeKind.ROOT_DIRECTORY: 1,
            NodeKind.TAG: 5,
            NodeKind.FILE: 4,
            NodeKind.DIRECTORY: 2,
        }

    def test_tag_nodes_exist_before_structure(self, photos_graph):
        """The scan runs first, so RootTag is the first node created."""
        graph, _ = photos_graph

        assert graph.node(0) == RootTag()

    def test_rebuild_is_isomorphic(self, photos):
        _, first = build(photos)
        _, second = build(photos)

        assert node_strings(first, photos) == node_strings(second, photos)
        assert edge_strings(first, photos) == edge_strings(second, photos)
        assert first.graph.edge_count() == second.graph.edge_count()

    def test_empty_root(self, tmp_path):
        graph, registry = build(tmp_path)

        assert node_strings(registry, tmp_path) == ["./", "ROOT_DIR", "ROOT_TAG"]
        assert graph.edge_count() == 2

    def test_custom_config_dict(self, tmp_path):
        make_tree(tmp_path, {"a.txt": "", "a.labels": tags("x"), "a.tags": tags("y")})
        config = {"tags": {"extension": "labels", "directory_file": "dir.labels"}}

        _, registry = build(tmp_path, config)

        assert targets_of(registry, file_node(tmp_path / "a.txt"), Relation.HAS_TAG) == {Tag("x")}
        # .tags is an ordinary file under this config
        assert registry.find(file_node(tmp_path / "a.tags")) is not None
        assert registry.find(file_node(tmp_path / "a.labels")) is None

    def test_tag_config_instance(self, tmp_path):
        make_tree(tmp_path, {"a.txt": "", "a.tags": tags("y")})

        _, registry = build(tmp_path, TagConfig())

        assert registry.find(Tag("y")) is not None


class TestBuildFailures:
    def test_tag_file_error_aborts_build(self, tmp_path):
        make_tree(tmp_path, {"a.txt": ""})
        (tmp_path / "a.tags").write_bytes(b"\xff\xfe\n")

        with pytest.raises(TagFileError):
            build(tmp_path)

    def test_unreadable_tag_file_aborts_build(self, tmp_path, monkeypatch):
        make_tree(tmp_path, {"a.txt": "", "a.tags": tags("x")})
        real_open = open

        def fake_open(path, *args, **kwargs):
            if isinstance(path, (str, os.PathLike)) and os.fspath(path).endswith("a.tags"):
                raise PermissionError(13, "Permission denied", os.fspath(path))
            return real_open(path, *args, **kwargs)

        monkeypatch.setattr("builtins.open", fake_open)

        with pytest.raises(TagFileError) as exc_info:
            build(tmp_path)
        assert isinstance(exc_info.value.__cause__, PermissionError)

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
    def test_dangling_tag_file_link_aborts_build(self, tmp_path):
        make_tree(tmp_path, {"a.txt": ""})
        os.symlink(tmp_path / "nowhere.tags", tmp_path / "a.tags")

        with pytest.raises(TagFileError, match="Cannot canonicalize path") as exc_info:
            build(tmp_path)
        assert exc_info.value.path == tmp_path / "a.tags"
        assert isinstance(exc_info.value.__cause__, OSError)

    def test_walker_errors_do_not_abort(self, tmp_path, monkeypatch):
        make_tree(tmp_path, {"a.txt": "", "locked": {"b.txt": ""}})
        locked = str(tmp_path / "locked")
        real_scandir = os.scandir

        def fake_scandir(path):
            if os.fspath(path) == locked:
                raise PermissionError(13, "Permission denied", path)
            return real_scandir(path)

        monkeypatch.setattr(os, "scandir", fake_scandir)

        _, registry = build(tmp_path)

        assert registry.find(file_node(tmp_path / "a.txt")) is not None
        assert registry.find(file_node(tmp_path / "locked" / "b.txt")) is None


class TestBuildGraph:
    def test_loads_config_from_root(self, tmp_path):
        make_tree(
            tmp_path,
            {
                ".relatable.toml": '[tags]\nextension = "labels"\ndirectory_file = "dir.labels"\n',
                "a.txt": "",
                "a.labels": tags("x"),
            },
        )

        _, registry = build_graph(tmp_path)

        assert registry.find(Tag("x")) is not None

    def test_explicit_config_path(self, tmp_path):
        config_file = tmp_path / "custom.toml"
        config_file.write_text('[tags]\nextension = "labels"\ndirectory_file = "dir.labels"\n')
        root = tmp_path / "root"
        root.mkdir()
        make_tree(root, {"a.txt": "", "a.labels": tags("x")})

        _, registry = build_graph(root, config_path=config_file)

        assert registry.find(Tag("x")) is not None

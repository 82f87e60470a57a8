# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Unit tests for the values tree.
"""
from ruamel.yaml.comments import CommentedMap
from ruamel.yaml.scalarstring import DoubleQuotedScalarString, SingleQuotedScalarString

from hrimg.MODELS.values_tree import Scalar, ValuesTree
from hrimg.UTILS.yaml_loader import get_yaml_instance


def make_tree():
    return ValuesTree(CommentedMap([
        ("image", "bitnami/mariadb"),
        ("replicas", 3),
        ("enabled", True),
        ("ports", [80, 443]),
        ("db", CommentedMap([("image", CommentedMap([("repository", "repo/db")]))])),
    ]))


def test_nodes_are_scalars_or_trees():
    tree = make_tree()
    assert tree.get("image") == Scalar("bitnami/mariadb")
    assert isinstance(tree.get("db"), ValuesTree)
    assert tree.get("replicas") == Scalar("3")
    assert tree.get("enabled") is None
    assert tree.get("ports") is None
    assert tree.get("missing") is None


def test_items_skip_non_nodes_and_keep_order():
    tree = make_tree()
    assert [key for key, _ in tree.items()] == ["image", "replicas", "db"]


def test_scalar_and_mapping_accessors():
    tree = make_tree()
    assert tree.scalar("image") == "bitnami/mariadb"
    assert tree.scalar("db") is None
    assert tree.mapping("image") is None
    assert tree.mapping("db").mapping("image").scalar("repository") == "repo/db"


def test_locate_dotted_path():
    tree = make_tree()
    parent, key = tree.locate("db.image.repository")
    assert key == "repository"
    assert parent.scalar(key) == "repo/db"
    assert tree.lookup_scalar("db.image.repository") == "repo/db"
    assert tree.locate("db.image.tag") is None
    assert tree.locate("image.repository") is None
    assert tree.lookup_scalar("db.image") is None


def test_set_scalar_keeps_quoting_style():
    data = CommentedMap([
        ("double", DoubleQuotedScalarString("a")),
        ("single", SingleQuotedScalarString("b")),
        ("plain", "c"),
    ])
    tree = ValuesTree(data)
    tree.set_scalar("double", "x")
    tree.set_scalar("single", "y")
    tree.set_scalar("plain", "z")
    assert isinstance(data["double"], DoubleQuotedScalarString)
    assert isinstance(data["single"], SingleQuotedScalarString)
    assert data["double"] == "x"
    assert data["single"] == "y"
    assert data["plain"] == "z"
    assert list(data.keys()) == ["double", "single", "plain"]


def test_tree_borrows_mapping():
    data = CommentedMap([("tag", "v1")])
    tree = ValuesTree(data)
    tree.set_scalar("tag", "v2")
    assert data["tag"] == "v2"
    assert ValuesTree(data) == tree
    assert ValuesTree(CommentedMap([("tag", "v2")])) != tree


def test_numbers_read_back_as_written():
    data = get_yaml_instance().load("a: 5.7\nb: 5.10\nc: 8\nd: -0.50\ne: 1.0e3\nf: true\ng: 0x1f\n")
    tree = ValuesTree(data)
    assert tree.scalar("a") == "5.7"
    assert tree.scalar("b") == "5.10"
    assert tree.scalar("c") == "8"
    assert tree.scalar("d") == "-0.50"
    assert tree.scalar("e") == "1000.0"
    assert tree.scalar("f") is None
    assert tree.scalar("g") is None


def test_set_scalar_inserts_missing_key_after_anchor():
    data = CommentedMap([("repository", "repo/app"), ("pullPolicy", "Always")])
    tree = ValuesTree(data)
    tree.set_scalar("tag", "v1", after="repository")
    assert list(data.keys()) == ["repository", "tag", "pullPolicy"]
    assert data["tag"] == "v1"
    tree.set_scalar("tag", "v2", after="repository")
    assert list(data.keys()) == ["repository", "tag", "pullPolicy"]
    assert data["tag"] == "v2"

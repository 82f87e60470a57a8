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
Unit tests for in-place image updates.
"""
from io import StringIO

import pytest

from hrimg.exceptions import ContainerNotFound
from hrimg.MODELS.container import ImageRepositoryPrefix, ImageTagPrefix, ReleaseContainerName
from hrimg.MODELS.image_reference import ImageReference
from hrimg.MODELS.values_tree import ValuesTree
from hrimg.UTILS.yaml_loader import get_yaml_instance
from hrimg.WORKLOAD.annotation_overrides import AnnotationOverrides
from hrimg.WORKLOAD.matchers import Encoding
from hrimg.WORKLOAD.mutator import set_container_image
from hrimg.WORKLOAD.walker import resolve_containers


def load(content):
    return get_yaml_instance().load(content)


def images(data, overrides):
    return {name: str(m.image) for name, m in resolve_containers(ValuesTree(data), overrides).items()}


NEW = ImageReference.parse("repo/new:v9")


def test_single_string_stays_single_string():
    data = load("image: repo/app:v1\n")
    match = set_container_image(ValuesTree(data), AnnotationOverrides(), ReleaseContainerName, NEW)
    assert match.encoding == Encoding.SINGLE_STRING
    assert data["image"] == "repo/new:v9"
    assert "tag" not in data


def test_split_keys_stay_split():
    data = load("db:\n  image: repo/db\n  tag: v1\n  other: x\n")
    set_container_image(ValuesTree(data), AnnotationOverrides(), "db", ImageReference.parse("repo/db:v2"))
    assert data["db"]["image"] == "repo/db"
    assert data["db"]["tag"] == "v2"
    assert list(data["db"].keys()) == ["image", "tag", "other"]


def test_object_form():
    data = load("image:\n  repository: repo/app\n  tag: v1\n  pullPolicy: Always\n")
    set_container_image(ValuesTree(data), AnnotationOverrides(), ReleaseContainerName, NEW)
    assert data["image"]["repository"] == "repo/new"
    assert data["image"]["tag"] == "v9"
    assert data["image"]["pullPolicy"] == "Always"


def test_object_form_without_tag():
    data = load("image:\n  repository: repo/app:v1\n  pullPolicy: Always\n")
    set_container_image(ValuesTree(data), AnnotationOverrides(), ReleaseContainerName, NEW)
    assert data["image"]["repository"] == "repo/new"
    assert data["image"]["tag"] == "v9"
    assert list(data["image"].keys()) == ["repository", "tag", "pullPolicy"]
    assert images(data, AnnotationOverrides()) == {ReleaseContainerName: "repo/new:v9"}


def test_unquoted_numeric_tag_round_trip():
    yaml = get_yaml_instance()
    data = load("image: mysql\ntag: 5.7\n")
    assert images(data, AnnotationOverrides()) == {ReleaseContainerName: "mysql:5.7"}
    set_container_image(ValuesTree(data), AnnotationOverrides(), ReleaseContainerName, ImageReference.parse("mysql:5.8"))
    stream = StringIO()
    yaml.dump(data, stream)
    reloaded = load(stream.getvalue())
    assert images(reloaded, AnnotationOverrides()) == {ReleaseContainerName: "mysql:5.8"}


def test_annotation_repository_and_tag():
    overrides = AnnotationOverrides.from_annotations({
        ImageRepositoryPrefix + "mariadb": "customRepository",
        ImageTagPrefix + "mariadb": "customTag",
    })
    data = load("customRepository: bitnami/mariadb\ncustomTag: 10.1.30-r1\n")
    set_container_image(ValuesTree(data), overrides, "mariadb", NEW)
    assert data["customRepository"] == "repo/new"
    assert data["customTag"] == "v9"


def test_annotation_repository_only():
    overrides = AnnotationOverrides.from_annotations({ImageRepositoryPrefix + "mariadb": "customRepository"})
    data = load("customRepository: bitnami/mariadb:10.1.30-r1\n")
    set_container_image(ValuesTree(data), overrides, "mariadb", NEW)
    assert data["customRepository"] == "repo/new:v9"


def test_round_trip_twice():
    overrides = AnnotationOverrides()
    data = load("a:\n  image: repo/a\n  tag: v1\nb:\n  image:\n    repository: repo/b\n    tag: v1\n")
    for tag in ("v2", "v3"):
        for name in ("a", "b"):
            set_container_image(ValuesTree(data), overrides, name, ImageReference.parse(f"repo/{name}").with_new_tag(tag))
        assert images(data, overrides) == {"a": f"repo/a:{tag}", "b": f"repo/b:{tag}"}


def test_unknown_container_changes_nothing():
    data = load("db:\n  image: repo/db\n  tag: v1\nother:\n  not: containing image\n")
    before = {k: dict(v) for k, v in data.items()}
    with pytest.raises(ContainerNotFound) as excinfo:
        set_container_image(ValuesTree(data), AnnotationOverrides(), "other", NEW)
    assert excinfo.value.name == "other"
    with pytest.raises(KeyError):
        set_container_image(ValuesTree(data), AnnotationOverrides(), "missing", NEW)
    assert {k: dict(v) for k, v in data.items()} == before

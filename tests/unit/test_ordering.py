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
Unit tests for container ordering.
"""
from hrimg.MODELS.container import ReleaseContainerName
from hrimg.WORKLOAD.ordering import sorted_containers


def test_sorted_containers():
    unordered = {"ZZZ": None, "AAA": None, "FFF": None, ReleaseContainerName: None}
    assert sorted_containers(unordered) == [ReleaseContainerName, "AAA", "FFF", "ZZZ"]


def test_sorted_containers_without_release_container():
    assert sorted_containers({"b": 1, "a": 2}) == ["a", "b"]


def test_release_container_first_even_if_it_sorts_last():
    assert sorted_containers({"zzz": 1, "aaa": 2}, release_container_name="zzz") == ["zzz", "aaa"]


def test_empty():
    assert sorted_containers({}) == []

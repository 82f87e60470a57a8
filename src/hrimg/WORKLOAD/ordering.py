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
Deterministic ordering of resolved containers.
"""
from typing import List, Mapping

from ..MODELS.container import ReleaseContainerName


def sorted_containers(containers: Mapping[str, object],
                      release_container_name: str = ReleaseContainerName) -> List[str]:
    """
    Orders container names: the release container first if present,
    then the rest in ascending lexicographic order.

    The result depends only on the set of names, never on the order
    of the values document.
    """
    names = sorted(name for name in containers if name != release_container_name)
    if release_container_name in containers:
        names.insert(0, release_container_name)
    return names

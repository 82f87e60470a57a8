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
User-declared overrides of where a container's image lives in the values.

Annotations named '<repository prefix><container>' and '<tag prefix><container>'
hold dot-separated key paths, e.g.::

    repository.fluxcd.io/db: db.image.customRepository
    tag.fluxcd.io/db: db.image.customTag
"""
from dataclasses import dataclass
from typing import Dict, Iterator, List, Mapping, Optional

from ..MODELS.container import DEFAULT_CONVENTIONS, ImageConventions


@dataclass(frozen=True)
class ImageOverride:
    """Key paths overriding where a container's repository and tag are read from."""

    repository_key: Optional[str] = None
    tag_key: Optional[str] = None


class AnnotationOverrides:
    """
    Read-only map from container name to its ImageOverride.
    """

    def __init__(self, overrides: Optional[Dict[str, ImageOverride]] = None):
        self._overrides = dict(overrides or {})

    @classmethod
    def from_annotations(cls,
                         annotations: Optional[Mapping[str, str]],
                         conventions: ImageConventions = DEFAULT_CONVENTIONS) -> "AnnotationOverrides":
        """
        Builds the override map from resource annotations in one scan.

        :param annotations: metadata.annotations of the resource, may be None.
        :param conventions: The annotation prefixes to look for.
        :return: The override map. Key paths are not checked against the values.
        """
        repository_keys: Dict[str, str] = {}
        tag_keys: Dict[str, str] = {}
        for key, value in (annotations or {}).items():
            if not isinstance(key, str) or not isinstance(value, str):
                continue
            for prefix, target in ((conventions.repository_prefix, repository_keys),
                                   (conventions.tag_prefix, tag_keys)):
                if key.startswith(prefix) and len(key) > len(prefix):
                    target[key[len(prefix):]] = value.strip()

        overrides = {
            name: ImageOverride(repository_key=repository_keys.get(name), tag_key=tag_keys.get(name))
            for name in list(repository_keys) + [n for n in tag_keys if n not in repository_keys]
        }
        return cls(overrides)

    def get(self, name: str) -> Optional[ImageOverride]:
        return self._overrides.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self._overrides

    def __iter__(self) -> Iterator[str]:
        return iter(self._overrides)

    def __len__(self) -> int:
        return len(self._overrides)

    def repository_mapped_names(self) -> List[str]:
        """Names with a repository override. Tag-only overrides never name a container."""
        return [name for name, o in self._overrides.items() if o.repository_key]

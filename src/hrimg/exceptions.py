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
Exceptions raised by hrimg.
"""


class HrimgError(Exception):
    """Base class for all hrimg errors."""


class InvalidImageReference(HrimgError, ValueError):
    """A string could not be parsed as a repository[:tag] image reference."""


class AmbiguousImageEncoding(HrimgError):
    """A values sub-tree encodes its image in more than one conflicting way."""


class ContainerNotFound(HrimgError, KeyError):
    """A container name does not resolve to an image in the values tree."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"container {self.name!r} not found"


class ManifestParseError(HrimgError, ValueError):
    """A manifest stream could not be parsed as YAML."""


class ResourceNotFound(HrimgError, KeyError):
    """A resource id is not present in a parsed manifest."""

    def __init__(self, resource_id: str):
        super().__init__(resource_id)
        self.resource_id = resource_id

    def __str__(self) -> str:
        return f"resource {self.resource_id!r} not found"

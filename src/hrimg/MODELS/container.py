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
Models for discovered containers and the naming conventions used to find them.
"""
from pydantic import BaseModel, ConfigDict

from .image_reference import ImageReference

# Names shared with chart authors. These must stay stable across versions.
ReleaseContainerName = "chart-image"
ImageRepositoryPrefix = "repository.fluxcd.io/"
ImageTagPrefix = "tag.fluxcd.io/"


class ImageConventions(BaseModel):
    """
    The contract used to name containers and read annotation overrides.
    Passed explicitly to the resolvers so that tests can substitute their own.
    """
    model_config = ConfigDict(frozen=True)

    release_container_name: str = ReleaseContainerName
    repository_prefix: str = ImageRepositoryPrefix
    tag_prefix: str = ImageTagPrefix


DEFAULT_CONVENTIONS = ImageConventions()


class Container(BaseModel):
    """
    A container image discovered in a values tree.
    """
    model_config = ConfigDict(frozen=True)

    name: str
    image: ImageReference

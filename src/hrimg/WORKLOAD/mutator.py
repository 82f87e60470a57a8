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
In-place rewriting of a container's image in a values tree.
"""
import logging
from typing import Sequence

from ..exceptions import ContainerNotFound
from ..MODELS.container import DEFAULT_CONVENTIONS, ImageConventions
from ..MODELS.image_reference import ImageReference
from ..MODELS.values_tree import ValuesTree
from .annotation_overrides import AnnotationOverrides
from .matchers import DEFAULT_MATCHERS, ImageMatch, Matcher
from .walker import resolve_container

logger = logging.getLogger(__name__)


def apply_image(match: ImageMatch, image: ImageReference) -> None:
    """
    Writes image into the values the match was read from, keeping the
    encoding: a whole reference stays whole, a split pair stays split.
    A missing object tag is created right after the repository.
    """
    if match.tag is None:
        match.repository.tree.set_scalar(match.repository.key, str(image))
        return
    match.repository.tree.set_scalar(match.repository.key, image.repository)
    after = match.repository.key if match.tag.tree == match.repository.tree else None
    match.tag.tree.set_scalar(match.tag.key, image.tag, after=after)


def set_container_image(root: ValuesTree,
                        overrides: AnnotationOverrides,
                        name: str,
                        image: ImageReference,
                        conventions: ImageConventions = DEFAULT_CONVENTIONS,
                        matchers: Sequence[Matcher] = DEFAULT_MATCHERS) -> ImageMatch:
    """
    Sets the image of a container.

    Args:
        root: The values tree, modified in place.
        overrides: Annotation overrides of the resource.
        name: Container name, as reported by the read path.
        image: The new image.

    Returns:
        The match describing the values that were rewritten.

    Raises:
        ContainerNotFound: If name does not resolve to an image. Nothing is changed.
    """
    match = resolve_container(root, overrides, name, conventions, matchers)
    if match is None:
        raise ContainerNotFound(name)
    apply_image(match, image)
    logger.info("Set image of container %r to %s (%s, was %s)", name, image, match.encoding.value, match.image)
    return match

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
Conventions by which chart authors encode a container image in values.

Each matcher looks at one candidate and either returns an ImageMatch or
None. They are tried in a fixed order and the first match wins:

1. annotation-mapped keys::

       customRepository: bitnami/mariadb     # repository.fluxcd.io/<name>
       customTag: 10.1.30-r1                 # tag.fluxcd.io/<name>

2. a single string::

       image: bitnami/mariadb:10.1.30-r1

3. split keys::

       image: bitnami/mariadb
       tag: 10.1.30-r1

4. an image object::

       image:
         repository: bitnami/mariadb
         tag: 10.1.30-r1
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Sequence

from ..exceptions import AmbiguousImageEncoding, InvalidImageReference
from ..MODELS.image_reference import ImageReference
from ..MODELS.values_tree import ValuesTree
from .annotation_overrides import AnnotationOverrides

logger = logging.getLogger(__name__)

IMAGE_KEY = "image"
TAG_KEY = "tag"
REPOSITORY_KEY = "repository"


class Encoding(str, Enum):
    """
    How an image was found in the values.
    """
    ANNOTATION = "annotation"
    SINGLE_STRING = "single-string"
    SPLIT_KEYS = "split-keys"
    OBJECT = "object"


@dataclass(frozen=True)
class Location:
    """A scalar value in the tree, addressed by its parent and key. The key may not exist yet."""

    tree: ValuesTree
    key: str

    @property
    def value(self) -> Optional[str]:
        return self.tree.scalar(self.key)


@dataclass(frozen=True)
class Candidate:
    """
    A name that may denote a container.

    root is the whole values tree. subtree is where the conventional image
    keys are looked up: the root itself for the release container, the
    top-level mapping of the same name for a named container, or None when
    the name only comes from an annotation.
    """

    name: str
    root: ValuesTree
    subtree: Optional[ValuesTree]

    def resolve(self, path: str) -> Optional[Location]:
        """
        Finds the string at a dot-separated path, from the root first and
        then from the candidate's own sub-tree.
        """
        trees = [self.root]
        if self.subtree is not None and self.subtree != self.root:
            trees.append(self.subtree)
        for tree in trees:
            location = tree.locate(path)
            if location is not None and location[0].scalar(location[1]) is not None:
                return Location(*location)
        return None


@dataclass(frozen=True)
class ImageMatch:
    """
    The image of a candidate and the exact values it was read from.

    When tag is None, repository holds the whole 'repository[:tag]' string.
    The object form always records its tag location, even when the image
    mapping has no tag key yet; writing the image creates it.
    """

    encoding: Encoding
    image: ImageReference
    repository: Location
    tag: Optional[Location] = None


Matcher = Callable[[Candidate, AnnotationOverrides], Optional[ImageMatch]]


def _split_image(repository: str, tag: str) -> ImageReference:
    if ImageReference.split_tag(repository)[1] is not None:
        raise AmbiguousImageEncoding(
            f"repository {repository!r} already carries a tag and a separate tag {tag!r} is set")
    ImageReference.check_tag(tag)
    return ImageReference.parse(f"{repository}:{tag}")


def match_annotation(candidate: Candidate, overrides: AnnotationOverrides) -> Optional[ImageMatch]:
    override = overrides.get(candidate.name)
    if override is None or not override.repository_key:
        return None
    repository = candidate.resolve(override.repository_key)
    if repository is None:
        return None
    if not override.tag_key:
        return ImageMatch(Encoding.ANNOTATION, ImageReference.parse(repository.value), repository)
    tag = candidate.resolve(override.tag_key)
    if tag is None:
        return None
    return ImageMatch(Encoding.ANNOTATION, _split_image(repository.value, tag.value), repository, tag)


def match_single_string(candidate: Candidate, overrides: AnnotationOverrides) -> Optional[ImageMatch]:
    tree = candidate.subtree
    if tree is None or tree.scalar(IMAGE_KEY) is None or TAG_KEY in tree:
        return None
    location = Location(tree, IMAGE_KEY)
    return ImageMatch(Encoding.SINGLE_STRING, ImageReference.parse(location.value), location)


def match_split_keys(candidate: Candidate, overrides: AnnotationOverrides) -> Optional[ImageMatch]:
    tree = candidate.subtree
    if tree is None or tree.scalar(IMAGE_KEY) is None or tree.scalar(TAG_KEY) is None:
        return None
    repository, tag = Location(tree, IMAGE_KEY), Location(tree, TAG_KEY)
    return ImageMatch(Encoding.SPLIT_KEYS, _split_image(repository.value, tag.value), repository, tag)


def match_object(candidate: Candidate, overrides: AnnotationOverrides) -> Optional[ImageMatch]:
    tree = candidate.subtree
    image = tree.mapping(IMAGE_KEY) if tree is not None else None
    if image is None or image.scalar(REPOSITORY_KEY) is None:
        return None
    repository = Location(image, REPOSITORY_KEY)
    tag = Location(image, TAG_KEY)
    if TAG_KEY not in image:
        return ImageMatch(Encoding.OBJECT, ImageReference.parse(repository.value), repository, tag)
    if tag.value is None:
        return None
    return ImageMatch(Encoding.OBJECT, _split_image(repository.value, tag.value), repository, tag)


DEFAULT_MATCHERS: Sequence[Matcher] = (
    match_annotation,
    match_single_string,
    match_split_keys,
    match_object,
)


def resolve_candidate(candidate: Candidate,
                      overrides: AnnotationOverrides,
                      matchers: Sequence[Matcher] = DEFAULT_MATCHERS) -> Optional[ImageMatch]:
    """
    Applies the matchers in order and returns the first match.

    A candidate whose image cannot be parsed, or is encoded ambiguously,
    is dropped without affecting any other candidate.
    """
    for matcher in matchers:
        try:
            match = matcher(candidate, overrides)
        except AmbiguousImageEncoding as e:
            logger.warning("Ignoring container %r: %s", candidate.name, e)
            return None
        except InvalidImageReference as e:
            logger.debug("Ignoring container %r: %s", candidate.name, e)
            return None
        if match is not None:
            return match
    return None

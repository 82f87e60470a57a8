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
Enumerates the candidate containers of a values tree and resolves them.
"""
import logging
from typing import Dict, Optional, Sequence

from ..MODELS.container import DEFAULT_CONVENTIONS, ImageConventions
from ..MODELS.values_tree import ValuesTree
from .annotation_overrides import AnnotationOverrides
from .matchers import DEFAULT_MATCHERS, Candidate, ImageMatch, Matcher, resolve_candidate

logger = logging.getLogger(__name__)


def find_candidates(root: ValuesTree,
                    overrides: AnnotationOverrides,
                    conventions: ImageConventions = DEFAULT_CONVENTIONS) -> Dict[str, Candidate]:
    """
    Lists every name that may denote a container.

    These are the names with a repository override, the release container
    (the root itself) and every top-level key holding a mapping. Only one
    level of nesting is considered.

    :param root: The values tree.
    :param overrides: Annotation overrides of the resource.
    :param conventions: Naming contract, for the release container name.
    :return: Candidates by name.
    """
    release_name = conventions.release_container_name
    candidates: Dict[str, Candidate] = {}

    for name in overrides.repository_mapped_names():
        subtree = root if name == release_name else root.mapping(name)
        candidates[name] = Candidate(name, root, subtree)

    candidates.setdefault(release_name, Candidate(release_name, root, root))

    for key, node in root.items():
        if isinstance(node, ValuesTree):
            candidates.setdefault(key, Candidate(key, root, node))

    return candidates


def resolve_containers(root: ValuesTree,
                       overrides: AnnotationOverrides,
                       conventions: ImageConventions = DEFAULT_CONVENTIONS,
                       matchers: Sequence[Matcher] = DEFAULT_MATCHERS) -> Dict[str, ImageMatch]:
    """
    Resolves all candidates, dropping those without an image.
    """
    matches: Dict[str, ImageMatch] = {}
    for name, candidate in find_candidates(root, overrides, conventions).items():
        match = resolve_candidate(candidate, overrides, matchers)
        if match is not None:
            matches[name] = match
    logger.debug("Resolved %d container(s): %s", len(matches), ", ".join(matches))
    return matches


def resolve_container(root: ValuesTree,
                      overrides: AnnotationOverrides,
                      name: str,
                      conventions: ImageConventions = DEFAULT_CONVENTIONS,
                      matchers: Sequence[Matcher] = DEFAULT_MATCHERS) -> Optional[ImageMatch]:
    """
    Resolves a single candidate by name, or returns None if it has no image.
    """
    candidate = find_candidates(root, overrides, conventions).get(name)
    if candidate is None:
        return None
    return resolve_candidate(candidate, overrides, matchers)

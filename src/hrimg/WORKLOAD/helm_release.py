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
The workload view of a Helm release resource: its containers, and a way to
change their images.
"""
from typing import Any, List, Mapping, MutableMapping, Optional

from ..MODELS.container import DEFAULT_CONVENTIONS, Container, ImageConventions
from ..MODELS.image_reference import ImageReference
from ..MODELS.values_tree import ValuesTree
from .annotation_overrides import AnnotationOverrides
from .mutator import set_container_image
from .ordering import sorted_containers
from .walker import resolve_containers

HELM_RELEASE_KINDS = ("fluxhelmrelease", "helmrelease")


class HelmReleaseWorkload:
    """
    A Helm release whose images live in spec.values.

    Not safe for concurrent set_container_image calls; callers own the
    document and serialize writes to it.
    """

    def __init__(self,
                 name: str,
                 values: ValuesTree,
                 annotations: Optional[Mapping[str, str]] = None,
                 namespace: str = "default",
                 kind: str = "FluxHelmRelease",
                 conventions: ImageConventions = DEFAULT_CONVENTIONS,
                 source: Optional[str] = None):
        """
        :param name: metadata.name of the resource.
        :param values: The values tree, borrowed and edited in place.
        :param annotations: metadata.annotations of the resource.
        :param namespace: metadata.namespace of the resource.
        :param kind: The resource kind.
        :param conventions: Naming contract for containers and annotations.
        :param source: Where the resource was read from, for messages.
        """
        self.name = name
        self.namespace = namespace
        self.kind = kind
        self.values = values
        self.conventions = conventions
        self.source = source
        self.overrides = AnnotationOverrides.from_annotations(annotations, conventions)

    @classmethod
    def from_document(cls,
                      document: MutableMapping[str, Any],
                      conventions: ImageConventions = DEFAULT_CONVENTIONS,
                      source: Optional[str] = None) -> "HelmReleaseWorkload":
        """
        Builds the workload from a loaded manifest document.
        The values are borrowed from the document, not copied.
        """
        metadata = document.get("metadata")
        if not isinstance(metadata, MutableMapping):
            metadata = {}
        spec = document.get("spec")
        values = spec.get("values") if isinstance(spec, MutableMapping) else None
        annotations = metadata.get("annotations")
        return cls(
            name=str(metadata.get("name", "")),
            namespace=str(metadata.get("namespace") or "default"),
            kind=str(document.get("kind", "")),
            values=ValuesTree(values) if isinstance(values, MutableMapping) else ValuesTree(),
            annotations=annotations if isinstance(annotations, Mapping) else None,
            conventions=conventions,
            source=source,
        )

    @property
    def resource_id(self) -> str:
        return f"{self.namespace}:{self.kind.lower()}/{self.name}"

    def containers(self) -> List[Container]:
        """
        Returns the containers found in the values, release container first
        and the others sorted by name. Recomputed on every call.
        """
        matches = resolve_containers(self.values, self.overrides, self.conventions)
        return [
            Container(name=name, image=matches[name].image)
            for name in sorted_containers(matches, self.conventions.release_container_name)
        ]

    def set_container_image(self, name: str, image: ImageReference) -> None:
        """
        Rewrites the image of one container in place.

        :raises ContainerNotFound: If the name does not resolve to an image.
        """
        set_container_image(self.values, self.overrides, name, image, self.conventions)

    def __repr__(self) -> str:
        return f"HelmReleaseWorkload({self.resource_id})"

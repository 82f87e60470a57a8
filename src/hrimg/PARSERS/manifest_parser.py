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
Parsers for multi-document Kubernetes manifest files.
"""
import io
import logging
from typing import Any, Dict, List, Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from ..exceptions import ManifestParseError, ResourceNotFound
from ..MODELS.container import DEFAULT_CONVENTIONS, ImageConventions
from ..UTILS.yaml_loader import get_yaml_instance
from ..WORKLOAD.helm_release import HELM_RELEASE_KINDS, HelmReleaseWorkload

logger = logging.getLogger(__name__)


class Manifest:
    """
    All documents of a manifest file, with the Helm release workloads among them.

    The workloads edit the loaded documents in place, so to_string()
    reflects every set_container_image() call made through them.
    """
    def __init__(self, documents: List[Any], yaml: YAML, source: str, workloads: Dict[str, HelmReleaseWorkload]):
        self.documents = documents
        self.yaml = yaml
        self.source = source
        self.workloads = workloads

    def workload(self, resource_id: str) -> HelmReleaseWorkload:
        """
        :param resource_id: Id such as 'maria:fluxhelmrelease/mariadb'.
        :raises ResourceNotFound: If there is no such workload.
        """
        try:
            return self.workloads[resource_id]
        except KeyError:
            raise ResourceNotFound(resource_id) from None

    def to_string(self) -> str:
        """Serializes every document back to YAML."""
        stream = io.StringIO()
        self.yaml.dump_all(self.documents, stream)
        return stream.getvalue()


class ManifestParser:
    """
    Parser for manifest files holding Helm release resources.
    """
    def __init__(self, conventions: ImageConventions = DEFAULT_CONVENTIONS):
        """
        :param conventions: Naming contract handed to every workload.
        """
        self.conventions = conventions

    def parse(self, manifest_path: str) -> Manifest:
        """
        Parses a manifest file from a path.

        :param manifest_path: Path to the manifest file.
        :return: Parsed manifest.
        """
        with open(manifest_path, 'r') as f:
            content = f.read()
        return self.parse_from_string(content, source=manifest_path)

    def parse_from_string(self, content: str, source: Optional[str] = None) -> Manifest:
        """
        Parses a manifest from a string.

        :param content: YAML content, possibly several documents.
        :param source: Where the content came from, for messages.
        :return: Parsed manifest.
        :raises ManifestParseError: If the content is not valid YAML or two
                                    workloads share a resource id.
        """
        source = source or "<string>"
        yaml = get_yaml_instance(content)
        try:
            documents = list(yaml.load_all(content))
        except YAMLError as e:
            raise ManifestParseError(f"{source}: {e}") from e

        workloads: Dict[str, HelmReleaseWorkload] = {}
        for document in documents:
            if not isinstance(document, dict) or not isinstance(document.get("kind"), str):
                continue
            if document["kind"].lower() not in HELM_RELEASE_KINDS:
                continue
            workload = HelmReleaseWorkload.from_document(document, self.conventions, source)
            if workload.resource_id in workloads:
                raise ManifestParseError(f"{source}: duplicate resource {workload.resource_id}")
            workloads[workload.resource_id] = workload

        logger.debug("Parsed %d document(s), %d workload(s) from %s", len(documents), len(workloads), source)
        return Manifest(documents, yaml, source, workloads)


def parse_multidoc(content: str, source: Optional[str] = None,
                   conventions: ImageConventions = DEFAULT_CONVENTIONS) -> Dict[str, HelmReleaseWorkload]:
    """
    Returns the Helm release workloads of a manifest stream by resource id.
    """
    return ManifestParser(conventions).parse_from_string(content, source).workloads

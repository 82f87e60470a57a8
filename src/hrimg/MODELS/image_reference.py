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
Image reference parsing and handling.
Parses image references like 'bitnami/mariadb' or 'localhost:5000/team/app:v1'.
"""

from dataclasses import dataclass, replace
from typing import Optional, Tuple

from ..exceptions import InvalidImageReference


@dataclass(frozen=True)
class ImageReference:
    """
    Parsed container image reference.

    The tag is always present once parsed; references without one get
    DEFAULT_TAG, and str() always renders 'repository:tag'.

    Examples:
        - bitnami/mariadb -> bitnami/mariadb:latest
        - bitnami/mariadb:10.1.30-r1 -> bitnami/mariadb:10.1.30-r1
        - localhost:5000/myimage -> localhost:5000/myimage:latest
    """

    repository: str
    tag: str = "latest"

    DEFAULT_TAG = "latest"

    def __post_init__(self):
        if not self.repository:
            raise InvalidImageReference("Empty repository")
        self.check_tag(self.tag)

    @staticmethod
    def check_tag(tag: str) -> None:
        """
        Reject tags that would not survive a round-trip through str().

        Raises:
            InvalidImageReference: If the tag is empty or contains a colon,
                a slash or whitespace.
        """
        if not tag:
            raise InvalidImageReference("Empty tag")
        if ":" in tag or "/" in tag or any(c.isspace() for c in tag):
            raise InvalidImageReference(f"Invalid tag: {tag!r}")

    @classmethod
    def parse(cls, reference: str) -> "ImageReference":
        """
        Parse an image reference string.

        Args:
            reference: Image reference string (e.g., 'nginx', 'myuser/myimage:v1')

        Returns:
            Parsed ImageReference object.

        Raises:
            InvalidImageReference: If the string is empty or malformed.
        """
        if not reference:
            raise InvalidImageReference("Empty image reference")
        if any(c.isspace() for c in reference):
            raise InvalidImageReference(f"Image reference contains whitespace: {reference!r}")
        if "@" in reference:
            raise InvalidImageReference(f"Digest image references are not supported: {reference!r}")

        repository, tag = cls.split_tag(reference)
        if not repository:
            raise InvalidImageReference(f"Empty repository in image reference: {reference!r}")
        if tag == "":
            raise InvalidImageReference(f"Empty tag in image reference: {reference!r}")

        return cls(repository=repository, tag=tag if tag is not None else cls.DEFAULT_TAG)

    @staticmethod
    def split_tag(reference: str) -> Tuple[str, Optional[str]]:
        """
        Split a reference at its tag separator.

        Returns:
            (repository, tag), where tag is None if the reference has no tag.
        """
        last_colon = reference.rfind(":")
        # A slash after the colon means it is a registry port, not a tag
        if last_colon == -1 or "/" in reference[last_colon + 1 :]:
            return reference, None
        return reference[:last_colon], reference[last_colon + 1 :]

    def with_new_tag(self, tag: str) -> "ImageReference":
        """
        Return a copy of this reference pointing at another tag.

        Raises:
            InvalidImageReference: If the tag is not a valid tag.
        """
        self.check_tag(tag)
        return replace(self, tag=tag)

    def __str__(self) -> str:
        return f"{self.repository}:{self.tag}"

    def __repr__(self) -> str:
        return f"ImageReference({self})"

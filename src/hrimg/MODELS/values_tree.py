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
The values tree of a Helm release, seen as a closed variant of nodes.

A node is either a Scalar or a nested ValuesTree. Strings and numbers are
scalars; a number is read back as the text it was written with, so an
unquoted 'tag: 5.10' is the tag '5.10'. Any other YAML value (booleans,
null, sequences) is not a node at all, so the resolvers never have to guess
at runtime types themselves.

The tree wraps the ruamel.yaml round-trip mapping it was loaded into and
writes straight into it, so unrelated keys, comments and ordering survive
re-serialization.
"""

from dataclasses import dataclass
from typing import Any, Iterator, List, MutableMapping, Optional, Tuple, Union

from ruamel.yaml.comments import CommentedMap
from ruamel.yaml.scalarint import BinaryInt, HexCapsInt, HexInt, OctalInt
from ruamel.yaml.scalarstring import ScalarString


@dataclass(frozen=True)
class Scalar:
    """A string or numeric leaf of the values tree, as written."""

    value: str


Node = Union[Scalar, "ValuesTree"]


def _float_text(value: float) -> str:
    exp = getattr(value, "_exp", None)
    width = getattr(value, "_width", None)
    prec = getattr(value, "_prec", None)
    if exp is not None or width is None or prec is None or prec < 0:
        return repr(float(value))
    # ruamel keeps the written width and the position of the dot
    text = f"{float(value):.{width - prec - 1}f}"
    if prec == width - 1:
        text += "."
    if getattr(value, "_m_sign", False) == "+":
        text = "+" + text
    return text.zfill(width)


def _scalar_text(value: Any) -> Optional[str]:
    """The source text of a string or number, None for any other value."""
    if isinstance(value, str):
        return str(value)
    if isinstance(value, bool) or isinstance(value, (BinaryInt, HexInt, HexCapsInt, OctalInt)):
        return None
    if isinstance(value, int):
        # leading zeros are kept in _width
        digits = str(abs(int(value))).zfill(getattr(value, "_width", None) or 0)
        return "-" + digits if value < 0 else digits
    if isinstance(value, float):
        return _float_text(value)
    return None


def _wrap(value: Any) -> Optional[Node]:
    text = _scalar_text(value)
    if text is not None:
        return Scalar(text)
    if isinstance(value, MutableMapping):
        return ValuesTree(value)
    return None


class ValuesTree:
    """
    Ordered, mutable view over a values mapping.
    """

    def __init__(self, data: Optional[MutableMapping] = None):
        """
        :param data: The mapping to wrap. It is borrowed, not copied.
        """
        self.data = data if data is not None else CommentedMap()

    def __len__(self) -> int:
        return len(self.data)

    def __contains__(self, key: str) -> bool:
        return key in self.data

    def __eq__(self, other: object) -> bool:
        return isinstance(other, ValuesTree) and self.data is other.data

    def __repr__(self) -> str:
        return f"ValuesTree({list(self.data.keys())!r})"

    def keys(self) -> List[str]:
        return [key for key in self.data.keys() if isinstance(key, str)]

    def items(self) -> Iterator[Tuple[str, Node]]:
        """
        Iterates over the (key, node) pairs in document order,
        skipping values that are neither scalars nor mappings.
        """
        for key, value in self.data.items():
            node = _wrap(value)
            if isinstance(key, str) and node is not None:
                yield key, node

    def get(self, key: str) -> Optional[Node]:
        if key not in self.data:
            return None
        return _wrap(self.data[key])

    def scalar(self, key: str) -> Optional[str]:
        """Returns the scalar text under key, or None if it is absent or not a scalar."""
        node = self.get(key)
        return node.value if isinstance(node, Scalar) else None

    def mapping(self, key: str) -> Optional["ValuesTree"]:
        """Returns the sub-tree under key, or None if it is absent or not a mapping."""
        node = self.get(key)
        return node if isinstance(node, ValuesTree) else None

    def locate(self, path: str) -> Optional[Tuple["ValuesTree", str]]:
        """
        Follows a dot-separated key path.

        :param path: Path such as 'db.image.repository'.
        :return: The tree holding the last key and that key, or None
                 if any step of the path is missing or not a mapping.
        """
        keys = path.split(".")
        tree: ValuesTree = self
        for key in keys[:-1]:
            child = tree.mapping(key)
            if child is None:
                return None
            tree = child
        if keys[-1] not in tree:
            return None
        return tree, keys[-1]

    def lookup_scalar(self, path: str) -> Optional[str]:
        """Returns the string at a dot-separated path, or None."""
        location = self.locate(path)
        if location is None:
            return None
        tree, key = location
        return tree.scalar(key)

    def set_scalar(self, key: str, value: str, after: Optional[str] = None) -> None:
        """
        Overwrites the value under key, keeping the quoting style of the
        string it replaces. Comments attached to the key are untouched.

        :param after: When key is absent, it is inserted right after this
                      key so the other keys keep their order.
        """
        old = self.data.get(key)
        if isinstance(old, ScalarString):
            value = type(old)(value)
        if key not in self.data and after in self.data and isinstance(self.data, CommentedMap):
            self.data.insert(list(self.data.keys()).index(after) + 1, key, value)
            return
        self.data[key] = value

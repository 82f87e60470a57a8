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
Round-trip YAML instances that reproduce a document's own layout.
"""
import re
from typing import Tuple

from ruamel.yaml import YAML

_KEY_LINE = re.compile(r"^(\s*)[^\s#-][^#]*:\s*(#.*)?$")
_ITEM_LINE = re.compile(r"^(\s*)-(\s|$)")


def guess_sequence_indent(content: str) -> Tuple[int, int]:
    """
    Guesses how block sequences are indented under their parent key.

    :param content: YAML text.
    :return: (sequence indent, dash offset) as taken by YAML.indent().
    """
    parent = None
    for line in content.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or stripped.startswith("---"):
            continue
        item = _ITEM_LINE.match(line)
        if item and parent is not None:
            offset = len(item.group(1)) - len(parent.group(1))
            if offset >= 0:
                return offset + 2, offset
        parent = _KEY_LINE.match(line)
    return 2, 0


def get_yaml_instance(content: str = "") -> YAML:
    """
    Returns a round-trip YAML instance. When content is given, its
    sequence indentation and leading document marker are reproduced on dump.
    """
    sequence, offset = guess_sequence_indent(content)
    yaml = YAML(typ="rt")
    yaml.default_flow_style = False
    yaml.explicit_start = content.lstrip().startswith("---")
    yaml.preserve_quotes = True
    yaml.width = 4096
    yaml.indent(mapping=2, sequence=sequence, offset=offset)
    return yaml

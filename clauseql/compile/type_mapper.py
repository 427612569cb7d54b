"""Abstract → physical column type resolution for DDL statements."""

from __future__ import annotations

import re
from collections.abc import Mapping

# name(length)trailing, e.g. "string(32) NOT NULL"
_SIZED_TYPE = re.compile(r"^(\w+)\((.+?)\)(.*)$", re.DOTALL)
# name trailing..., e.g. "string NOT NULL"
_MODIFIED_TYPE = re.compile(r"^(\w+)\s+")
_TEMPLATE_SIZE = re.compile(r"\(.+\)")
_LEADING_NAME = re.compile(r"^\w+")


class TypeMapper:
    """Resolves abstract column types using a dialect type map.

    Three forms are understood (``string`` → ``varchar(255)`` here):

    * ``string`` → ``varchar(255)``
    * ``string(32) NOT NULL`` → ``varchar(32) NOT NULL``; the length
      replaces the parenthesized segment of the template (templates without
      one keep their text and only gain the trailing part)
    * ``string NOT NULL`` → ``varchar(255) NOT NULL``

    Anything else, including already-physical types, is returned unchanged.

    Args:
        type_map: Abstract type → physical template.  Read-only.
    """

    def __init__(self, type_map: Mapping[str, str]) -> None:
        self._type_map = dict(type_map)

    @property
    def type_map(self) -> dict[str, str]:
        return dict(self._type_map)

    def resolve(self, column_type: str) -> str:
        if column_type in self._type_map:
            return self._type_map[column_type]

        sized = _SIZED_TYPE.match(column_type)
        if sized:
            name, size, trailing = sized.groups()
            template = self._type_map.get(name)
            if template is None:
                return column_type
            resized = _TEMPLATE_SIZE.sub(lambda _: f"({size})", template)
            return f"{resized}{trailing}"

        modified = _MODIFIED_TYPE.match(column_type)
        if modified:
            template = self._type_map.get(modified.group(1))
            if template is not None:
                return _LEADING_NAME.sub(lambda _: template, column_type, count=1)

        return column_type

"""Derive operation tags from the folder tree."""

from postman_to_openapi.openapi.models import Operation, Tag
from postman_to_openapi.parser.base import Folder


def resolve_tags(folders: list[Folder], default_tag: str | None = None, group: str = "") -> list[str] | None:
    """Tags for a request nested in `folders` (outermost first).

    The top-level folder wins, then `default_tag`, then the path prefix
    folded away by `pathDepth`. None means the operation stays untagged.
    """
    if folders:
        return [folders[0].name]
    if default_tag:
        return [default_tag]
    if group:
        return [group]
    return None


class TagRegistry:
    """Document-level tags, deduplicated in order of first appearance."""

    def __init__(self):
        self._tags: dict[str, Tag] = {}

    def add(self, name: str, description: str = "") -> None:
        if name not in self._tags:
            self._tags[name] = Tag(name=name, description=description or None)

    @property
    def tags(self) -> list[Tag]:
        return list(self._tags.values())

    def used_by(self, operations: list[Operation]) -> list[Tag]:
        """Tags referenced by `operations`, still in first-appearance order.

        A tag only seen on an operation that a later duplicate replaced is dropped.
        """
        used = {name for op in operations for name in op.tags or []}
        return [tag for tag in self.tags if tag.name in used]

"""
Group number assignment and comment association.

Parts are walked in source order. Comments are merged into the part they
introduce, or kept as a standalone group when a blank line or the end of the
scope follows them. Blank lines and changes of kind open new groups; class
bodies are grouped and sorted on their own before the class is attached.
"""

import logging

from code_sorter.core.code_part import EXPORT_DEFAULT_GROUP, CodePart, PartKind
from code_sorter.core.ordering import Sorter

logger = logging.getLogger(__name__)

# Kinds whose members are usually separated by blank lines; a blank line
# after them does not start a new group.
SPACING_TOLERANT_KINDS = {PartKind.FUNCTION, PartKind.ENUM, PartKind.INTERFACE}


class Grouper:
    """Assigns group numbers to parsed parts"""

    def __init__(
        self,
        sorter: Sorter | None = None,
        sort_class_members: bool = True,
    ):
        self.sorter = sorter or Sorter()
        self.sort_class_members = sort_class_members

    def group(self, parts: list[CodePart]) -> list[CodePart]:
        """Prepare parsed parts by assigning group numbers and merging comments

        Args:
            parts: Parts of one scope in source order

        Returns:
            New list of non-blank parts with group numbers set
        """
        grouped: list[CodePart] = []
        group_number = 0
        previous_kind: PartKind | None = None
        last_kind: PartKind | None = None
        carried: CodePart | None = None

        for index, part in enumerate(parts):
            if carried is not None:
                part = part.with_leading_comment(carried)
                carried = None

            previous_kind = last_kind

            # Skip leading blank lines
            if part.is_blank and not grouped:
                continue

            following = parts[index + 1] if index + 1 < len(parts) else None

            if part.is_comment:
                if following is None or following.is_blank:
                    # Standalone comment
                    group_number += 1
                    grouped.append(part.with_group(group_number))
                    last_kind = part.kind
                else:
                    # Introduces the next part (or another comment)
                    carried = part
                continue

            if part.is_blank:
                if previous_kind not in SPACING_TOLERANT_KINDS:
                    group_number += 1
                continue

            last_kind = part.kind

            if part.kind is PartKind.CLASS:
                group_number += 1
                grouped.append(self._group_class(part, group_number))
            elif part.kind is PartKind.EXPORT_DEFAULT:
                grouped.append(part.with_group(EXPORT_DEFAULT_GROUP))
            else:
                if previous_kind is not part.kind:
                    group_number += 1
                grouped.append(part.with_group(group_number))

        logger.debug(f"Assigned {group_number} groups to {len(grouped)} parts")
        return grouped

    def _group_class(self, part: CodePart, group_number: int) -> CodePart:
        """Group and sort the members of a class before attaching it"""
        if not part.children or not self.sort_class_members:
            return part.with_group(group_number).with_children(())

        members = self.sorter.sort(self.group(list(part.children)))
        return part.with_group(group_number).with_children(members)

"""
Reassembly of sorted code parts into source text.
"""

import logging

from code_sorter.core.code_part import CodePart, PartKind

logger = logging.getLogger(__name__)

# Kinds always separated from the previous part by one empty line
SEPARATED_KINDS = {PartKind.FUNCTION, PartKind.CONSTRUCTOR}


class Reassembler:
    """Renders sorted parts back into text with a fixed spacing policy"""

    def render(self, parts: list[CodePart], is_root: bool = True) -> str:
        """Generate content from sorted code parts

        An empty line is inserted before a part when its group differs from
        the previous one or when it is a function or constructor, never two
        in a row.

        Args:
            parts: Sorted parts of one scope
            is_root: Only the root call ends the text with a newline

        Returns:
            Rendered text
        """
        result: list[str] = []
        last_group_number: int | None = None

        for part in parts:
            if not part.is_blank:
                needs_gap = (
                    part.group_number != last_group_number
                    or part.kind in SEPARATED_KINDS
                )
                if last_group_number is not None and needs_gap:
                    if result and result[-1].strip() != "":
                        result.append("")

                if part.kind is PartKind.CLASS and part.children:
                    result.append(self.render_class(part))
                else:
                    result.append(part.content.rstrip("\n"))

            last_group_number = part.group_number

        content = "\n".join(result)

        if is_root and not content.endswith("\n"):
            return content + "\n"
        return content

    def render_class(self, class_part: CodePart) -> str:
        """Rebuild a class around its sorted members"""
        members = self.render(list(class_part.children), is_root=False)
        return f"{class_part.header}\n{members}\n{class_part.footer}"

"""Derived tree projection of the flat file registry."""

from mvpb.domain.models.file_tree import FileTreeNode, NodeType
from mvpb.domain.models.generated_file import GeneratedFile


def _sort_nodes(nodes: list[FileTreeNode]) -> list[FileTreeNode]:
    # Folders first, then names case-insensitively
    ordered = sorted(
        nodes,
        key=lambda n: (n.type != NodeType.FOLDER, n.name.casefold(), n.name),
    )
    for node in ordered:
        if node.children is not None:
            node.children = _sort_nodes(node.children)
    return ordered


def build_file_tree(files: list[GeneratedFile]) -> list[FileTreeNode]:
    """Build a nested folder/file tree from '/'-separated paths.

    The tree is rebuilt from scratch on every call; it carries no state of
    its own. When a name is used both as a file and as a folder, the path
    listed first keeps it and the later conflicting path is left out.
    """
    root: list[FileTreeNode] = []

    for f in files:
        parts = f.path.split("/")
        current = root
        for index, part in enumerate(parts):
            is_file = index == len(parts) - 1
            node = next((n for n in current if n.name == part), None)
            if node is None:
                node = FileTreeNode(
                    name=part,
                    path="/".join(parts[: index + 1]),
                    type=NodeType.FILE if is_file else NodeType.FOLDER,
                    language=f.language if is_file else None,
                    is_generating=f.is_generating if is_file else None,
                    children=None if is_file else [],
                )
                current.append(node)
            elif node.type != (NodeType.FILE if is_file else NodeType.FOLDER):
                # Name already taken by a node of the other kind; first path wins
                break
            if not is_file:
                current = node.children

    return _sort_nodes(root)


def render_file_tree(nodes: list[FileTreeNode], indent: str = "") -> list[str]:
    """Render tree nodes as indented text lines (folders end with '/')."""
    lines: list[str] = []
    for node in nodes:
        if node.type == NodeType.FOLDER:
            lines.append(f"{indent}{node.name}/")
            lines.extend(render_file_tree(node.children or [], indent + "  "))
        else:
            marker = " *" if node.is_generating else ""
            lines.append(f"{indent}{node.name}{marker}")
    return lines

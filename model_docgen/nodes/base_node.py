"""
Base documentation node.

A documentation node is one entry of the output tree: it has a label, an
optional icon, ordered children, and may contribute a content page. Ids are
positional and computed on demand from the live parent/index chain, so
inserting, removing or reordering children changes the ids of the affected
descendants.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, Optional

from model_docgen.domain.constants import ID_SEPARATOR
from model_docgen.output.markup import MarkdownRenderer


@dataclass
class ContentContext:
    """
    Shared output context handed to every node during a build.

    Attributes:
        doc_folder: Output folder receiving the generated pages
        object_path_resolver: Maps any model object to the relative path of
            the page that renders it, or None
        icon_resolver: Maps an opaque icon reference to a stored asset path,
            or None
        markup: Markdown converter scoped to this build
    """
    doc_folder: Any
    object_path_resolver: Callable[[Any], Optional[str]]
    icon_resolver: Callable[[Any], Optional[str]]
    markup: MarkdownRenderer = field(default_factory=MarkdownRenderer)


class DocumentationNode:
    """
    Node in the documentation tree.

    Handles children management, positional id computation, delegation of
    object path resolution to the children, and pre-order traversal.
    Subclasses override ``build_content_generator`` to contribute a page and
    ``get_object_path`` to recognize the object they render.

    Example:
        >>> root = DocumentationNode('Model')
        >>> a = root.add_child(DocumentationNode('A'))
        >>> b = root.add_child(DocumentationNode('B'))
        >>> c = b.add_child(DocumentationNode('C'))
        >>> (root.id, a.id, b.id, c.id)
        (None, '0', '1', '1-0')
    """

    def __init__(self, label: str | None = None, icon: Any = None):
        self.label = label
        self.icon = icon
        self._children: list['DocumentationNode'] = []
        self._parent: Optional['DocumentationNode'] = None

    @property
    def parent(self) -> Optional['DocumentationNode']:
        return self._parent

    @property
    def children(self) -> tuple['DocumentationNode', ...]:
        return tuple(self._children)

    def add_child(self, child: 'DocumentationNode') -> 'DocumentationNode':
        """Attach a child at the end of the child list and return it."""
        if child._parent is not None:
            raise ValueError(f"Node '{child.label}' is already attached to '{child._parent.label}'")
        self._children.append(child)
        child._parent = self
        return child

    def remove_child(self, child: 'DocumentationNode') -> None:
        """Detach a child; the ids of its following siblings shift down."""
        self._children.pop(self._index_of(child))
        child._parent = None

    def _index_of(self, child: 'DocumentationNode') -> int:
        for index, candidate in enumerate(self._children):
            if candidate is child:
                return index
        raise ValueError(f"Node '{child.label}' is not a child of '{self.label}'")

    @property
    def id(self) -> str | None:
        """Positional id, None for a node without a parent."""
        if self._parent is None:
            return None
        index = str(self._parent._index_of(self))
        parent_id = self._parent.id
        return index if parent_id is None else parent_id + ID_SEPARATOR + index

    def get_object_path(self, obj: Any) -> str | None:
        """
        Resolve the content path of the node rendering ``obj``.

        Delegates to the children in order; override to add node-specific
        resolution.
        """
        for child in self._children:
            path = child.get_object_path(obj)
            if path is not None:
                return path
        return None

    def build_content_generator(self, context: ContentContext) -> str | None:
        """
        Register this node's content in ``context.doc_folder``.

        Returns:
            Path of the content entry point relative to the doc folder, or
            None for a pure navigation node
        """
        return None

    def accept(self, visitor: Callable[['DocumentationNode'], Any]) -> None:
        """Walk the visitor through this node and its descendants, pre-order."""
        visitor(self)
        for child in self._children:
            child.accept(visitor)

    def walk(self) -> Iterator['DocumentationNode']:
        yield self
        for child in self._children:
            yield from child.walk()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(label={self.label!r}, id={self.id!r})"

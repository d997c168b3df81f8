"""Documentation tree nodes."""

from model_docgen.nodes.base_node import ContentContext, DocumentationNode
from model_docgen.nodes.object_node import ObjectDocumentationNode

__all__ = ['ContentContext', 'DocumentationNode', 'ObjectDocumentationNode']

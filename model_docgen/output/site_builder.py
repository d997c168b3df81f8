"""Builds the navigable site: content pages, toc.js index, and icons."""

import json
import logging
from typing import Any

from model_docgen.domain.constants import (
    ICONS_FOLDER,
    INDEX_FILE,
    NAVIGATOR_RESOURCES,
    NO_CONTENT,
    RESOURCES_FOLDER,
    ROUTER_PREFIX,
    TOC_FILE,
)
from model_docgen.domain.models import SiteIndex
from model_docgen.nodes.base_node import ContentContext, DocumentationNode
from model_docgen.output.artifacts import OutputFolder
from model_docgen.output.html_renderer import HtmlRenderer, navigator_resource
from model_docgen.output.icon_manager import IconManager
from model_docgen.output.markup import MarkdownRenderer

logger = logging.getLogger(__name__)


class ContentGenerationError(Exception):
    """A node failed to generate its content; the original error is the cause."""

    def __init__(self, node_id: str | None, label: str | None, error: Exception):
        super().__init__(f"Content generation failed for node {node_id} '{label}': {error}")
        self.node_id = node_id
        self.label = label


def toc_script(index: SiteIndex, pretty: bool = False) -> str:
    """Wrap the site index for the navigator's ``define`` callback."""
    payload = json.dumps(index.to_json_dict(), indent=2 if pretty else None, ensure_ascii=False)
    return f"define({payload})"


class SiteBuilder:
    """
    Walks a documentation tree once and produces the navigator index.

    The root node is only a holder: its children become the top-level
    entries of the tree and its label becomes the page title. For each node,
    pre-order: resolve its icon, generate its content, recurse into the
    children, then assemble its tree entry.

    Args:
        root: Root documentation node.
        pretty: Indent the JSON written to toc.js.
    """

    def __init__(self, root: DocumentationNode, pretty: bool = False) -> None:
        self.root = root
        self.pretty = pretty
        self.icon_manager: IconManager | None = None

    def build(self, doc_folder: OutputFolder) -> SiteIndex:
        """Generate every node's content into ``doc_folder`` and index it."""
        icons_folder = OutputFolder(ICONS_FOLDER)
        self.icon_manager = IconManager(icons_folder)
        context = ContentContext(
            doc_folder=doc_folder,
            object_path_resolver=self.root.get_object_path,
            icon_resolver=self.icon_manager,
            markup=MarkdownRenderer(),
        )

        index = SiteIndex()
        for node in self.root.children:
            index.tree.append(self._create_toc(node, index.id_map, context))

        if not icons_folder.is_empty():
            doc_folder.attach(icons_folder)
        return index

    def _create_toc(self, node: DocumentationNode, id_map: dict[str, str],
                    context: ContentContext) -> dict[str, Any]:
        entry: dict[str, Any] = {'text': node.label}
        icon_path = context.icon_resolver(node.icon)
        if icon_path is not None:
            entry['icon'] = icon_path

        node_id = node.id
        entry['id'] = node_id
        try:
            entry_point = node.build_content_generator(context)
        except Exception as e:
            raise ContentGenerationError(node_id, node.label, e) from e
        id_map[node_id] = NO_CONTENT if entry_point is None else ROUTER_PREFIX + entry_point

        children = [self._create_toc(child, id_map, context) for child in node.children]
        if children:
            entry['children'] = children
        return entry

    def assemble(self, doc_folder: OutputFolder, title: str | None = None) -> SiteIndex:
        """Build the pages plus index.html, toc.js, and navigator resources."""
        index = self.build(doc_folder)

        renderer = HtmlRenderer()
        doc_folder.add_text(INDEX_FILE, renderer.render_index(title or self.root.label or 'Documentation'))
        doc_folder.add_text(TOC_FILE, toc_script(index, self.pretty))
        resources = doc_folder.folder(RESOURCES_FOLDER)
        for name in NAVIGATOR_RESOURCES:
            resources.add_text(name, navigator_resource(name))

        logger.info("Indexed %d nodes, %d icons", len(index.id_map), self.icon_manager.stored_count)
        return index

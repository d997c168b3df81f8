"""
Generic documentation node backed by the model introspector.

Used by the registry for every object no registered factory claims. Label,
icon and children come from the introspector; the page lists the object's
type, containment role and properties.
"""

import logging
from typing import Any

from model_docgen.domain.constants import ROUTER_PREFIX
from model_docgen.domain.models import PropertyDescriptor
from model_docgen.nodes.base_node import ContentContext, DocumentationNode
from model_docgen.output.html_renderer import HeaderRow, HtmlRenderer, PropertyView, TabView, ValueView

logger = logging.getLogger(__name__)

_SCALAR_TYPES = (str, bytes, int, float, bool)

_html = HtmlRenderer()


class ObjectDocumentationNode(DocumentationNode):
    """
    Documentation node for a single model object.

    Children are resolved through the registry that created this node, so
    registered factories apply at every depth. A child that is already
    being built higher up on the stack (a containment cycle) is skipped.

    Args:
        obj: The model object rendered by this node
        registry: FactoryRegistry resolving the children
        render_unset: Render properties that are not set; defaults to
            ``render_unset_properties``
    """

    render_unset_properties = False

    def __init__(self, obj: Any, registry, render_unset: bool | None = None):
        introspector = registry.introspector
        super().__init__(introspector.label(obj), introspector.icon(obj))
        self.obj = obj
        self.introspector = introspector
        self.render_unset = self.render_unset_properties if render_unset is None else render_unset

        for child in introspector.children(obj):
            if registry.in_progress(child):
                logger.debug("Skipping %r under %r: already on the containment path", child, obj)
                continue
            node = registry.resolve(child)
            if node is not None:
                self.add_child(node)

    @property
    def page_name(self) -> str:
        return f"{self.id}.html"

    def get_object_path(self, obj: Any) -> str | None:
        if obj is self.obj:
            return self.page_name
        return super().get_object_path(obj)

    def build_content_generator(self, context: ContentContext) -> str | None:
        uncategorized: list[PropertyDescriptor] = []
        categories: dict[str, list[PropertyDescriptor]] = {}
        for pd in self.introspector.properties(self.obj):
            if not (pd.is_set or self.render_unset):
                continue
            if pd.category and pd.category.strip():
                categories.setdefault(pd.category, []).append(pd)
            else:
                uncategorized.append(pd)

        model_type = self.introspector.type_of(self.obj)
        header_rows = [HeaderRow('Type', model_type.name, context.markup.to_html(model_type.documentation))]
        role = self.introspector.role(self.obj)
        if role is not None:
            header_rows.append(HeaderRow('Role', role[0], context.markup.to_html(role[1])))

        properties: list[PropertyView] = []
        tabs: list[TabView] = []
        if not categories:
            properties = self._render_all(uncategorized, context)
        else:
            general = self._render_all(uncategorized, context)
            if general:
                tabs.append(TabView('General', general))
            for category in sorted(categories):
                tabs.append(TabView(category, self._render_all(categories[category], context)))

        html = _html.render_object_page(
            label=self.label,
            icon_path=context.icon_resolver(self.icon),
            header_rows=header_rows,
            properties=properties,
            tabs=tabs,
        )
        page = context.doc_folder.add_text(self.page_name, html)
        return context.doc_folder.relative_path(page)

    def _render_all(self, descriptors: list[PropertyDescriptor], context: ContentContext) -> list[PropertyView]:
        views = [self.render_property(pd, context) for pd in descriptors]
        return [v for v in views if v is not None]

    def render_property(self, pd: PropertyDescriptor, context: ContentContext) -> PropertyView | None:
        """Render one property; None when it has no value."""
        if pd.value is None:
            return None
        if pd.is_many and isinstance(pd.value, (list, tuple, set, frozenset)):
            values = list(pd.value)
        else:
            values = [pd.value]
        return PropertyView(
            name=pd.display_name,
            values=[self.render_property_value(v, context) for v in values],
            description_html=context.markup.to_html(pd.description),
            is_many=pd.is_many,
        )

    def render_property_value(self, value: Any, context: ContentContext) -> ValueView:
        """Link values rendered elsewhere in the tree, escape everything else."""
        if value is None or isinstance(value, _SCALAR_TYPES):
            return ValueView('' if value is None else str(value))
        path = context.object_path_resolver(value)
        label = self.introspector.label(value)
        if path is None:
            return ValueView(label)
        return ValueView(label, ROUTER_PREFIX + path)

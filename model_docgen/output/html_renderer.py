"""HTML emission through Jinja2 templates shipped with the package."""

from dataclasses import dataclass, field
from importlib import resources

from jinja2 import Environment, PackageLoader, select_autoescape
from markupsafe import Markup


@dataclass
class ValueView:
    text: str
    href: str | None = None


@dataclass
class PropertyView:
    name: str
    values: list[ValueView]
    description_html: str | None = None
    is_many: bool = False


@dataclass
class TabView:
    title: str
    properties: list[PropertyView] = field(default_factory=list)


@dataclass
class HeaderRow:
    title: str
    value: str
    documentation_html: str | None = None


class HtmlRenderer:
    """Renders object pages and the site entry page."""

    def __init__(self) -> None:
        self._env = Environment(
            loader=PackageLoader('model_docgen', 'templates'),
            autoescape=select_autoescape(['html']),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render_object_page(
        self,
        label: str,
        icon_path: str | None,
        header_rows: list[HeaderRow],
        properties: list[PropertyView],
        tabs: list[TabView],
    ) -> str:
        return self._env.get_template('object_page.html').render(
            label=label,
            icon_path=icon_path,
            header_rows=[self._trusted(row) for row in header_rows],
            properties=[self._trusted(p) for p in properties],
            tabs=[TabView(t.title, [self._trusted(p) for p in t.properties]) for t in tabs],
        )

    def render_index(self, title: str) -> str:
        return self._env.get_template('index.html').render(title=title)

    @staticmethod
    def _trusted(view):
        # Markdown output is already HTML
        for attr in ('documentation_html', 'description_html'):
            value = getattr(view, attr, None)
            if value is not None:
                setattr(view, attr, Markup(value))
        return view


def navigator_resource(name: str) -> str:
    """Text of a client-side navigator asset shipped with the package."""
    return resources.files('model_docgen').joinpath('resources').joinpath(name).read_text(encoding='utf-8')

"""Shared data models used across registry, node, and output modules."""

from dataclasses import dataclass, field
from typing import Any, Callable


@dataclass(eq=False)
class FactoryEntry:
    """A registered (type pattern -> factory) pair.

    A blank ``type_name`` matches every type of the namespace. Entries are
    compared by identity so that ``unregister`` removes exactly the entry
    that was registered.
    """

    namespace: str
    type_name: str | None
    factory: Callable[..., Any]
    source: str = ''

    @property
    def is_catch_all(self) -> bool:
        return not (self.type_name or '').strip()

    def sort_key(self) -> tuple[int, str]:
        if self.is_catch_all:
            return (1, self.namespace)
        return (0, f"{self.namespace}#{self.type_name}")

    def matches(self, model_type: 'ModelType') -> bool:
        if not self.is_catch_all and model_type.name != self.type_name:
            return False
        return model_type.namespace == self.namespace

    def describe(self) -> str:
        pattern = self.namespace if self.is_catch_all else f"{self.namespace}#{self.type_name}"
        return f"{pattern} -> {self.source or getattr(self.factory, '__qualname__', repr(self.factory))}"


@dataclass(eq=False)
class ModelType:
    """A run-time type: namespace, name, and ordered direct supertypes.

    Identity-hashed; supertype graphs may contain diamonds and cycles.
    """

    namespace: str
    name: str
    supertypes: list['ModelType'] = field(default_factory=list)
    documentation: str | None = None
    attributes: dict[str, dict[str, Any]] = field(default_factory=dict)

    @property
    def qualified_name(self) -> str:
        return f"{self.namespace}#{self.name}"

    def __repr__(self) -> str:
        return f"ModelType({self.qualified_name!r})"


@dataclass
class PropertyDescriptor:
    """A structural feature of a model object as seen by the renderer."""

    display_name: str
    value: Any
    description: str | None = None
    is_many: bool = False
    is_set: bool = True
    category: str | None = None


@dataclass
class SiteIndex:
    """The navigator index: flat id -> content path map plus nested tree."""

    id_map: dict[str, str] = field(default_factory=dict)
    tree: list[dict[str, Any]] = field(default_factory=list)

    def to_json_dict(self) -> dict[str, Any]:
        return {'idMap': self.id_map, 'tree': self.tree}


@dataclass
class GenerateOptions:
    """Options controlling site generation."""

    title: str | None = None
    render_unset: bool = False
    overwrite: bool = True
    use_entry_points: bool = True
    factory_specs: list[str] = field(default_factory=list)
    pretty: bool = False
    restrict_icons: bool = False


@dataclass
class GenerateResult:
    """Result summary of a generation run."""

    nodes: int
    pages: int
    icons: int
    output_dir: str
    files_written: int

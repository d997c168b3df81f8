"""In-memory representation of a loaded model document."""

from dataclasses import dataclass, field
from typing import Any

from model_docgen.domain.models import ModelType


@dataclass(eq=False)
class ModelObject:
    """An instance of a ``ModelType`` with properties and contained objects.

    ``contents`` keeps containment order; ``role`` is the containment feature
    under which the object sits in its container.
    """

    type: ModelType
    object_id: str | None = None
    label: str | None = None
    icon: Any = None
    properties: dict[str, Any] = field(default_factory=dict)
    contents: list['ModelObject'] = field(default_factory=list)
    role: str | None = None
    container: 'ModelObject | None' = field(default=None, repr=False)

    def __repr__(self) -> str:
        return f"ModelObject({self.type.qualified_name}, id={self.object_id!r})"


@dataclass
class ModelDocument:
    """A loaded model: its name, declared types, and root objects."""

    name: str
    types: dict[str, ModelType]
    roots: list[ModelObject]
    objects_by_id: dict[str, ModelObject] = field(default_factory=dict)
    source_file: str = ''

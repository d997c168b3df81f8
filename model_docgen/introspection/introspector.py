"""Introspection of model objects and plain Python objects."""

import dataclasses
import functools
import re
from typing import Any

from model_docgen.domain.models import ModelType, PropertyDescriptor
from model_docgen.introspection.model import ModelObject

_CAMEL_BOUNDARY_RE = re.compile(r'(?<=[a-z0-9])(?=[A-Z])')


@functools.lru_cache(maxsize=None)
def python_type(cls: type) -> ModelType:
    """Describe a Python class as a ModelType, cached per class.

    The namespace is the defining module and supertypes follow ``__bases__``
    order; ``object`` is left out.
    """
    return ModelType(
        namespace=cls.__module__,
        name=cls.__qualname__,
        supertypes=[python_type(base) for base in cls.__bases__ if base is not object],
        documentation=cls.__doc__,
    )


def display_name(name: str) -> str:
    words = _CAMEL_BOUNDARY_RE.sub(' ', name).replace('_', ' ').split()
    if not words:
        return name
    return ' '.join([words[0].capitalize()] + [w.lower() for w in words[1:]])


def _is_node_value(value: Any) -> bool:
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


class Introspector:
    """Yields label, icon, children, and properties for any model object.

    ``ModelObject`` instances are described by their declared type; every
    other object is described by its Python class.
    """

    def type_of(self, obj: Any) -> ModelType:
        if isinstance(obj, ModelObject):
            return obj.type
        return python_type(type(obj))

    def label(self, obj: Any) -> str:
        if isinstance(obj, ModelObject):
            name = obj.properties.get('name')
            return obj.label or (str(name) if name else '') or obj.type.name
        return str(obj) or type(obj).__name__

    def icon(self, obj: Any) -> Any:
        if isinstance(obj, ModelObject):
            return obj.icon
        return None

    def children(self, obj: Any) -> list[Any]:
        if isinstance(obj, ModelObject):
            return list(obj.contents)
        if not _is_node_value(obj):
            return []
        result = []
        for f in dataclasses.fields(obj):
            value = getattr(obj, f.name)
            if _is_node_value(value):
                result.append(value)
            elif isinstance(value, (list, tuple)):
                result.extend(item for item in value if _is_node_value(item))
        return result

    def role(self, obj: Any) -> tuple[str, str | None] | None:
        """Containment feature name and its documentation, if known."""
        if not isinstance(obj, ModelObject) or not obj.role:
            return None
        documentation = None
        if obj.container is not None:
            attribute = self._attributes(obj.container.type).get(obj.role, {})
            documentation = attribute.get('documentation')
        return obj.role, documentation

    def properties(self, obj: Any) -> list[PropertyDescriptor]:
        if isinstance(obj, ModelObject):
            return self._model_properties(obj)
        return self._python_properties(obj)

    def _model_properties(self, obj: ModelObject) -> list[PropertyDescriptor]:
        declared = self._attributes(obj.type)
        names = list(declared) + [n for n in obj.properties if n not in declared]

        descriptors = []
        for name in names:
            attribute = declared.get(name, {})
            is_set = name in obj.properties and obj.properties[name] not in (None, '', [])
            value = obj.properties[name] if name in obj.properties else attribute.get('default')
            descriptors.append(PropertyDescriptor(
                display_name=attribute.get('label') or display_name(name),
                value=value,
                description=attribute.get('documentation'),
                is_many=attribute.get('many', isinstance(value, list)),
                is_set=is_set,
                category=attribute.get('category'),
            ))
        return descriptors

    @staticmethod
    def _attributes(model_type: ModelType) -> dict[str, dict[str, Any]]:
        """Declared attributes of a type and its supertypes, nearest first."""
        merged: dict[str, dict[str, Any]] = {}
        visited: set[int] = set()
        queue = [model_type]
        while queue:
            current = queue.pop(0)
            if id(current) in visited:
                continue
            visited.add(id(current))
            for name, attribute in current.attributes.items():
                merged.setdefault(name, attribute)
            queue.extend(current.supertypes)
        return merged

    def _python_properties(self, obj: Any) -> list[PropertyDescriptor]:
        if _is_node_value(obj):
            items = [(f.name, getattr(obj, f.name)) for f in dataclasses.fields(obj)]
        elif hasattr(obj, '__dict__'):
            items = list(vars(obj).items())
        else:
            return []

        descriptors = []
        for name, value in items:
            if name.startswith('_') or _is_node_value(value):
                continue
            if isinstance(value, (list, tuple)) and any(_is_node_value(v) for v in value):
                continue
            descriptors.append(PropertyDescriptor(
                display_name=display_name(name),
                value=value,
                is_many=isinstance(value, (list, tuple)),
                is_set=value not in (None, '', [], ()),
            ))
        return descriptors

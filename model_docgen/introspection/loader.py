"""
Loader for JSON model documents.

A model document declares its types (namespace, name, supertypes,
documentation, attribute metadata) and one or more root objects. Objects
reference their type as ``"<namespace>#<name>"``, nest contained objects under
``contents`` keyed by containment role, and point at other objects with
``{"$ref": "<object id>"}`` property values.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

from model_docgen.domain.constants import ICON_URL_SCHEMES, REF_KEY, TYPE_REF_SEPARATOR
from model_docgen.domain.models import ModelType
from model_docgen.introspection.model import ModelDocument, ModelObject

logger = logging.getLogger(__name__)


class ModelLoadError(Exception):
    """Error reading or linking a model document."""
    pass


def load_model(path: str, restrict_icons: bool = False) -> ModelDocument:
    """Read and link a JSON model document from disk.

    With ``restrict_icons`` only icons inside the model's directory and
    http(s) URLs are kept; see ``parse_model``.
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ModelLoadError(f"Failed to read model {path}: {e}") from e

    base_dir = os.path.dirname(os.path.abspath(path))
    document = parse_model(data, base_dir=base_dir, restrict_icons=restrict_icons)
    document.source_file = os.path.basename(path)
    if not document.name:
        document.name = document.source_file
    return document


def parse_model(data: dict[str, Any], base_dir: str = '',
                restrict_icons: bool = False) -> ModelDocument:
    """
    Build a ModelDocument from already-decoded JSON.

    Args:
        data: Decoded model document
        base_dir: Directory relative icon paths are resolved against
        restrict_icons: Drop ``file:`` URLs and icon paths that resolve
            outside ``base_dir`` (for models from untrusted sources)

    Returns:
        ModelDocument with supertypes and object references linked

    Raises:
        ModelLoadError: On malformed structure, unknown type or object
            references, and duplicate ids
    """
    if not isinstance(data, dict):
        raise ModelLoadError("Model document must be a JSON object")

    types = _parse_types(_expect(data.get('types', []), list, 'types'))
    builder = _ObjectBuilder(types, base_dir, restrict_icons)

    raw_roots = data.get('roots')
    if raw_roots is None:
        raw_roots = [data['root']] if 'root' in data else []
    roots = [builder.build(raw) for raw in _expect(raw_roots, list, 'roots')]
    builder.link_references(roots)

    return ModelDocument(
        name=data.get('name', ''),
        types=types,
        roots=roots,
        objects_by_id=builder.objects_by_id,
    )


_JSON_KINDS = {list: 'array', dict: 'object', str: 'string'}


def _expect(value: Any, expected: type, what: str) -> Any:
    if not isinstance(value, expected):
        raise ModelLoadError(f"'{what}' must be a JSON {_JSON_KINDS[expected]}, got {type(value).__name__}")
    return value


def _parse_types(raw_types: list[dict[str, Any]]) -> dict[str, ModelType]:
    types: dict[str, ModelType] = {}
    for raw in raw_types:
        _expect(raw, dict, 'types[]')
        try:
            model_type = ModelType(
                namespace=raw['namespace'],
                name=raw['name'],
                documentation=raw.get('documentation'),
                attributes=dict(_expect(raw.get('attributes', {}), dict, 'attributes')),
            )
        except KeyError as e:
            raise ModelLoadError(f"Type declaration is missing {e}") from e
        if model_type.qualified_name in types:
            raise ModelLoadError(f"Duplicate type {model_type.qualified_name}")
        types[model_type.qualified_name] = model_type

    # Second pass so supertypes may be declared in any order (cycles included)
    for raw in raw_types:
        model_type = types[f"{raw['namespace']}{TYPE_REF_SEPARATOR}{raw['name']}"]
        for ref in _expect(raw.get('supertypes', []), list, 'supertypes'):
            model_type.supertypes.append(_lookup_type(types, ref))
    return types


def _lookup_type(types: dict[str, ModelType], ref: Any) -> ModelType:
    if not isinstance(ref, str) or ref not in types:
        raise ModelLoadError(f"Unknown type reference '{ref}'")
    return types[ref]


def _resolve_icon(icon: Any, base_dir: str, restrict: bool = False) -> Any:
    if not isinstance(icon, str) or not icon:
        return icon
    scheme = urlparse(icon).scheme
    if scheme in ICON_URL_SCHEMES:
        if restrict and scheme == 'file':
            logger.warning("Ignoring file URL icon %s", icon)
            return None
        return icon
    path = Path(icon)
    if not path.is_absolute() and base_dir:
        path = Path(base_dir) / path
    if restrict and not _is_within(path, Path(base_dir or '.')):
        logger.warning("Ignoring icon %s outside the model directory", icon)
        return None
    return path


def _is_within(path: Path, directory: Path) -> bool:
    try:
        return path.resolve().is_relative_to(directory.resolve())
    except (OSError, ValueError):
        return False


class _ObjectBuilder:
    """Builds ModelObjects recursively and links ``$ref`` values afterwards."""

    def __init__(self, types: dict[str, ModelType], base_dir: str, restrict_icons: bool = False):
        self._types = types
        self._base_dir = base_dir
        self._restrict_icons = restrict_icons
        self.objects_by_id: dict[str, ModelObject] = {}

    def build(self, raw: dict[str, Any], container: ModelObject | None = None,
              role: str | None = None) -> ModelObject:
        if not isinstance(raw, dict) or 'type' not in raw:
            raise ModelLoadError(f"Model object without a type: {raw!r}")

        obj = ModelObject(
            type=_lookup_type(self._types, raw['type']),
            object_id=raw.get('id'),
            label=raw.get('label'),
            icon=_resolve_icon(raw.get('icon'), self._base_dir, self._restrict_icons),
            properties=dict(_expect(raw.get('properties', {}), dict, 'properties')),
            role=role,
            container=container,
        )
        if obj.object_id is not None:
            _expect(obj.object_id, str, 'id')
            if obj.object_id in self.objects_by_id:
                raise ModelLoadError(f"Duplicate object id '{obj.object_id}'")
            self.objects_by_id[obj.object_id] = obj

        for feature, value in _expect(raw.get('contents', {}), dict, 'contents').items():
            children = value if isinstance(value, list) else [value]
            for child in children:
                obj.contents.append(self.build(child, container=obj, role=feature))
        return obj

    def link_references(self, roots: list[ModelObject]) -> None:
        stack = list(roots)
        while stack:
            obj = stack.pop()
            obj.properties = {k: self._link(v) for k, v in obj.properties.items()}
            stack.extend(obj.contents)

    def _link(self, value: Any) -> Any:
        if isinstance(value, list):
            return [self._link(item) for item in value]
        if isinstance(value, dict) and set(value) == {REF_KEY}:
            target = value[REF_KEY]
            if not isinstance(target, str) or target not in self.objects_by_id:
                raise ModelLoadError(f"Unknown object reference '{target}'")
            return self.objects_by_id[target]
        return value

"""Shared test fixtures."""

import copy
import json

import pytest

from model_docgen.domain.models import ModelType
from model_docgen.factory_registry import FactoryRegistry
from model_docgen.introspection.loader import parse_model


# ── Sample Models ────────────────────────────────────────────────────────

PNG_BYTES = b'\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR'

LIBRARY_MODEL = {
    'name': 'City library',
    'types': [
        {
            'namespace': 'urn:lib',
            'name': 'Item',
            'documentation': 'Anything that can be *borrowed*.',
            'attributes': {
                'title': {'documentation': 'Display title.'},
                'year': {'category': 'Publication'},
                'publisher': {'category': 'Publication'},
            },
        },
        {'namespace': 'urn:lib', 'name': 'Book', 'supertypes': ['urn:lib#Item'],
         'attributes': {'authors': {'many': True}}},
        {'namespace': 'urn:lib', 'name': 'Magazine', 'supertypes': ['urn:lib#Item']},
        {'namespace': 'urn:lib', 'name': 'Shelf',
         'attributes': {'items': {'documentation': 'Items placed on the shelf.'}}},
        {
            'namespace': 'urn:lib',
            'name': 'Library',
            'documentation': 'A lending library.',
            'attributes': {
                'name': {},
                'featured': {'documentation': 'Book of the month.'},
                'shelves': {'documentation': 'Shelves of the library.'},
            },
        },
    ],
    'roots': [
        {
            'type': 'urn:lib#Library',
            'id': 'lib',
            'icon': 'icons/library.png',
            'properties': {'name': 'Central', 'featured': {'$ref': 'dune'}},
            'contents': {
                'shelves': [
                    {
                        'type': 'urn:lib#Shelf',
                        'id': 'shelf-a',
                        'label': 'Shelf A',
                        'icon': 'icons/shelf.png',
                        'contents': {
                            'items': [
                                {
                                    'type': 'urn:lib#Book',
                                    'id': 'dune',
                                    'icon': 'icons/book.png',
                                    'properties': {
                                        'title': 'Dune',
                                        'year': 1965,
                                        'authors': ['Frank Herbert'],
                                    },
                                },
                                {
                                    'type': 'urn:lib#Magazine',
                                    'id': 'wired',
                                    'icon': 'icons/book.png',
                                    'properties': {'title': 'Wired'},
                                },
                            ],
                        },
                    },
                    {'type': 'urn:lib#Shelf', 'id': 'shelf-b', 'label': 'Shelf B'},
                ],
            },
        },
    ],
}


# ── Fixtures ─────────────────────────────────────────────────────────────

@pytest.fixture
def library_data():
    """A fresh deep copy of the sample library model document."""
    return copy.deepcopy(LIBRARY_MODEL)


@pytest.fixture
def library_model(library_data, tmp_path):
    """The sample library model, parsed with icons resolved under tmp_path."""
    return parse_model(library_data, base_dir=str(tmp_path))


@pytest.fixture
def model_file(tmp_path, library_data):
    """Write the sample model and its icons to disk and return the model path."""
    icons = tmp_path / 'icons'
    icons.mkdir()
    for name in ('library.png', 'shelf.png', 'book.png'):
        (icons / name).write_bytes(PNG_BYTES + name.encode())
    path = tmp_path / 'library.json'
    path.write_text(json.dumps(library_data), encoding='utf-8')
    return str(path)


@pytest.fixture
def registry():
    return FactoryRegistry()


@pytest.fixture
def make_type():
    """Build ModelTypes: make_type('Widget', 'urn:x', supertypes=[...])."""
    def _make(name: str, namespace: str = 'urn:x', supertypes=None) -> ModelType:
        return ModelType(namespace=namespace, name=name, supertypes=list(supertypes or []))
    return _make

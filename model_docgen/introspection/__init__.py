"""Model introspection: JSON model documents and plain Python objects."""

from model_docgen.introspection.model import ModelDocument, ModelObject
from model_docgen.introspection.loader import ModelLoadError, load_model, parse_model
from model_docgen.introspection.introspector import Introspector, python_type

__all__ = [
    'ModelDocument', 'ModelObject', 'ModelLoadError',
    'load_model', 'parse_model', 'Introspector', 'python_type',
]

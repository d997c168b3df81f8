"""Registry mapping model types to documentation node factories."""

import importlib
import logging
import threading
from importlib.metadata import entry_points
from typing import Any, Callable

from model_docgen.domain.constants import (
    CATCH_ALL_OFFSET,
    ENTRY_POINT_GROUP,
    LEVEL_INCREMENT,
    TYPE_REF_SEPARATOR,
)
from model_docgen.domain.models import FactoryEntry, ModelType
from model_docgen.introspection.introspector import Introspector
from model_docgen.nodes.base_node import DocumentationNode
from model_docgen.nodes.object_node import ObjectDocumentationNode

logger = logging.getLogger(__name__)

Factory = Callable[[Any, 'FactoryRegistry'], DocumentationNode]


class FactoryLoadError(Exception):
    """A factory reference could not be imported or instantiated."""
    pass


def load_factory(ref: str) -> Factory:
    """
    Load a factory from a ``"module:attribute"`` reference.

    A ``DocumentationNode`` subclass is used as the factory itself, any other
    class is instantiated without arguments, and a plain callable is used
    as is.

    Raises:
        FactoryLoadError: If the reference is malformed, cannot be imported,
            or does not yield a callable
    """
    module_name, _, attribute = ref.strip().partition(':')
    if not module_name or not attribute:
        raise FactoryLoadError(f"Factory reference must be 'module:attribute', got '{ref}'")
    try:
        target: Any = importlib.import_module(module_name)
        for part in attribute.split('.'):
            target = getattr(target, part)
        return _as_factory(target)
    except FactoryLoadError:
        raise
    except Exception as e:
        raise FactoryLoadError(f"Cannot load factory '{ref}': {e}") from e


def _as_factory(target: Any) -> Factory:
    if isinstance(target, type):
        if issubclass(target, DocumentationNode):
            return target
        target = target()
    if not callable(target):
        raise FactoryLoadError(f"Factory {target!r} is not callable")
    return target


def parse_type_pattern(pattern: str) -> tuple[str, str | None]:
    """Split ``"namespace#TypeName"`` (or a bare namespace) into its parts."""
    namespace, sep, type_name = pattern.strip().rpartition(TYPE_REF_SEPARATOR)
    if not sep:
        return type_name, None
    return namespace, type_name or None


class FactoryRegistry:
    """
    Selects the documentation node factory for an object's run-time type.

    Entries are kept sorted: specific entries before namespace-wide ones,
    lexicographic within each group. Resolution walks the supertype graph of
    the object's type and picks the factory with the smallest distance; an
    exact match on the type itself is authoritative. Objects without any
    match get the default factory.

    The entry list is an immutable snapshot swapped under a lock, so
    ``resolve`` never observes a partially sorted list while plugins
    register or unregister concurrently.
    """

    def __init__(self, introspector: Introspector | None = None,
                 default_factory: Factory | None = None):
        self.introspector = introspector or Introspector()
        self.default_factory = default_factory or ObjectDocumentationNode
        self._lock = threading.Lock()
        self._entries: tuple[FactoryEntry, ...] = ()
        self._local = threading.local()

    # ── Registration ────────────────────────────────────────────────────

    def register(self, entry: FactoryEntry) -> FactoryEntry:
        with self._lock:
            self._entries = tuple(sorted(self._entries + (entry,), key=FactoryEntry.sort_key))
        logger.debug("Registered factory %s", entry.describe())
        return entry

    def register_factory(self, namespace: str, type_name: str | None,
                         factory: Factory) -> FactoryEntry:
        return self.register(FactoryEntry(namespace, type_name, factory))

    def unregister(self, entry: FactoryEntry) -> bool:
        """Remove an entry by identity; returns False if it was not registered."""
        with self._lock:
            remaining = tuple(e for e in self._entries if e is not entry)
            removed = len(remaining) != len(self._entries)
            self._entries = remaining
        return removed

    def entries(self) -> tuple[FactoryEntry, ...]:
        with self._lock:
            return self._entries

    def register_spec(self, namespace: str, type_name: str | None,
                      ref: str) -> FactoryEntry | None:
        """Load and register a factory reference; load failures are logged and skipped."""
        try:
            factory = load_factory(ref)
        except FactoryLoadError as e:
            logger.warning("Skipping factory for %s#%s: %s", namespace, type_name or '*', e)
            return None
        return self.register(FactoryEntry(namespace, type_name, factory, source=ref))

    def register_specs(self, specs: list[str]) -> list[FactoryEntry]:
        """Register ``"namespace[#TypeName]=module:attribute"`` specs."""
        registered = []
        for spec in specs:
            pattern, sep, ref = spec.partition('=')
            if not sep:
                logger.warning("Skipping malformed factory spec '%s'", spec)
                continue
            namespace, type_name = parse_type_pattern(pattern)
            entry = self.register_spec(namespace, type_name, ref)
            if entry is not None:
                registered.append(entry)
        return registered

    def load_entry_points(self, group: str = ENTRY_POINT_GROUP) -> list[FactoryEntry]:
        """Register factories advertised by installed distributions."""
        registered = []
        for ep in entry_points(group=group):
            namespace, type_name = parse_type_pattern(ep.name)
            try:
                factory = _as_factory(ep.load())
            except Exception as e:
                logger.warning("Skipping factory entry point '%s' (%s): %s", ep.name, ep.value, e)
                continue
            registered.append(self.register(FactoryEntry(namespace, type_name, factory, source=ep.value)))
        return registered

    # ── Matching ────────────────────────────────────────────────────────

    def match(self, model_type: ModelType) -> dict[Factory, int]:
        """Collect matching factories and their distances for a type."""
        entries = self.entries()
        accumulator: dict[Factory, int] = {}
        self._match(model_type, entries, accumulator, set(), 0)
        return accumulator

    def _match(self, model_type: ModelType, entries: tuple[FactoryEntry, ...],
               accumulator: dict[Factory, int], traversed: set[ModelType],
               distance: int) -> None:
        if model_type in traversed:
            return
        traversed.add(model_type)
        for entry in entries:
            if not entry.matches(model_type):
                continue
            if entry.is_catch_all:
                accumulator[entry.factory] = distance + CATCH_ALL_OFFSET
            else:
                accumulator[entry.factory] = distance
                if distance == 0:
                    return  # Exact match, no need to search further
        for offset, supertype in enumerate(model_type.supertypes):
            self._match(supertype, entries, accumulator, traversed,
                        distance + LEVEL_INCREMENT + offset)

    def select_factory(self, model_type: ModelType) -> Factory:
        matched = self.match(model_type)
        if not matched:
            return self.default_factory
        # min() keeps the first recorded factory among equal distances
        factory, distance = min(matched.items(), key=lambda item: item[1])
        logger.debug("Resolved %s to %r at distance %d", model_type.qualified_name, factory, distance)
        return factory

    # ── Resolution ──────────────────────────────────────────────────────

    def resolve(self, obj: Any) -> DocumentationNode | None:
        """Create the documentation node responsible for ``obj``."""
        if obj is None:
            return None
        factory = self.select_factory(self.introspector.type_of(obj))
        stack = self._in_progress_stack()
        stack.append(obj)
        try:
            return factory(obj, self)
        finally:
            stack.pop()

    def in_progress(self, obj: Any) -> bool:
        """Whether a node for ``obj`` is currently being built on this thread."""
        return any(candidate is obj for candidate in self._in_progress_stack())

    def _in_progress_stack(self) -> list[Any]:
        stack = getattr(self._local, 'stack', None)
        if stack is None:
            stack = self._local.stack = []
        return stack

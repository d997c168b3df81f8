"""Shared constants for dispatch, tree ids, and site output.

Centralizes the values that the registry, the documentation nodes and the
site builder must agree on.
"""

# ── Dispatch Distances ───────────────────────────────────────────────────

# Added per supertype step; the sibling index is added on top of it
LEVEL_INCREMENT = 1000

# Added to every namespace-wide match so any specific match outranks it
CATCH_ALL_OFFSET = 1_000_000

# ── Node Ids ─────────────────────────────────────────────────────────────

ID_SEPARATOR = '-'

# ── Site Index ───────────────────────────────────────────────────────────

ROUTER_PREFIX = '#router/doc-content/'
NO_CONTENT = '#'

TOC_FILE = 'toc.js'
INDEX_FILE = 'index.html'
ICONS_FOLDER = 'icons'
RESOURCES_FOLDER = 'resources'

# Client-side assets shipped with the package, copied into resources/
NAVIGATOR_RESOURCES = ('navigator.js', 'navigator.css')

# ── Icons ────────────────────────────────────────────────────────────────

ICON_URL_SCHEMES = {'file', 'http', 'https'}
ICON_FETCH_TIMEOUT = 10.0

# ── Plugins ──────────────────────────────────────────────────────────────

ENTRY_POINT_GROUP = 'model_docgen.node_factories'

# ── Model Format ─────────────────────────────────────────────────────────

TYPE_REF_SEPARATOR = '#'
REF_KEY = '$ref'

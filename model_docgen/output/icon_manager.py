"""Icon asset deduplication for one site build."""

import http.client
import logging
import os
import urllib.request
from typing import Any
from urllib.parse import unquote, urlparse

from model_docgen.domain.constants import ICON_FETCH_TIMEOUT, ICON_URL_SCHEMES, ICONS_FOLDER
from model_docgen.output.artifacts import OutputFolder

logger = logging.getLogger(__name__)

_BASE36_DIGITS = '0123456789abcdefghijklmnopqrstuvwxyz'


def to_base36(number: int) -> str:
    if number == 0:
        return '0'
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_BASE36_DIGITS[rem])
    return ''.join(reversed(digits))


def _is_url(icon: Any) -> bool:
    return isinstance(icon, str) and urlparse(icon).scheme in ICON_URL_SCHEMES


def _last_segment(path: str) -> str:
    return path.replace('\\', '/').rstrip('/').rsplit('/', 1)[-1]


def candidate_name(icon: Any) -> str | None:
    """Derive a file name from the icon's last path segment.

    URL paths are percent-decoded before splitting so encoded separators
    cannot smuggle directory parts into the name.
    """
    if isinstance(icon, os.PathLike):
        name = _last_segment(os.fspath(icon))
    elif _is_url(icon):
        name = _last_segment(unquote(urlparse(icon).path))
    else:
        return None
    if name in ('', '.', '..'):
        return 'icon'
    return name


class IconManager:
    """
    Stores each distinct icon once under ``icons/`` and returns its path.

    Keeps two maps for the duration of one build: icon reference to assigned
    path, and the set of claimed file names. Distinct icons whose names
    collide get ``name-<base36 counter>.ext``. Icons that are neither
    ``os.PathLike`` nor file/http(s) URLs yield None, as do icons whose bytes
    cannot be read.

    Args:
        icons_folder: Folder receiving the icon assets.
    """

    def __init__(self, icons_folder: OutputFolder) -> None:
        self.icons_folder = icons_folder
        self._paths: dict[Any, str | None] = {}
        self._names: set[str] = set()

    def __call__(self, icon: Any) -> str | None:
        return self.resolve(icon)

    @property
    def stored_count(self) -> int:
        return len(self._names)

    def resolve(self, icon: Any) -> str | None:
        if icon is None:
            return None
        try:
            if icon in self._paths:
                return self._paths[icon]
        except TypeError:
            logger.debug("Ignoring unhashable icon %r", icon)
            return None

        name = candidate_name(icon)
        if name is None:
            self._paths[icon] = None
            return None

        try:
            data = self._fetch(icon)
        except (OSError, ValueError, http.client.HTTPException) as e:
            logger.warning("Unable to store icon %s: %s", icon, e)
            self._paths[icon] = None
            return None

        name = self._claim(name)
        self.icons_folder.add_binary(name, data)
        path = f"{ICONS_FOLDER}/{name}"
        self._paths[icon] = path
        return path

    def _claim(self, name: str) -> str:
        if name not in self._names:
            self._names.add(name)
            return name
        # Split at the last dot, so '.png' keeps its extension: '-1.png'
        stem, dot, extension = name.rpartition('.')
        if dot:
            suffix = dot + extension
        else:
            stem, suffix = name, ''
        counter = 1
        while True:
            alt_name = f"{stem}-{to_base36(counter)}{suffix}"
            if alt_name not in self._names:
                self._names.add(alt_name)
                return alt_name
            counter += 1

    @staticmethod
    def _fetch(icon: Any) -> bytes:
        if isinstance(icon, os.PathLike):
            with open(icon, 'rb') as f:
                return f.read()
        with urllib.request.urlopen(icon, timeout=ICON_FETCH_TIMEOUT) as response:
            return response.read()

"""In-memory output tree.

Nodes register their pages and assets here during the build; nothing touches
the filesystem until ``OutputFolder.write`` runs once at the end.

Output structure (for a generated site):
    output_dir/
    ├── index.html
    ├── toc.js
    ├── resources/navigator.{js,css}
    ├── icons/ (only if any icon was stored)
    └── {node_id}.html
"""

import logging
import os
from typing import Iterator

logger = logging.getLogger(__name__)


class ArtifactConflictError(Exception):
    """Two artifacts were registered under the same name in one folder."""
    pass


class Artifact:
    """A named entry of the output tree."""

    def __init__(self, name: str):
        self.name = name
        self.parent: 'OutputFolder | None' = None

    @property
    def path(self) -> str:
        """Path relative to the root folder, '/'-separated."""
        parts = []
        node: Artifact | None = self
        while node is not None and node.parent is not None:
            parts.append(node.name)
            node = node.parent
        return '/'.join(reversed(parts))


class TextArtifact(Artifact):
    def __init__(self, name: str, content: str):
        super().__init__(name)
        self.content = content


class BinaryArtifact(Artifact):
    def __init__(self, name: str, data: bytes):
        super().__init__(name)
        self.data = data


class OutputFolder(Artifact):
    """A folder of text files, binary files, and subfolders."""

    def __init__(self, name: str = ''):
        super().__init__(name)
        self._children: dict[str, Artifact] = {}

    @property
    def children(self) -> list[Artifact]:
        return list(self._children.values())

    def is_empty(self) -> bool:
        return not self._children

    def get(self, name: str) -> Artifact | None:
        return self._children.get(name)

    def attach(self, artifact: Artifact) -> Artifact:
        """Add ``artifact`` to this folder; its name must be a single path segment."""
        name = artifact.name
        if name in ('', '.', '..') or any(sep and sep in name for sep in ('/', os.sep, os.altsep)):
            raise ValueError(f"Invalid artifact name '{name}'")
        if artifact.name in self._children:
            raise ArtifactConflictError(f"'{artifact.name}' already exists in '{self.path or '.'}'")
        artifact.parent = self
        self._children[artifact.name] = artifact
        return artifact

    def add_text(self, name: str, content: str) -> TextArtifact:
        return self.attach(TextArtifact(name, content))

    def add_binary(self, name: str, data: bytes) -> BinaryArtifact:
        return self.attach(BinaryArtifact(name, data))

    def folder(self, name: str) -> 'OutputFolder':
        """Return the subfolder ``name``, creating it if needed."""
        existing = self._children.get(name)
        if isinstance(existing, OutputFolder):
            return existing
        return self.attach(OutputFolder(name))

    def relative_path(self, artifact: Artifact) -> str:
        """Path of ``artifact`` relative to this folder."""
        parts = []
        node: Artifact | None = artifact
        while node is not None and node is not self:
            parts.append(node.name)
            node = node.parent
        if node is None:
            raise ValueError(f"'{artifact.name}' is not inside '{self.path or '.'}'")
        return '/'.join(reversed(parts))

    def iter_files(self) -> Iterator[tuple[str, Artifact]]:
        """Yield (relative path, artifact) for every file below this folder."""
        for child in self._children.values():
            if isinstance(child, OutputFolder):
                for sub_path, artifact in child.iter_files():
                    yield f"{child.name}/{sub_path}", artifact
            else:
                yield child.name, child

    def write(self, target_dir: str, overwrite: bool = True) -> list[str]:
        """
        Write every file below this folder into ``target_dir``.

        Args:
            target_dir: Destination directory, created if missing
            overwrite: Replace existing files; when False they are kept

        Returns:
            Paths of the files actually written
        """
        written = []
        for rel_path, artifact in self.iter_files():
            dest = os.path.join(target_dir, *rel_path.split('/'))
            if os.path.exists(dest) and not overwrite:
                logger.info("Keeping existing %s", dest)
                continue
            os.makedirs(os.path.dirname(dest), exist_ok=True)
            if isinstance(artifact, BinaryArtifact):
                with open(dest, 'wb') as f:
                    f.write(artifact.data)
            else:
                with open(dest, 'w', encoding='utf-8') as f:
                    f.write(artifact.content)
            written.append(dest)
        logger.info("Wrote %d files to %s", len(written), target_dir)
        return written

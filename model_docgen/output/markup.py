"""Markdown to HTML conversion for model documentation."""

import markdown


class MarkdownRenderer:
    """Converts documentation markup to HTML fragments.

    Python-Markdown keeps per-document state, so the converter is reset
    before every conversion.
    """

    EXTENSIONS = ['tables', 'fenced_code', 'sane_lists']

    def __init__(self) -> None:
        self._md = markdown.Markdown(extensions=self.EXTENSIONS)

    def to_html(self, text: str | None) -> str | None:
        if not text or not text.strip():
            return None
        self._md.reset()
        return self._md.convert(text)

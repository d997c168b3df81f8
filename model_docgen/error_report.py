"""Failure reports that keep the full causal chain of an exception.

A failed generation is reported as a tree rather than one flattened message:
explicit causes (``raise ... from``) appear as "Caused by", an implicit
context replaced by a newer exception as "Suppressed", and members of an
exception group as "Grouped".
"""

import traceback
from dataclasses import dataclass, field
from typing import Any


@dataclass
class FailureReport:
    message: str
    frames: list[str] = field(default_factory=list)
    children: list['FailureReport'] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            'message': self.message,
            'frames': self.frames,
            'children': [c.to_dict() for c in self.children],
        }


def _describe(exc: BaseException) -> str:
    text = f"{type(exc).__name__}: {exc}" if str(exc) else type(exc).__name__
    notes = getattr(exc, '__notes__', None)
    if notes:
        text += ''.join(f"\n{note}" for note in notes)
    return text


def build_failure_report(exc: BaseException, prefix: str = '',
                         _seen: set[int] | None = None) -> FailureReport:
    seen = _seen if _seen is not None else set()
    seen.add(id(exc))
    frames = [
        f"{frame.filename}:{frame.lineno} in {frame.name}"
        for frame in traceback.extract_tb(exc.__traceback__)
    ]
    report = FailureReport(message=prefix + _describe(exc), frames=frames)

    if exc.__cause__ is not None and id(exc.__cause__) not in seen:
        report.children.append(build_failure_report(exc.__cause__, 'Caused by: ', seen))
    context = exc.__context__
    if (context is not None and not exc.__suppress_context__
            and context is not exc.__cause__ and id(context) not in seen):
        report.children.append(build_failure_report(context, 'Suppressed: ', seen))
    if isinstance(exc, BaseExceptionGroup):
        for member in exc.exceptions:
            if id(member) not in seen:
                report.children.append(build_failure_report(member, 'Grouped: ', seen))
    return report


def format_failure_report(report: FailureReport, show_frames: bool = True, indent: int = 0) -> str:
    pad = '  ' * indent
    lines = [pad + line for line in report.message.splitlines() or ['']]
    if show_frames:
        lines.extend(f"{pad}    at {frame}" for frame in report.frames)
    for child in report.children:
        lines.append(format_failure_report(child, show_frames, indent + 1))
    return '\n'.join(lines)

"""Tests for failure report construction and formatting."""

from model_docgen.error_report import build_failure_report, format_failure_report


def raise_chained():
    try:
        {}['key']
    except KeyError as e:
        raise RuntimeError('lookup failed') from e


def raise_during_handling():
    try:
        raise ValueError('first')
    except ValueError:
        raise TypeError('second')


def capture(fn):
    try:
        fn()
    except BaseException as e:
        return e
    raise AssertionError('expected an exception')


class TestBuildFailureReport:

    def test_message_and_frames(self):
        report = build_failure_report(capture(raise_chained))
        assert report.message == 'RuntimeError: lookup failed'
        assert any('raise_chained' in frame for frame in report.frames)

    def test_explicit_cause(self):
        report = build_failure_report(capture(raise_chained))
        assert len(report.children) == 1
        assert report.children[0].message == "Caused by: KeyError: 'key'"

    def test_implicit_context_reported_as_suppressed(self):
        report = build_failure_report(capture(raise_during_handling))
        assert [c.message for c in report.children] == ['Suppressed: ValueError: first']

    def test_suppressed_context_hidden(self):
        def raise_from_none():
            try:
                raise ValueError('first')
            except ValueError:
                raise TypeError('second') from None

        report = build_failure_report(capture(raise_from_none))
        assert report.children == []

    def test_exception_group_members(self):
        group = ExceptionGroup('several', [ValueError('a'), KeyError('b')])
        report = build_failure_report(group)
        assert [c.message for c in report.children] == [
            'Grouped: ValueError: a', "Grouped: KeyError: 'b'"]

    def test_notes_appended(self):
        error = ValueError('bad')
        error.add_note('while loading model.json')
        assert build_failure_report(error).message == 'ValueError: bad\nwhile loading model.json'

    def test_empty_message(self):
        assert build_failure_report(RuntimeError()).message == 'RuntimeError'

    def test_to_dict(self):
        data = build_failure_report(capture(raise_chained)).to_dict()
        assert data['message'] == 'RuntimeError: lookup failed'
        assert data['children'][0]['message'] == "Caused by: KeyError: 'key'"
        assert data['children'][0]['children'] == []


class TestFormatFailureReport:

    def test_nested_indentation(self):
        text = format_failure_report(build_failure_report(capture(raise_chained)), show_frames=False)
        assert text == "RuntimeError: lookup failed\n  Caused by: KeyError: 'key'"

    def test_frames_included(self):
        text = format_failure_report(build_failure_report(capture(raise_chained)))
        assert '    at ' in text
        assert 'raise_chained' in text

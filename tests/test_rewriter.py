"""Tests for the rewrite engine."""

import random

import pytest

from l10n_extractor.core.errors import OverlappingEditsError
from l10n_extractor.core.models import BoundRecord, ExtractionRecord, SourceLocation, TextEdit
from l10n_extractor.core.rewriter import RewriteEngine, apply_edits, find_overlap, rewrite_file
from l10n_extractor.frameworks.flutter import FlutterAdapter

IMPORT = FlutterAdapter.DEFAULT_IMPORT_LINE


def bind(source, value, replacement, line=None, occurrence=0):
    """Bound record for the ``occurrence``-th literal ``'value'`` in ``source``."""
    data = source.encode('utf-8')
    literal = f"'{value}'".encode('utf-8')
    offset = -1
    for _ in range(occurrence + 1):
        offset = data.index(literal, offset + 1)
    if line is None:
        line = data[:offset].count(b'\n') + 1
    record = ExtractionRecord(
        value=value,
        location=SourceLocation('lib/a.dart', line, 1, offset, len(literal)),
    )
    return BoundRecord(record=record, replacement=replacement)


@pytest.fixture
def engine():
    return RewriteEngine(FlutterAdapter(), import_line='')


class TestRewriteEngine:
    """Applying bound records to source text."""

    def test_no_records_is_identity(self):
        """Nothing to apply leaves the text untouched."""
        source = "final w = Text('Sign in');\n"
        result = RewriteEngine(FlutterAdapter()).rewrite(source, [])
        assert result.modified_text == source
        assert result.applied_count == 0
        assert not result.changed
        assert not result.import_added

    def test_single_replacement(self, engine):
        """The literal including its quotes is replaced."""
        source = "final w = Text('Sign in');"
        result = engine.rewrite(source, [bind(source, 'Sign in', 'S.signIn')])
        assert result.modified_text == "final w = Text(S.signIn);"
        assert result.applied_count == 1
        assert result.changed

    def test_duplicate_values(self, engine):
        """Each occurrence is replaced at its own offset."""
        source = "final w = Column(children: [Text('Save'), Text('Save')]);"
        records = [bind(source, 'Save', 'S.save'), bind(source, 'Save', 'S.save', occurrence=1)]
        result = engine.rewrite(source, records)
        assert result.modified_text == "final w = Column(children: [Text(S.save), Text(S.save)]);"
        assert result.applied_count == 2

    def test_multibyte_offsets(self, engine):
        """Byte offsets stay correct after multi-byte text."""
        source = "final a = Text('Ünïcödé ok'); final b = Text('Sign in');"
        result = engine.rewrite(source, [bind(source, 'Sign in', 'S.signIn')])
        assert result.modified_text == "final a = Text('Ünïcödé ok'); final b = Text(S.signIn);"

    def test_adjacent_strings_replaced_whole(self, engine):
        """An adjacent-string sequence is replaced as one literal."""
        source = "final w = Text('Hello ' 'World');"
        offset = source.index("'Hello '")
        record = ExtractionRecord(
            value='Hello World',
            location=SourceLocation('lib/a.dart', 1, offset + 1, offset, len("'Hello ' 'World'")),
        )
        result = engine.rewrite(source, [BoundRecord(record=record, replacement='S.helloWorld')])
        assert result.modified_text == "final w = Text(S.helloWorld);"

    def test_randomized_against_concatenation(self, engine):
        """Any subset in any order equals rebuilding the text piece by piece."""
        rng = random.Random(20240611)
        for _ in range(25):
            count = rng.randint(1, 12)
            pieces = []
            records = []
            offset = 0
            chosen = set(rng.sample(range(count), rng.randint(0, count)))
            expected = []
            for i in range(count):
                prefix = f"final v{i} = Text("
                literal = f"'Item number {i}'"
                suffix = ");\n"
                pieces.append(prefix + literal + suffix)
                literal_offset = offset + len(prefix)
                expected.append(prefix + (f"L.item{i}" if i in chosen else literal) + suffix)
                if i in chosen:
                    record = ExtractionRecord(
                        value=f'Item number {i}',
                        location=SourceLocation('lib/a.dart', i + 1, len(prefix) + 1,
                                                literal_offset, len(literal)),
                    )
                    records.append(BoundRecord(record=record, replacement=f"L.item{i}"))
                offset += len(pieces[-1])
            rng.shuffle(records)

            result = engine.rewrite(''.join(pieces), records)
            assert result.modified_text == ''.join(expected)
            assert result.applied_count == len(chosen)

    def test_overlap_raises(self, engine):
        """Two records on the same literal abort the file."""
        source = "final w = Text('Sign in');"
        records = [bind(source, 'Sign in', 'S.a'), bind(source, 'Sign in', 'S.b')]
        with pytest.raises(OverlappingEditsError):
            engine.rewrite(source, records)

    def test_content_drift_is_skipped(self, engine):
        """A different literal at the recorded span is not replaced."""
        record = bind("final w = Text('Sign in');", 'Sign in', 'S.signIn')
        changed = "final w = Text('Sign up');"
        result = engine.rewrite(changed, [record])

        assert result.modified_text == changed
        assert result.applied_count == 0
        assert not result.changed
        [skipped] = result.skipped
        assert skipped.record is record
        assert skipped.reason == "content drift at line 1: expected 'Sign in', found 'Sign up'"

    def test_missing_literal_is_skipped(self, engine):
        """A literal that is gone is reported as not found."""
        record = bind("final w = Text('Sign in');", 'Sign in', 'S.signIn')
        result = engine.rewrite("final w = 42;", [record])
        assert result.skipped[0].reason.startswith("literal 'Sign in' not found near line 1")

    def test_relocation_within_tolerance(self, engine):
        """A literal that moved a line is still found by value."""
        record = bind("final w = Text('Sign in');", 'Sign in', 'S.signIn')
        moved = "// header\nfinal w = Text('Sign in');"
        result = engine.rewrite(moved, [record])
        assert result.modified_text == "// header\nfinal w = Text(S.signIn);"
        assert result.skipped == []

    def test_relocation_beyond_tolerance(self, engine):
        """Literals more than two lines away are not matched."""
        record = bind("final w = Text('Sign in');", 'Sign in', 'S.signIn')
        moved = "\n\n\nfinal w = Text('Sign in');"
        result = engine.rewrite(moved, [record])
        assert result.modified_text == moved
        assert len(result.skipped) == 1

    def test_drifted_duplicate_not_moved_onto_claimed_literal(self, engine):
        """A drifted record never takes a literal another record already matched."""
        source = "final w = Column(children: [\n  Text('Save'),\n  Text('Save'),\n]);\n"
        records = [bind(source, 'Save', 'S.save'), bind(source, 'Save', 'S.save', occurrence=1)]
        edited = source.replace("Text('Save'),\n]", "Text('Done'),\n]")

        result = engine.rewrite(edited, records)

        assert result.modified_text == "final w = Column(children: [\n  Text(S.save),\n  Text('Done'),\n]);\n"
        assert result.applied_count == 1
        [skipped] = result.skipped
        assert skipped.record is records[1]
        assert skipped.reason == "content drift at line 3: expected 'Save', found 'Done'"

    def test_all_nearby_literals_claimed(self, engine):
        """A stale record whose value is only found under other records is skipped."""
        source = "final a = Text('Save');\nfinal b = Text('Save');\n"
        first = bind(source, 'Save', 'S.save')
        # Points at bytes that hold no literal in the edited text
        stale = bind(source + "final c = Text('Save');\n", 'Save', 'S.save', occurrence=2)
        result = engine.rewrite(source, [first, bind(source, 'Save', 'S.save', occurrence=1), stale])

        assert result.applied_count == 2
        [skipped] = result.skipped
        assert skipped.reason == "content drift at line 3: every 'Save' nearby belongs to another record"

    def test_partial_skip_still_applies_rest(self, engine):
        """Skipped records do not stop the others."""
        source = "final a = Text('Sign in');\nfinal b = Text('Sign up');\n"
        good = bind(source, 'Sign up', 'S.signUp')
        stale = bind(source, 'Sign in', 'S.signIn')
        edited = source.replace("'Sign in'", "'Log in'")
        result = engine.rewrite(edited, [stale, good])
        assert result.modified_text == "final a = Text('Log in');\nfinal b = Text(S.signUp);\n"
        assert result.applied_count == 1
        assert len(result.skipped) == 1


class TestConstRemoval:
    """``const`` around replaced literals."""

    def test_const_call(self, engine):
        """A const constructor loses the keyword."""
        source = "final w = const Text('Sign in');"
        result = engine.rewrite(source, [bind(source, 'Sign in', 'S.signIn')])
        assert result.modified_text == "final w = Text(S.signIn);"

    def test_const_outer_call(self, engine):
        """Const on an enclosing call is removed too."""
        source = "final w = const Padding(padding: EdgeInsets.zero, child: Text('Sign in'));"
        result = engine.rewrite(source, [bind(source, 'Sign in', 'S.signIn')])
        assert result.modified_text == "final w = Padding(padding: EdgeInsets.zero, child: Text(S.signIn));"

    def test_const_list(self, engine):
        """Const list literals lose the keyword."""
        source = "final l = const ['Sign in'];"
        result = engine.rewrite(source, [bind(source, 'Sign in', 'S.signIn')])
        assert result.modified_text == "final l = [S.signIn];"

    def test_walk_stops_at_block(self, engine):
        """Const outside the nearest block is left alone."""
        source = "final w = const Column(children: [Builder(builder: (c) { return Text('Sign in'); })]);"
        result = engine.rewrite(source, [bind(source, 'Sign in', 'S.signIn')])
        assert result.modified_text == "final w = const Column(children: [Builder(builder: (c) { return Text(S.signIn); })]);"

    def test_const_kept_when_disabled(self):
        """remove_const=False keeps the keyword."""
        source = "final w = const Text('Sign in');"
        engine = RewriteEngine(FlutterAdapter(), import_line='', remove_const=False)
        result = engine.rewrite(source, [bind(source, 'Sign in', 'S.signIn')])
        assert result.modified_text == "final w = const Text(S.signIn);"


class TestImportHandling:
    """Accessor import after rewriting."""

    def test_import_added(self):
        """The default import is inserted after existing imports."""
        source = "import 'package:flutter/material.dart';\n\nfinal w = Text('Sign in');\n"
        engine = RewriteEngine(FlutterAdapter())
        result = engine.rewrite(source, [bind(source, 'Sign in', 'S.signIn')])
        assert result.import_added
        assert result.modified_text == (
            "import 'package:flutter/material.dart';\n"
            f"{IMPORT}\n"
            "\nfinal w = Text(S.signIn);\n"
        )

    def test_existing_import_kept_once(self):
        """Rewriting a file that already imports the accessor adds nothing."""
        source = f"{IMPORT}\nfinal w = Text('Sign in');\n"
        result = RewriteEngine(FlutterAdapter()).rewrite(source, [bind(source, 'Sign in', 'S.signIn')])
        assert not result.import_added
        assert result.modified_text.count(IMPORT) == 1

    def test_part_file_gets_warning(self):
        """Part files are rewritten without an import and with a warning."""
        source = "part of 'main.dart';\n\nfinal w = Text('Sign in');\n"
        result = RewriteEngine(FlutterAdapter()).rewrite(source, [bind(source, 'Sign in', 'S.signIn')])
        assert not result.import_added
        assert IMPORT not in result.modified_text
        assert 'Text(S.signIn)' in result.modified_text
        assert any("'part of'" in w for w in result.warnings)

    def test_no_import_when_nothing_applied(self):
        """A file with only skipped records is not touched."""
        record = bind("final w = Text('Sign in');", 'Sign in', 'S.signIn')
        result = RewriteEngine(FlutterAdapter()).rewrite("final w = 1;", [record])
        assert result.modified_text == "final w = 1;"
        assert not result.import_added

    def test_rewrite_file_helper(self):
        """The module helper forwards engine options."""
        source = "final w = Text('Sign in');"
        result = rewrite_file(source, [bind(source, 'Sign in', 'S.signIn')], FlutterAdapter(), import_line='')
        assert result.modified_text == "final w = Text(S.signIn);"


class TestApplyEdits:
    """Low-level edit application."""

    def test_descending_application(self):
        """Edits address original offsets regardless of input order."""
        edits = [TextEdit(0, 3, 'X'), TextEdit(3, 2, 'YY'), TextEdit(6, 0, '!')]
        assert apply_edits(b'abcdefg', edits) == b'XYYf!g'

    def test_adjacent_edits_do_not_overlap(self):
        """Touching ranges are fine."""
        assert find_overlap([TextEdit(0, 3, ''), TextEdit(3, 2, '')]) is None

    def test_overlapping_ranges(self):
        """Shared bytes are an overlap."""
        with pytest.raises(OverlappingEditsError) as exc_info:
            apply_edits(b'abcdefg', [TextEdit(0, 5, 'a'), TextEdit(3, 4, 'b')], 'lib/a.dart')
        assert 'lib/a.dart' in str(exc_info.value)

    def test_same_insertion_point(self):
        """Two insertions at one offset are ambiguous."""
        assert find_overlap([TextEdit(2, 0, 'a'), TextEdit(2, 0, 'b')]) is not None

    def test_edit_past_end(self):
        """Edits outside the source are rejected."""
        with pytest.raises(ValueError):
            apply_edits(b'abc', [TextEdit(2, 5, '')])

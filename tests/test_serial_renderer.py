"""Test serial holdings rendering."""
from core.contracts import render_serial_holdings
from core.models.serials import HoldingStatement, PredictionPattern, Subfield
from core.serials.renderer import PatternElement, SerialPatternRenderer, join_runs, split_runs

PATTERNS = {
    "1": PredictionPattern(pattern_id="1", elements={"a": "v.", "b": "no.", "i": "(year)", "j": "(month)"}),
    "2": PredictionPattern(pattern_id="2", elements={"i": "(year)", "j": "(month)", "k": "(day)"}),
    "3": PredictionPattern(pattern_id="3", elements={"i": "(week)"}),
}


def _statement(pattern_id, *pairs):
    return HoldingStatement(
        pattern_id=pattern_id,
        subfields=[Subfield(code=c, value=v) for c, v in pairs],
    )


def test_split_runs_isolates_non_chronological_elements():
    elements = [
        PatternElement("a", "v.", "1"),
        PatternElement("i", "(year)", "2000"),
        PatternElement("j", "(month)", "01"),
        PatternElement("b", "no.", "3"),
        PatternElement("c", "pt.", "2"),
    ]
    runs = [[e.code for e in run] for run in split_runs(elements)]
    assert runs == [["a"], ["i", "j"], ["b"], ["c"]]


def test_split_runs_is_lazy():
    runs = split_runs(iter([PatternElement("a", "v.", "1")]))
    assert next(runs)[0].code == "a"


def test_join_runs_separates_pieces():
    assert join_runs(["v. 1 ", "January 2000", "no. 3 "]) == "v. 1 January 2000 no. 3"
    assert join_runs([]) == ""


def test_year_statement():
    [rendered] = render_serial_holdings(PATTERNS, [_statement("1", ("i", "2000"))])
    assert rendered.enum_chrono == "2000"


def test_year_month_statement():
    [single, ranged] = render_serial_holdings(
        PATTERNS,
        [
            _statement("1", ("i", "2000"), ("j", "01")),
            _statement("1", ("i", "2000"), ("j", "01-02")),
        ],
    )
    assert single.enum_chrono == "January 2000"
    assert ranged.enum_chrono == "January - February 2000"


def test_year_month_day_statement():
    [rendered] = render_serial_holdings(
        PATTERNS, [_statement("2", ("i", "2000"), ("j", "01"), ("k", "01"))]
    )
    assert rendered.enum_chrono == "1st January 2000"


def test_enumeration_and_chronology_combined():
    [rendered] = render_serial_holdings(
        PATTERNS,
        [_statement("1", ("a", "12"), ("b", "3"), ("i", "2000-2001"), ("j", "11-02"))],
    )
    assert rendered.enum_chrono == "v. 12 no. 3 November 2000 - February 2001"


def test_unknown_chronology_renders_raw():
    [rendered] = render_serial_holdings(PATTERNS, [_statement("3", ("i", "12"))])
    assert rendered.enum_chrono == "(week) 12"


def test_subfields_without_pattern_element_are_skipped():
    [rendered] = render_serial_holdings(PATTERNS, [_statement("2", ("a", "5"), ("i", "1999"))])
    assert rendered.enum_chrono == "1999"


def test_other_subfields_bucketed_with_notes():
    [rendered] = render_serial_holdings(
        PATTERNS,
        [_statement("1", ("a", "1"), ("z", "Lacks no. 2"), ("x", "staff"), ("z", "Bound"), ("x", "more"))],
    )
    assert rendered.enum_chrono == "v. 1"
    assert rendered.other == {"notes": ["Lacks no. 2", "Bound"], "x": ["staff", "more"]}
    assert "z" not in rendered.other
    assert rendered.notes == ["Lacks no. 2", "Bound"]


def test_missing_pattern_becomes_single_note():
    statement = _statement("99", ("z", "ignored"), ("a", "v.1-v.20 (1980-2000)"), ("a", "second"))
    [rendered] = render_serial_holdings(PATTERNS, [statement])
    assert rendered.enum_chrono == ""
    assert rendered.other == {"notes": ["v.1-v.20 (1980-2000)"]}
    assert "z" not in rendered.other


def test_missing_pattern_without_a_subfield():
    [rendered] = render_serial_holdings(PATTERNS, [_statement(None, ("z", "note"))])
    assert rendered.other == {"notes": []}


def test_output_order_follows_input():
    renderer = SerialPatternRenderer()
    statements = [_statement("1", ("i", str(year))) for year in (2003, 2001, 2002)]
    assert [r.enum_chrono for r in renderer.render(PATTERNS, statements)] == ["2003", "2001", "2002"]

"""
Unit tests for the readable and TSV renderers.
"""

from pedigree_scan.records import Record, Role
from pedigree_scan.rendering import (
    TSV_HEADER,
    escape_markup,
    render_readable,
    render_tsv,
    tsv_safe,
)

HEADER_LINE = "Index\tRole\tName\tVariety\tEar\tReg\tGC\tWeight\tLegs\tBorn"


def _sample_records():
    return [
        Record(Role.SUBJECT, name="Thumper", variety="Dutch", ear_number="T-12",
               weight="4 lb 2 oz", legs="4", birth_date="11/10/2024"),
        Record(Role.SIRE, name="Big Chief", grand_champion_number="9981"),
    ]


class TestRenderReadable:
    def test_layout(self):
        expected = "\n".join([
            "1 — SUBJECT",
            "  Name: Thumper",
            "  Variety: Dutch",
            "  Ear #: T-12",
            "  Weight: 4 lb 2 oz",
            "  Legs: 4",
            "  Born: 11/10/2024",
            "",
            "2 — SIRE",
            "  Name: Big Chief",
            "  GC #: 9981",
            "",
        ])
        assert render_readable(_sample_records()) == expected

    def test_no_records(self):
        assert render_readable([]) == ""

    def test_empty_record_is_bare_header(self):
        assert render_readable([Record(Role.UNKNOWN)]) == "1 — UNKNOWN\n"

    def test_markup_escaped(self):
        out = render_readable([Record(Role.SUBJECT, name="Jack & Jill <3")])
        assert "  Name: Jack &amp; Jill &lt;3" in out.split("\n")

    def test_html_line_break(self):
        out = render_readable([Record(Role.DAM, name="Daisy")], line_break="<br>")
        assert out == "1 — DAM<br>  Name: Daisy<br>"


class TestEscapeMarkup:
    def test_ampersand_first(self):
        assert escape_markup("<&>") == "&lt;&amp;>"


class TestRenderTsv:
    def test_header_only_for_no_records(self):
        assert render_tsv([]) == HEADER_LINE

    def test_header_constant(self):
        assert "\t".join(TSV_HEADER) == HEADER_LINE

    def test_first_line_is_header(self):
        assert render_tsv(_sample_records()).split("\n")[0] == HEADER_LINE

    def test_rows(self):
        lines = render_tsv(_sample_records()).split("\n")
        assert lines[1] == "1\tSUBJECT\tThumper\tDutch\tT-12\t\t\t4 lb 2 oz\t4\t11/10/2024"
        assert lines[2] == "2\tSIRE\tBig Chief\t\t\t\t9981\t\t\t"

    def test_round_trip_through_tab_split(self):
        records = [
            Record(Role.SUBJECT, name="Big\tChief\nJr", variety="Tan\r\n(Black)", legs=" 4 "),
            Record(Role.UNKNOWN, reg_number="R-1"),
        ]
        lines = render_tsv(records).split("\n")
        assert len(lines) == 3

        for index, (line, record) in enumerate(zip(lines[1:], records), start=1):
            cells = line.split("\t")
            assert len(cells) == len(TSV_HEADER)
            assert cells[0] == str(index)
            assert cells[1] == record.role.value
            assert cells[2:] == [tsv_safe(v) for v in record.as_row()]

        assert lines[1].split("\t")[2] == "Big Chief Jr"
        assert lines[1].split("\t")[3] == "Tan (Black)"


class TestTsvSafe:
    def test_tabs_and_newlines(self):
        assert tsv_safe("a\tb\nc ") == "a b c"

    def test_crlf_single_space(self):
        assert tsv_safe("a\r\nb") == "a b"

    def test_none(self):
        assert tsv_safe(None) == ""

    def test_int(self):
        assert tsv_safe(3) == "3"

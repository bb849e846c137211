"""Test the switch matrix CSV parser and its format detection."""

from pathlib import Path

import pytest

from fabulator.model.geometry import Location, SwitchMatrixConnection, SwitchMatrixWireGeometry
from fabulator.parsers.switchmatrix_parser import (
    parse_switch_matrix_content,
    parse_switch_matrix_csv,
    resolve_wire_coordinates,
    tokenize_line,
    try_parse_matrix,
    wire_from_connection,
)


def pairs(connections: list[SwitchMatrixConnection]) -> list[tuple[str, str]]:
    return [(i.sourcePort, i.destPort) for i in connections]


class TestTokenizeLine:
    """Test CSV line splitting."""

    @pytest.mark.parametrize(
        ("line", "expected"),
        [
            ("a,b,c", ["a", "b", "c"]),
            (" a , b ", ["a", "b"]),
            ("a,,b", ["a", "", "b"]),
            ("a,b,,", ["a", "b"]),
            ('"a,b",c', ["a,b", "c"]),
            ("", []),
            ('a, "b,c"', ["a", "b,c"]),
        ],
    )
    def test_tokenize_line(self, line: str, expected: list[str]) -> None:
        """Test quoting, trimming and trailing empty tokens."""
        assert tokenize_line(line) == expected


class TestMatrixFormat:
    """Test the dense adjacency matrix format."""

    def test_small_matrix(self) -> None:
        """Test a matrix identified by its 0/1 body."""
        config = parse_switch_matrix_content("SM,A,B,C\nP1,1,0,1\n")

        assert config is not None
        assert pairs(config.connections) == [("P1", "A"), ("P1", "C")]
        assert [i.name for i in config.wireGeometries] == ["P1_to_A", "P1_to_C"]

    def test_fabulous_matrix(self) -> None:
        """Test a matrix as written by FABulous, with trailing comment columns."""
        content = (
            "LUT4AB,N1BEG0,N1BEG1,E1BEG0,S1BEG0,#\n"
            "N1END0,0,1,0,0,#,1\n"
            "E1END0,1,0,0,1,#,2\n"
            "S1END0,TRUE,0,true,0,#,2\n"
            "#,2,1,1,1\n"
        )
        config = parse_switch_matrix_content(content)

        assert config is not None
        assert pairs(config.connections) == [
            ("N1END0", "N1BEG1"),
            ("E1END0", "N1BEG0"),
            ("E1END0", "S1BEG0"),
            ("S1END0", "N1BEG0"),
            ("S1END0", "E1BEG0"),
        ]

    def test_numeric_source_rows_are_skipped(self) -> None:
        """Test that rows without a port name are not read."""
        config = try_parse_matrix(["SM,A,B,C,D", "P1,1,0,0,0", "3,1,1,1,1"])

        assert config is not None
        assert pairs(config.connections) == [("P1", "A")]

    def test_empty_matrix_falls_through(self) -> None:
        """Test that a matrix without connections is not accepted."""
        assert try_parse_matrix(["SM,A,B,C,D", "P1,0,0,0,0"]) is None

    def test_connection_list_is_not_a_matrix(self) -> None:
        """Test that two column connection rows are not mistaken for a matrix."""
        assert try_parse_matrix(["N1,S1", "J1,S1"]) is None


class TestSectionedFormat:
    """Test files with connection and wire section markers."""

    def test_sections(self) -> None:
        """Test connections with and without a custom path, and wire rows."""
        content = (
            "Connections\n"
            "N1,S1\n"
            "N1,E1,0,0,5,0\n"
            "Wires\n"
            "w1,N1,S1,0,0,0,10\n"
            "w2,N1,E1,0,0\n"
        )
        config = parse_switch_matrix_content(content)

        assert config is not None
        assert config.connections == [
            SwitchMatrixConnection("N1", "S1"),
            SwitchMatrixConnection("N1", "E1", [Location(0, 0), Location(5, 0)]),
        ]
        assert config.wireGeometries == [
            SwitchMatrixWireGeometry("w1", "N1", "S1", [Location(0, 0), Location(0, 10)])
        ]

    def test_markers_are_case_insensitive(self) -> None:
        """Test the alternative marker words."""
        content = "ROUTING\nA,B\nGEOMETRY\nw,A,B,1,1,1,4\n"
        config = parse_switch_matrix_content(content)

        assert config is not None
        assert pairs(config.connections) == [("A", "B")]
        assert [i.name for i in config.wireGeometries] == ["w"]

    def test_comment_lines_are_ignored(self) -> None:
        """Test that lines starting with # are skipped."""
        config = parse_switch_matrix_content("# header\nConnections\n# note\nA,B\n")

        assert config is not None
        assert pairs(config.connections) == [("A", "B")]


class TestHeuristicFormat:
    """Test unsectioned connection and wire rows."""

    def test_mixed_rows(self) -> None:
        """Test that rows are classified individually and unknown rows dropped."""
        config = parse_switch_matrix_content("N1,S1\nw1,N1,S1,0,0,10,0\n1,2\n")

        assert config is not None
        assert pairs(config.connections) == [("N1", "S1")]
        assert config.wireGeometries == [
            SwitchMatrixWireGeometry("w1", "N1", "S1", [Location(0, 0), Location(10, 0)])
        ]

    def test_named_row_with_path_is_a_wire(self) -> None:
        """Test that three names followed by coordinates form a wire, not a connection."""
        config = parse_switch_matrix_content("w1,A,B,0,0,10,0\n")

        assert config is not None
        assert config.connections == []
        assert config.wireGeometries == [
            SwitchMatrixWireGeometry("w1", "A", "B", [Location(0, 0), Location(10, 0)])
        ]

    def test_connection_with_custom_path(self) -> None:
        """Test that a connection with a path is not read as a wire."""
        config = parse_switch_matrix_content("A,B,0,0,10,0\n")

        assert config is not None
        assert config.connections == [SwitchMatrixConnection("A", "B", [Location(0, 0), Location(10, 0)])]
        assert config.wireGeometries[0].path == [Location(0, 0), Location(10, 0)]

    def test_odd_trailing_tokens_are_not_a_path(self) -> None:
        """Test that trailing tokens not forming coordinate pairs are ignored."""
        config = parse_switch_matrix_content("A,B,1,2,3\n")

        assert config is not None
        assert config.connections == [SwitchMatrixConnection("A", "B")]

    def test_quoted_port_names(self) -> None:
        """Test port names containing commas."""
        config = parse_switch_matrix_content('"N1,x",S1\n')

        assert config is not None
        assert pairs(config.connections) == [("N1,x", "S1")]

    def test_duplicates_are_kept(self) -> None:
        """Test that repeated rows are not merged."""
        config = parse_switch_matrix_content("A,B\nA,B\n")

        assert config is not None
        assert pairs(config.connections) == [("A", "B"), ("A", "B")]

    @pytest.mark.parametrize("content", ["", "# only a comment\n", "1,2\n3,4\n", "single\n"])
    def test_unrecognised_content(self, content: str) -> None:
        """Test that content without connections or wires yields None."""
        assert parse_switch_matrix_content(content) is None


class TestWireSynthesis:
    """Test wire geometries generated from connections."""

    def test_placeholder_path(self) -> None:
        """Test that a connection without a path gets the placeholder path."""
        wire = wire_from_connection(SwitchMatrixConnection("A", "B"))
        assert wire == SwitchMatrixWireGeometry("A_to_B", "A", "B", [Location(0, 0), Location(0, 0)])

    def test_resolve_wire_coordinates(self) -> None:
        """Test that only placeholders with two known ports are resolved."""
        wires = [
            wire_from_connection(SwitchMatrixConnection("A", "B")),
            wire_from_connection(SwitchMatrixConnection("A", "MISSING")),
            SwitchMatrixWireGeometry("w", "A", "B", [Location(1, 1), Location(2, 2)]),
        ]
        locations = {"A": Location(0, 10), "B": Location(20, 10)}

        resolve_wire_coordinates(wires, locations)

        assert wires[0].path == [Location(0, 10), Location(20, 10)]
        assert wires[1].path == [Location(0, 0), Location(0, 0)]
        assert wires[2].path == [Location(1, 1), Location(2, 2)]


class TestParseSwitchMatrixCsv:
    """Test reading switch matrix CSV files."""

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test that a missing file yields None."""
        assert parse_switch_matrix_csv(tmp_path / "missing.csv") is None

    def test_unreadable_encoding(self, tmp_path: Path) -> None:
        """Test that undecodable content yields None."""
        path = tmp_path / "sm.csv"
        path.write_bytes(b"\xff\xfe\xfa,B\n")
        assert parse_switch_matrix_csv(path, "utf-8") is None

    def test_read_file(self, tmp_path: Path) -> None:
        """Test reading a connection list from disk."""
        path = tmp_path / "sm.csv"
        path.write_text("A,B\nC,D\n")

        config = parse_switch_matrix_csv(path)

        assert config is not None
        assert pairs(config.connections) == [("A", "B"), ("C", "D")]
        assert len(config.wireGeometries) == 2

"""Shared fixtures writing small FABulous projects to a temporary directory."""

from pathlib import Path

import pytest

GEOMETRY_CSV = """\
PARAMS
GeneratorVersion,1.0.0
Name,TestFabric
Rows,2
Columns,2
Width,200
Height,200
Lines,10

FABRIC_DEF
CLB,IO
DSP,CLB

FABRIC_LOCS
0/0,100/0
0/100,100/100

TILE
Name,CLB
Width,100
Height,100

SWITCH_MATRIX
Name,SM_CLB
RelX,10
RelY,10
Width,80
Height,80
Src,clb_switch.v
Csv,clb_switch.csv

PORT
Name,N1
Source,wire_n1
Dest,bel_input
IO,I
Side,N
RelX,40
RelY,0

PORT
Name,S1
IO,O
Side,S
RelX,40
RelY,80

JUMP_PORT
Name,J1
IO,O
RelX,0
RelY,40

BEL
Name,LUT
RelX,20
RelY,20
Width,60
Height,60
Src,lut.v

BEL_PORT
Name,A
Source,sm_out
Dest,lut_a
IO,I
RelX,0
RelY,10

WIRE
Name,wire_n1
RelX,40
RelY,0
RelX,40
RelY,20

TILE
Name,IO
Width,100
Height,100

TILE
Name,DSP
Width,100
Height,200
"""

SWITCH_MATRIX_CSV = """\
N1,S1
J1,S1
N1,MISSING
"""

FASM = """\
# routing for net 'test_net_1'
X0Y1.test_port_1.test_port_2
X0Y1.test_port_2.test_port_3
X2Y1.test_port_1.test_port_4
X0Y3.test_port_5.test_port_7

# routing for net 'test_net_2'

# routing for net 'test_net_3'
X11Y1.test_port_4.test_port_1
X7Y13.test_port7.test_port_6
"""


@pytest.fixture
def geometry_file(tmp_path: Path) -> Path:
    """Write the test geometry file and its switch matrix CSV."""
    (tmp_path / "clb_switch.csv").write_text(SWITCH_MATRIX_CSV)
    path = tmp_path / "test-geometry.csv"
    path.write_text(GEOMETRY_CSV)
    return path


@pytest.fixture
def fasm_file(tmp_path: Path) -> Path:
    """Write the test FASM design."""
    path = tmp_path / "test_design.fasm"
    path.write_text(FASM)
    return path


@pytest.fixture
def write_file(tmp_path: Path):
    """Return a helper writing `content` to `name` inside the temporary directory."""

    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path

    return _write

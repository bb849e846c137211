"""Fabulator input parsers module.

This module contains parsers for the files describing a FABulous fabric and a
design mapped onto it.

Parsers:
- geometry_parser: Parse FABulous geometry files
- switchmatrix_parser: Parse switch matrix CSV files
- fasm_parser: Parse FASM design files
"""

from fabulator.parsers.fasm_parser import *  # noqa: F401, F403
from fabulator.parsers.geometry_parser import *  # noqa: F401, F403
from fabulator.parsers.switchmatrix_parser import *  # noqa: F401, F403

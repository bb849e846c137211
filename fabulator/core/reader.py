"""Input readers - parse fabric geometry and design files into model objects.

The reader is chosen by file suffix so that callers can load either kind of file
through the same interface.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from fabulator.model.design import BitstreamConfiguration
from fabulator.model.geometry import FabricGeometry
from fabulator.utils.exceptions import FileTypeError


class Reader(ABC):
    """Abstract base for input parsers.

    Parameters
    ----------
    encoding : str, optional
        Encoding of the files read, by default "utf-8".
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    @abstractmethod
    def read(self, path: Path) -> FabricGeometry | BitstreamConfiguration:
        """Parse input file and return the model object.

        Parameters
        ----------
        path : Path
            Path to the input file

        Returns
        -------
        FabricGeometry | BitstreamConfiguration
            Parsed model object
        """
        ...


class GeometryReader(Reader):
    """FABulous geometry CSV reader."""

    def read(self, path: Path) -> FabricGeometry:
        from fabulator.parsers.geometry_parser import GeometryParser

        return GeometryParser(path, self.encoding).parse()


class FasmReader(Reader):
    """FASM design reader."""

    def read(self, path: Path) -> BitstreamConfiguration:
        from fabulator.parsers.fasm_parser import FasmParser

        return FasmParser(path, self.encoding).parse()


READERS: dict[str, type[Reader]] = {
    ".csv": GeometryReader,
    ".fasm": FasmReader,
}


def create_reader(path: Path, encoding: str = "utf-8") -> Reader:
    """Create appropriate reader based on file extension.

    Parameters
    ----------
    path : Path
        Path to the input file
    encoding : str, optional
        Encoding passed to the reader, by default "utf-8".

    Returns
    -------
    Reader
        Appropriate reader instance

    Raises
    ------
    FileTypeError
        If no reader handles the file extension.
    """
    suffix = Path(path).suffix.lower()
    if suffix not in READERS:
        raise FileTypeError(f"Unsupported file type '{suffix}' of {path}")
    return READERS[suffix](encoding)

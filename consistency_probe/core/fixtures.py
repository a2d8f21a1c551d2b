"""
Local filesystem fixtures: generated input files and downloaded output files.
"""

from pathlib import Path

import structlog

logger = structlog.get_logger()

_LOREM = (
    "Lorem ipsum dolor sit amet, consectetur adipiscing elit. Ut accumsan "
    "accumsan tempor. Class aptent taciti sociosqu ad litora torquent per "
    "conubia nostra, per inceptos himenaeos. Mauris elementum luctus nibh, sit "
    "amet aliquet orci dictum at. Mauris non arcu id est congue vulputate. "
    "Phasellus facilisis fermentum libero vel placerat. Donec id mauris quam.\n\n"
)


def build_payload(size_bytes: int) -> bytes:
    """Fixed-size synthetic payload made of repeated lorem ipsum text."""
    if size_bytes < 1:
        raise ValueError(f"size_bytes must be positive, got {size_bytes}")
    text = _LOREM.encode("ascii")
    repeats = size_bytes // len(text) + 1
    return (text * repeats)[:size_bytes]


class FixtureStore:
    """
    Owns the input and output directories of a run.

    Input files are named ``testfile_{identifier}.jpg``; downloads are
    written to ``{identifier}.txt``. All payloads in a run are identical.
    """

    def __init__(self, input_dir: Path, output_dir: Path, payload_size_bytes: int = 8192) -> None:
        self.input_dir = Path(input_dir)
        self.output_dir = Path(output_dir)
        self.payload = build_payload(payload_size_bytes)

    def ensure_directories(self) -> None:
        self.input_dir.mkdir(parents=True, exist_ok=True)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        logger.debug(
            "fixture_directories_ready",
            input_dir=str(self.input_dir),
            output_dir=str(self.output_dir),
        )

    def input_path(self, identifier: int) -> Path:
        return self.input_dir / f"testfile_{identifier}.jpg"

    def output_path(self, identifier: int) -> Path:
        return self.output_dir / f"{identifier}.txt"

    def create_input(self, identifier: int) -> Path:
        """Write the payload for identifier and return its path."""
        path = self.input_path(identifier)
        path.write_bytes(self.payload)
        return path

    def write_output(self, identifier: int, content: bytes) -> Path:
        path = self.output_path(identifier)
        path.write_bytes(content)
        return path

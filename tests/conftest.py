# tests/conftest.py
import pytest

from forcegraph.models import MatrixDataset
from forcegraph.parsers.dataset_loader import build_dataset
from forcegraph.utils.color_utils import ColorPalette

from .helpers import RecordingPalette


@pytest.fixture
def palette() -> RecordingPalette:
    return RecordingPalette()


@pytest.fixture
def color_palette() -> ColorPalette:
    return ColorPalette()


@pytest.fixture
def triangle_dataset() -> MatrixDataset:
    """A→B (5)、A→C (3)、B→C (7) 的三角形網路。"""
    return build_dataset(
        ["LinkWeight"],
        [
            {"source": "A", "target": "B", "LinkWeight": 5},
            {"source": "A", "target": "C", "LinkWeight": 3},
            {"source": "B", "target": "C", "LinkWeight": 7},
        ],
    )

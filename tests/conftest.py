import numpy as np
import pytest

from palette_hull.palette_data import NORD_HEXES
from palette_hull.space import build, build_from_hex

# black, white, red, green: a tetrahedron bounded by
#   z >= 0,  z <= x,  z <= y,  x + y - z <= 255
TETRA = np.array(
    [[0, 0, 0], [255, 255, 255], [255, 0, 0], [0, 255, 0]], dtype=np.float64
)


@pytest.fixture(scope="session")
def tetra_space():
    return build(TETRA)


@pytest.fixture(scope="session")
def nord_space():
    return build_from_hex(NORD_HEXES)


@pytest.fixture
def rgb_grid():
    steps = np.arange(0, 256, 51)
    r, g, b = np.meshgrid(steps, steps, steps, indexing="ij")
    return np.stack([r.ravel(), g.ravel(), b.ravel()], axis=1).astype(np.uint8)

import os
import sys
from pathlib import Path

import cv2
import matplotlib
import numpy as np
import pytest

matplotlib.use('Agg')

project_root = Path(__file__).parent.parent  # Go up from tests/ to project root
sys.path.insert(0, str(project_root))

from FeatureBenchmark import BenchmarkConfig, ImageSequence


IMAGE_HEIGHT, IMAGE_WIDTH = 375, 1242
NUM_FRAMES = 10
SHIFT_PER_FRAME = 3


def make_textured_image(height=IMAGE_HEIGHT, width=IMAGE_WIDTH, seed=42, block=8):
    """Random block pattern; block edges give strong, repeatable corners"""
    rng = np.random.RandomState(seed)
    cells = rng.randint(0, 256, size=(height // block + 1, width // block + 1)).astype(np.uint8)
    image = np.kron(cells, np.ones((block, block), dtype=np.uint8))[:height, :width]
    return cv2.GaussianBlur(image, (3, 3), 0)


def make_sequence(height=IMAGE_HEIGHT, width=IMAGE_WIDTH, num_frames=NUM_FRAMES):
    """Frames of one scene translated horizontally by a few pixels each"""
    base = make_textured_image(height, width + SHIFT_PER_FRAME * num_frames)
    return [base[:, i * SHIFT_PER_FRAME:i * SHIFT_PER_FRAME + width].copy() for i in range(num_frames)]


@pytest.fixture(scope="session")
def textured_image():
    return make_textured_image()


@pytest.fixture(scope="session")
def image_dir(tmp_path_factory):
    directory = tmp_path_factory.mktemp("kitti")
    for index, frame in enumerate(make_sequence()):
        cv2.imwrite(str(directory / f"img_{index:04d}.png"), frame)
    return directory


@pytest.fixture
def image_sequence(image_dir):
    return ImageSequence(str(image_dir) + os.sep, "img_", ".png",
                         start_index=0, end_index=NUM_FRAMES - 1, fill_width=4)


@pytest.fixture
def config(image_dir):
    return BenchmarkConfig(
        image_base_path=str(image_dir) + os.sep,
        image_prefix="img_",
        detector_types=['FAST'],
        descriptor_types=['BRISK'],
        detector_report_path=None,
        descriptor_report_path=None,
    )


@pytest.fixture(scope="session")
def small_image():
    return make_textured_image(height=200, width=320)

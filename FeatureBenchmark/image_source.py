"""
Image sequence loading.

Frames are addressed by index and resolved to file names of the form
base_path + prefix + zero-padded index + file_type.
"""

import cv2
import numpy as np
from pathlib import Path
from typing import Iterator, List, Tuple

from .exceptions import ImageLoadError
from .logger import get_logger

logger = get_logger("image_source")


class ImageSequence:
    """
    Deterministically named sequence of camera images

    Example:
        >>> sequence = ImageSequence('../images/', 'KITTI/2011_09_26/image_00/data/000000',
        ...                          '.png', start_index=0, end_index=9, fill_width=4)
        >>> sequence.filename(3)
        '../images/KITTI/2011_09_26/image_00/data/0000000003.png'
        >>> gray = sequence.load_grayscale(3)
    """

    def __init__(self, base_path: str, prefix: str = "", file_type: str = ".png",
                 start_index: int = 0, end_index: int = 9, fill_width: int = 4):
        """
        Initialize image sequence

        Args:
            base_path: Directory (or path prefix) that all file names start with
            prefix: Fixed part of the file name placed before the index
            file_type: File extension including the dot
            start_index: First file index to load
            end_index: Last file index to load (inclusive)
            fill_width: Number of digits of the zero-padded index
        """
        if end_index < start_index:
            raise ValueError(f"end_index ({end_index}) must not be smaller than start_index ({start_index})")
        self.base_path = str(base_path)
        self.prefix = prefix
        self.file_type = file_type
        self.start_index = start_index
        self.end_index = end_index
        self.fill_width = fill_width

    def filename(self, index: int) -> str:
        """Full file name for an absolute frame index"""
        return f"{self.base_path}{self.prefix}{str(index).zfill(self.fill_width)}{self.file_type}"

    def indices(self) -> List[int]:
        return list(range(self.start_index, self.end_index + 1))

    def load_color(self, index: int) -> np.ndarray:
        """
        Load a frame as a BGR image

        Raises:
            ImageLoadError: File missing or not decodable
        """
        filepath = self.filename(index)
        if not Path(filepath).is_file():
            raise ImageLoadError(filepath)

        image = cv2.imread(filepath)
        if image is None:
            raise ImageLoadError(filepath)
        return image

    def load_grayscale(self, index: int) -> np.ndarray:
        """Load a frame and convert it to grayscale"""
        image = self.load_color(index)
        if image.ndim == 3:
            image = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
        logger.debug(f"Loaded {self.filename(index)} ({image.shape[1]}x{image.shape[0]})")
        return image

    def __iter__(self) -> Iterator[Tuple[int, np.ndarray]]:
        for index in self.indices():
            yield index, self.load_grayscale(index)

    def __len__(self):
        return self.end_index - self.start_index + 1

    def __repr__(self):
        return f"ImageSequence({self.filename(self.start_index)} .. {self.filename(self.end_index)})"

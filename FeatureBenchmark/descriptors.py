"""
Descriptor extractors (BRISK, BRIEF, ORB, FREAK, AKAZE, SIFT).

Extractors describe keypoints produced by any detector in detectors.py.
"""

import cv2
import numpy as np
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Tuple, Union

from .core_data_structures import DescriptorType, DescriptorNorm
from .exceptions import ProcessingError
from .logger import get_logger

logger = get_logger("descriptors")


@dataclass(frozen=True)
class DescriptorSpec:
    """Row format produced by an extractor"""
    width: int
    dtype: type
    norm: DescriptorNorm


DESCRIPTOR_SPECS = {
    DescriptorType.BRISK: DescriptorSpec(64, np.uint8, DescriptorNorm.BINARY),
    DescriptorType.BRIEF: DescriptorSpec(32, np.uint8, DescriptorNorm.BINARY),
    DescriptorType.ORB: DescriptorSpec(32, np.uint8, DescriptorNorm.BINARY),
    DescriptorType.FREAK: DescriptorSpec(64, np.uint8, DescriptorNorm.BINARY),
    DescriptorType.AKAZE: DescriptorSpec(61, np.uint8, DescriptorNorm.BINARY),
    DescriptorType.SIFT: DescriptorSpec(128, np.float32, DescriptorNorm.HOG),
}


def descriptor_norm_for(descriptor_type: Union[str, DescriptorType]) -> DescriptorNorm:
    """Distance family matching the descriptor rows"""
    return DESCRIPTOR_SPECS[DescriptorType.from_name(descriptor_type)].norm


class BaseDescriptorExtractor(ABC):
    """Abstract base class for descriptor extractors"""

    descriptor_type: DescriptorType = None

    def __init__(self):
        self.extractor = self._create()

    @property
    def name(self) -> str:
        return self.descriptor_type.value

    @property
    def spec(self) -> DescriptorSpec:
        return DESCRIPTOR_SPECS[self.descriptor_type]

    @abstractmethod
    def _create(self) -> cv2.Feature2D:
        pass

    def empty_descriptors(self) -> np.ndarray:
        return np.zeros((0, self.spec.width), dtype=self.spec.dtype)

    def compute(self, image: np.ndarray,
                keypoints: List[cv2.KeyPoint]) -> Tuple[List[cv2.KeyPoint], np.ndarray]:
        """
        Describe keypoints

        OpenCV drops keypoints it cannot describe (e.g. too close to the
        border), so the returned keypoint list is the one the rows refer to.

        Args:
            image: Grayscale image
            keypoints: Keypoints to describe

        Returns:
            Tuple of (described_keypoints, descriptors)
        """
        if not keypoints:
            return [], self.empty_descriptors()

        described, descriptors = self.extractor.compute(image, list(keypoints))
        described = list(described) if described is not None else []
        if descriptors is None or len(described) == 0:
            return [], self.empty_descriptors()
        return described, descriptors


class BRISKExtractor(BaseDescriptorExtractor):
    """BRISK binary descriptor"""

    descriptor_type = DescriptorType.BRISK

    def __init__(self, threshold: int = 30, octaves: int = 3, pattern_scale: float = 1.0):
        """
        Initialize BRISK extractor

        Args:
            threshold: FAST/AGAST detection threshold score
            octaves: Detection octaves (0 for single scale)
            pattern_scale: Scale applied to the sampling pattern
        """
        self.threshold = threshold
        self.octaves = octaves
        self.pattern_scale = pattern_scale
        super().__init__()

    def _create(self):
        return cv2.BRISK_create(
            thresh=self.threshold,
            octaves=self.octaves,
            patternScale=self.pattern_scale
        )


class BRIEFExtractor(BaseDescriptorExtractor):
    """BRIEF binary descriptor (xfeatures2d)"""

    descriptor_type = DescriptorType.BRIEF

    def __init__(self, num_bytes: int = 32):
        self.num_bytes = num_bytes
        super().__init__()

    @property
    def spec(self) -> DescriptorSpec:
        return DescriptorSpec(self.num_bytes, np.uint8, DescriptorNorm.BINARY)

    def _create(self):
        return cv2.xfeatures2d.BriefDescriptorExtractor_create(self.num_bytes)


class ORBExtractor(BaseDescriptorExtractor):
    """ORB (rotated BRIEF) binary descriptor"""

    descriptor_type = DescriptorType.ORB

    def _create(self):
        return cv2.ORB_create()


class FREAKExtractor(BaseDescriptorExtractor):
    """FREAK retina-inspired binary descriptor (xfeatures2d)"""

    descriptor_type = DescriptorType.FREAK

    def _create(self):
        return cv2.xfeatures2d.FREAK_create()


class AKAZEExtractor(BaseDescriptorExtractor):
    """AKAZE MLDB binary descriptor"""

    descriptor_type = DescriptorType.AKAZE

    def _create(self):
        return cv2.AKAZE_create()


class SIFTExtractor(BaseDescriptorExtractor):
    """SIFT gradient-histogram descriptor"""

    descriptor_type = DescriptorType.SIFT

    def _create(self):
        return cv2.SIFT_create()


EXTRACTOR_MAP = {
    DescriptorType.BRISK: BRISKExtractor,
    DescriptorType.BRIEF: BRIEFExtractor,
    DescriptorType.ORB: ORBExtractor,
    DescriptorType.FREAK: FREAKExtractor,
    DescriptorType.AKAZE: AKAZEExtractor,
    DescriptorType.SIFT: SIFTExtractor,
}


def create_extractor(descriptor_type: Union[str, DescriptorType], **kwargs) -> BaseDescriptorExtractor:
    """
    Factory function to create descriptor extractors

    Args:
        descriptor_type: Descriptor name or DescriptorType
        **kwargs: Parameters forwarded to the extractor constructor

    Returns:
        Initialized extractor instance

    Raises:
        UnsupportedDescriptorError: If descriptor_type is not supported
    """
    kind = DescriptorType.from_name(descriptor_type)
    return EXTRACTOR_MAP[kind](**kwargs)


def describe_keypoints(keypoints: List[cv2.KeyPoint],
                       image: np.ndarray,
                       descriptor_type: Union[str, DescriptorType],
                       **kwargs) -> Tuple[List[cv2.KeyPoint], np.ndarray, float]:
    """
    Compute descriptors and measure the wall-clock time of the compute call

    Args:
        keypoints: Keypoints to describe
        image: Grayscale image the keypoints were detected in
        descriptor_type: Descriptor name or DescriptorType
        **kwargs: Extractor parameters

    Returns:
        Tuple of (described_keypoints, descriptors, elapsed_ms); descriptors
        has exactly one row per described keypoint

    Raises:
        UnsupportedDescriptorError: Unknown descriptor type
        ProcessingError: Invalid extractor parameters or OpenCV failed inside extraction
    """
    kind = DescriptorType.from_name(descriptor_type)

    try:
        extractor = create_extractor(kind, **kwargs)
        start_time = time.time()
        described, descriptors = extractor.compute(image, keypoints)
        elapsed_ms = (time.time() - start_time) * 1000.0
    except (cv2.error, TypeError, AttributeError) as e:
        raise ProcessingError("description", kind.value, e) from e

    logger.info(f"{extractor.name} descriptor extraction for {len(described)} keypoints in {elapsed_ms:.2f} ms")
    return described, descriptors, elapsed_ms

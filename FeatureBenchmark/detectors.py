"""
Keypoint detectors (Shi-Tomasi, Harris-Laplace, FAST, BRISK, ORB, AKAZE, SIFT).

Every detector wraps an OpenCV implementation and only produces keypoints;
descriptors are computed separately by the extractors in descriptors.py.
"""

import cv2
import numpy as np
import time
from abc import ABC, abstractmethod
from typing import List, Tuple, Union

from .core_data_structures import DetectorType
from .exceptions import ProcessingError
from .logger import get_logger

logger = get_logger("detectors")


class BaseKeypointDetector(ABC):
    """Abstract base class for all keypoint detectors"""

    detector_type: DetectorType = None
    # Detectors without a response score keep their native ranking order
    provides_response: bool = True

    @property
    def name(self) -> str:
        return self.detector_type.value

    @abstractmethod
    def detect(self, image: np.ndarray) -> List[cv2.KeyPoint]:
        """
        Detect keypoints in an image

        Args:
            image: Input image (grayscale or BGR)

        Returns:
            List of cv2.KeyPoint
        """
        pass

    def preprocess_image(self, image: np.ndarray) -> np.ndarray:
        if len(image.shape) == 3:
            return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
        return image


class OpenCVFeatureDetector(BaseKeypointDetector):
    """Detector delegating to a cv2.Feature2D instance"""

    def __init__(self):
        self.detector = self._create()

    @abstractmethod
    def _create(self) -> cv2.Feature2D:
        pass

    def detect(self, image: np.ndarray) -> List[cv2.KeyPoint]:
        return list(self.detector.detect(self.preprocess_image(image), None))


class ShiTomasiDetector(BaseKeypointDetector):
    """Shi-Tomasi corners on a dense grid (goodFeaturesToTrack)"""

    detector_type = DetectorType.SHITOMASI
    provides_response = False

    def __init__(self, block_size: int = 4, max_overlap: float = 0.0,
                 quality_level: float = 0.01, k: float = 0.04):
        """
        Initialize Shi-Tomasi detector

        Args:
            block_size: Size of the averaging block for the derivative covariation matrix
            max_overlap: Max. permissible overlap between two features (fraction)
            quality_level: Minimal accepted corner quality relative to the best corner
            k: Harris free parameter (unused while useHarrisDetector is off)
        """
        self.block_size = block_size
        self.max_overlap = max_overlap
        self.quality_level = quality_level
        self.k = k

    @property
    def min_distance(self) -> float:
        return (1.0 - self.max_overlap) * self.block_size

    def max_corners(self, image: np.ndarray) -> int:
        rows, cols = image.shape[:2]
        return int(rows * cols / max(1.0, self.min_distance))

    def detect(self, image: np.ndarray) -> List[cv2.KeyPoint]:
        gray = self.preprocess_image(image)

        corners = cv2.goodFeaturesToTrack(
            gray,
            maxCorners=self.max_corners(gray),
            qualityLevel=self.quality_level,
            minDistance=self.min_distance,
            mask=None,
            blockSize=self.block_size,
            useHarrisDetector=False,
            k=self.k
        )

        keypoints = []
        if corners is not None:
            for corner in corners:
                x, y = corner.ravel()
                keypoints.append(cv2.KeyPoint(x=float(x), y=float(y), size=float(self.block_size)))
        return keypoints


class HarrisLaplaceDetector(OpenCVFeatureDetector):
    """Scale-adapted Harris corners (xfeatures2d)"""

    detector_type = DetectorType.HARRIS

    def _create(self):
        return cv2.xfeatures2d.HarrisLaplaceFeatureDetector_create()


class FASTDetector(OpenCVFeatureDetector):
    """FAST corner detector"""

    detector_type = DetectorType.FAST

    def __init__(self, threshold: int = 30, nonmax_suppression: bool = True,
                 fast_type: int = cv2.FAST_FEATURE_DETECTOR_TYPE_9_16):
        """
        Initialize FAST detector

        Args:
            threshold: Intensity difference between center pixel and circle pixels
            nonmax_suppression: Apply non-maximum suppression
            fast_type: Neighborhood pattern
        """
        self.threshold = threshold
        self.nonmax_suppression = nonmax_suppression
        self.fast_type = fast_type
        super().__init__()

    def _create(self):
        return cv2.FastFeatureDetector_create(
            threshold=self.threshold,
            nonmaxSuppression=self.nonmax_suppression,
            type=self.fast_type
        )


class BRISKDetector(OpenCVFeatureDetector):
    """BRISK keypoint detector (AGAST on a scale pyramid)"""

    detector_type = DetectorType.BRISK

    def __init__(self, threshold: int = 30, octaves: int = 3, pattern_scale: float = 1.0):
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


class ORBDetector(OpenCVFeatureDetector):
    """ORB keypoint detector (oriented FAST)"""

    detector_type = DetectorType.ORB

    def __init__(self, max_features: int = 500, scale_factor: float = 1.2,
                 n_levels: int = 8, edge_threshold: int = 31):
        self.max_features = max_features
        self.scale_factor = scale_factor
        self.n_levels = n_levels
        self.edge_threshold = edge_threshold
        super().__init__()

    def _create(self):
        return cv2.ORB_create(
            nfeatures=self.max_features,
            scaleFactor=self.scale_factor,
            nlevels=self.n_levels,
            edgeThreshold=self.edge_threshold
        )


class AKAZEDetector(OpenCVFeatureDetector):
    """AKAZE keypoint detector (nonlinear scale space)"""

    detector_type = DetectorType.AKAZE

    def __init__(self, threshold: float = 0.001, n_octaves: int = 4):
        self.threshold = threshold
        self.n_octaves = n_octaves
        super().__init__()

    def _create(self):
        return cv2.AKAZE_create(threshold=self.threshold, nOctaves=self.n_octaves)


class SIFTDetector(OpenCVFeatureDetector):
    """SIFT keypoint detector (difference of Gaussians)"""

    detector_type = DetectorType.SIFT

    def __init__(self, max_features: int = 0, contrast_threshold: float = 0.04,
                 edge_threshold: float = 10, sigma: float = 1.6):
        self.max_features = max_features
        self.contrast_threshold = contrast_threshold
        self.edge_threshold = edge_threshold
        self.sigma = sigma
        super().__init__()

    def _create(self):
        return cv2.SIFT_create(
            nfeatures=self.max_features,
            contrastThreshold=self.contrast_threshold,
            edgeThreshold=self.edge_threshold,
            sigma=self.sigma
        )


DETECTOR_MAP = {
    DetectorType.SHITOMASI: ShiTomasiDetector,
    DetectorType.HARRIS: HarrisLaplaceDetector,
    DetectorType.FAST: FASTDetector,
    DetectorType.BRISK: BRISKDetector,
    DetectorType.ORB: ORBDetector,
    DetectorType.AKAZE: AKAZEDetector,
    DetectorType.SIFT: SIFTDetector,
}


def create_detector(detector_type: Union[str, DetectorType], **kwargs) -> BaseKeypointDetector:
    """
    Factory function to create keypoint detectors

    Args:
        detector_type: Detector name or DetectorType
        **kwargs: Parameters forwarded to the detector constructor

    Returns:
        Initialized detector instance

    Raises:
        UnsupportedDetectorError: If detector_type is not supported
    """
    kind = DetectorType.from_name(detector_type)
    return DETECTOR_MAP[kind](**kwargs)


def detect_keypoints(image: np.ndarray,
                     detector_type: Union[str, DetectorType],
                     **kwargs) -> Tuple[List[cv2.KeyPoint], float]:
    """
    Detect keypoints and measure the wall-clock time of the detection call

    Args:
        image: Grayscale image
        detector_type: Detector name or DetectorType
        **kwargs: Detector parameters

    Returns:
        Tuple of (keypoints, elapsed_ms)

    Raises:
        UnsupportedDetectorError: Unknown detector type
        ProcessingError: Invalid detector parameters or OpenCV failed inside detection
    """
    kind = DetectorType.from_name(detector_type)

    try:
        # bad parameters surface from the constructor or from OpenCV
        detector = create_detector(kind, **kwargs)
        start_time = time.time()
        keypoints = detector.detect(image)
        elapsed_ms = (time.time() - start_time) * 1000.0
    except (cv2.error, TypeError, AttributeError) as e:
        raise ProcessingError("detection", kind.value, e) from e

    logger.info(f"{detector.name} detection with n={len(keypoints)} keypoints in {elapsed_ms:.2f} ms")
    return keypoints, elapsed_ms


def retain_best_keypoints(keypoints: List[cv2.KeyPoint],
                          max_keypoints: int,
                          detector_type: Union[str, DetectorType]) -> List[cv2.KeyPoint]:
    """
    Limit the number of keypoints

    Detectors with a response score keep the strongest responses. Shi-Tomasi
    has no response, its output is already sorted by descending quality, so
    the first max_keypoints are kept.

    Args:
        keypoints: Keypoints to limit
        max_keypoints: Number to keep
        detector_type: Detector that produced the keypoints

    Returns:
        Limited keypoint list
    """
    if max_keypoints < 0:
        raise ValueError(f"max_keypoints must be non-negative, got {max_keypoints}")
    if len(keypoints) <= max_keypoints:
        return list(keypoints)

    kind = DetectorType.from_name(detector_type)
    if not DETECTOR_MAP[kind].provides_response:
        return list(keypoints[:max_keypoints])

    # stable sort, equal responses keep detector order
    return sorted(keypoints, key=lambda kp: kp.response, reverse=True)[:max_keypoints]

"""
Core data structures and enums for the feature benchmark.

This module contains the fundamental data classes and enumerations used
throughout the detection, description and matching pipeline.
"""

import cv2
import numpy as np
from typing import List, Tuple, Dict, Optional, Any
from dataclasses import dataclass, field
from enum import Enum

from .exceptions import (
    UnsupportedDetectorError,
    UnsupportedDescriptorError,
    UnsupportedMatcherError,
)


class DetectorType(Enum):
    """Enumeration of available detector types"""
    SHITOMASI = "SHITOMASI"
    HARRIS = "HARRIS"
    FAST = "FAST"
    BRISK = "BRISK"
    ORB = "ORB"
    AKAZE = "AKAZE"
    SIFT = "SIFT"

    @classmethod
    def from_name(cls, name) -> 'DetectorType':
        if isinstance(name, cls):
            return name
        try:
            return cls(str(name).upper())
        except ValueError:
            raise UnsupportedDetectorError(str(name), [m.value for m in cls]) from None


class DescriptorType(Enum):
    """Enumeration of available descriptor extractor types"""
    BRISK = "BRISK"
    BRIEF = "BRIEF"
    ORB = "ORB"
    FREAK = "FREAK"
    AKAZE = "AKAZE"
    SIFT = "SIFT"

    @classmethod
    def from_name(cls, name) -> 'DescriptorType':
        if isinstance(name, cls):
            return name
        try:
            return cls(str(name).upper())
        except ValueError:
            raise UnsupportedDescriptorError(str(name), [m.value for m in cls]) from None


class DescriptorNorm(Enum):
    """Descriptor families, used to pick the matching distance"""
    BINARY = "DES_BINARY"   # Hamming distance
    HOG = "DES_HOG"         # Euclidean distance (gradient histograms, e.g. SIFT)

    @classmethod
    def from_name(cls, name) -> 'DescriptorNorm':
        if isinstance(name, cls):
            return name
        try:
            return cls(str(name).upper())
        except ValueError:
            raise UnsupportedMatcherError(f"Unknown descriptor norm: {name}") from None


class MatcherType(Enum):
    """Enumeration of matcher strategies"""
    BRUTE_FORCE = "MAT_BF"
    FLANN = "MAT_FLANN"

    @classmethod
    def from_name(cls, name) -> 'MatcherType':
        if isinstance(name, cls):
            return name
        try:
            return cls(str(name).upper())
        except ValueError:
            raise UnsupportedMatcherError(f"Unknown matcher type: {name}") from None


class SelectorType(Enum):
    """Enumeration of match selection strategies"""
    NEAREST_NEIGHBOR = "SEL_NN"   # best match per source descriptor
    KNN = "SEL_KNN"               # k=2 with distance ratio test

    @classmethod
    def from_name(cls, name) -> 'SelectorType':
        if isinstance(name, cls):
            return name
        try:
            return cls(str(name).upper())
        except ValueError:
            raise UnsupportedMatcherError(f"Unknown selector type: {name}") from None


@dataclass(frozen=True)
class ConfigPair:
    """One (detector, descriptor) combination evaluated over all frames"""
    detector_type: DetectorType
    descriptor_type: DescriptorType

    @classmethod
    def from_names(cls, detector: str, descriptor: str) -> 'ConfigPair':
        return cls(DetectorType.from_name(detector), DescriptorType.from_name(descriptor))

    @property
    def name(self) -> str:
        return f"{self.detector_type.value}+{self.descriptor_type.value}"


@dataclass
class Frame:
    """Container for one camera frame and everything derived from it"""
    image: np.ndarray
    index: int = 0
    keypoints: List[cv2.KeyPoint] = field(default_factory=list)
    descriptors: Optional[np.ndarray] = None
    matches: List[cv2.DMatch] = field(default_factory=list)

    def __len__(self):
        return len(self.keypoints)


@dataclass
class AggregateStats:
    """Counters accumulated over the frames of one configuration pair"""
    config: ConfigPair
    total_keypoints_detected: int = 0
    total_keypoints_described: int = 0
    total_detector_time_ms: float = 0.0
    total_descriptor_plus_time_ms: float = 0.0
    total_matches: int = 0
    total_matching_time_ms: float = 0.0
    matching_invocations: int = 0
    frames_attempted: int = 0
    frames_completed: int = 0
    status: str = "ok"
    error: Optional[str] = None

    def commit_frame(self, keypoints_detected: int, keypoints_described: int,
                     detector_time_ms: float, descriptor_time_ms: float):
        """Add one fully processed frame"""
        self.total_keypoints_detected += keypoints_detected
        self.total_keypoints_described += keypoints_described
        self.total_detector_time_ms += detector_time_ms
        self.total_descriptor_plus_time_ms += detector_time_ms + descriptor_time_ms
        self.frames_completed += 1

    def record_matching(self, num_matches: int, matching_time_ms: float):
        self.matching_invocations += 1
        self.total_matches += num_matches
        self.total_matching_time_ms += matching_time_ms

    def finalize(self, frame_count: int) -> 'AggregateSummary':
        """
        Divide the accumulated totals by a frame count

        Args:
            frame_count: Divisor for every average. Zero yields zero averages.

        Returns:
            AggregateSummary with per-frame averages
        """
        def average(total):
            return total / frame_count if frame_count > 0 else 0.0

        return AggregateSummary(
            detector_type=self.config.detector_type.value,
            descriptor_type=self.config.descriptor_type.value,
            avg_keypoints_detected=average(self.total_keypoints_detected),
            avg_keypoints_described=average(self.total_keypoints_described),
            avg_detector_time_ms=average(self.total_detector_time_ms),
            avg_total_time_ms=average(self.total_descriptor_plus_time_ms),
            avg_matches=(self.total_matches / self.matching_invocations
                         if self.matching_invocations else 0.0),
            avg_matching_time_ms=(self.total_matching_time_ms / self.matching_invocations
                                  if self.matching_invocations else 0.0),
            frame_count=frame_count,
            frames_completed=self.frames_completed,
            matching_invocations=self.matching_invocations,
            status=self.status,
            error=self.error
        )


@dataclass(frozen=True)
class AggregateSummary:
    """Immutable report row for one configuration pair"""
    detector_type: str
    descriptor_type: str
    avg_keypoints_detected: float
    avg_keypoints_described: float
    avg_detector_time_ms: float
    avg_total_time_ms: float
    avg_matches: float = 0.0
    avg_matching_time_ms: float = 0.0
    frame_count: int = 0
    frames_completed: int = 0
    matching_invocations: int = 0
    status: str = "ok"
    error: Optional[str] = None

    def detector_row(self) -> Tuple[str, float, float]:
        return (self.detector_type, self.avg_keypoints_detected, self.avg_detector_time_ms)

    def combined_row(self) -> Tuple[str, str, float, float, float, float]:
        return (
            self.detector_type,
            self.descriptor_type,
            self.avg_keypoints_detected,
            self.avg_keypoints_described,
            self.avg_detector_time_ms,
            self.avg_total_time_ms
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'detector_type': self.detector_type,
            'descriptor_type': self.descriptor_type,
            'avg_keypoints_detected': self.avg_keypoints_detected,
            'avg_keypoints_described': self.avg_keypoints_described,
            'avg_detector_time_ms': self.avg_detector_time_ms,
            'avg_total_time_ms': self.avg_total_time_ms,
            'avg_matches': self.avg_matches,
            'avg_matching_time_ms': self.avg_matching_time_ms,
            'frame_count': self.frame_count,
            'frames_completed': self.frames_completed,
            'matching_invocations': self.matching_invocations,
            'status': self.status,
            'error': self.error
        }

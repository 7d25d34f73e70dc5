"""
Exception hierarchy for the feature benchmark.

Per-frame failures (unsupported kinds, incompatible pairings, OpenCV errors)
end the current configuration pair only. Image loading failures end the run.
"""

from typing import Iterable, Optional


class FeatureBenchmarkError(Exception):
    """Base class for all benchmark errors"""


class UnsupportedDetectorError(FeatureBenchmarkError, ValueError):
    """Raised for a detector kind outside the supported set"""

    def __init__(self, detector_type: str, available: Optional[Iterable[str]] = None):
        self.detector_type = detector_type
        message = f"Unknown detector type: {detector_type}"
        if available:
            message += f". Available: {', '.join(available)}"
        super().__init__(message)


class UnsupportedDescriptorError(FeatureBenchmarkError, ValueError):
    """Raised for a descriptor kind outside the supported set"""

    def __init__(self, descriptor_type: str, available: Optional[Iterable[str]] = None):
        self.descriptor_type = descriptor_type
        message = f"Unknown descriptor type: {descriptor_type}"
        if available:
            message += f". Available: {', '.join(available)}"
        super().__init__(message)


class UnsupportedMatcherError(FeatureBenchmarkError, ValueError):
    """Raised for an unknown descriptor norm, matcher or selector string"""


class IncompatiblePairingError(FeatureBenchmarkError):
    """Detector/descriptor combination known to be invalid"""

    def __init__(self, detector_type: str, descriptor_type: str, reason: str = ""):
        self.detector_type = detector_type
        self.descriptor_type = descriptor_type
        self.reason = reason
        message = f"{detector_type} keypoints cannot be described with {descriptor_type}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class EmptyBufferError(FeatureBenchmarkError, IndexError):
    """Not enough frames resident in the frame buffer"""


class ImageLoadError(FeatureBenchmarkError, IOError):
    """Image file missing or not decodable"""

    def __init__(self, filepath: str):
        self.filepath = filepath
        super().__init__(f"Could not load image: {filepath}")


class ProcessingError(FeatureBenchmarkError):
    """OpenCV failure inside a detection, description or matching call"""

    def __init__(self, stage: str, method: str, cause: Exception):
        self.stage = stage
        self.method = method
        self.cause = cause
        super().__init__(f"{stage} with {method} failed: {cause}")

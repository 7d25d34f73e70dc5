"""
Configuration management for the feature benchmark.

This module provides the benchmark configuration, predefined presets,
validation, and JSON persistence.
"""

import json
import os
from copy import deepcopy
from dataclasses import dataclass, field, asdict, fields
from typing import Dict, List, Any, Optional, Tuple

from .core_data_structures import (
    ConfigPair,
    DetectorType,
    DescriptorType,
    DescriptorNorm,
    MatcherType,
    SelectorType,
)
from .compatibility import PairingCompatibilityManager
from .descriptors import descriptor_norm_for
from .exceptions import FeatureBenchmarkError
from .region_filter import RegionOfInterest
from .logger import get_logger, parse_level

logger = get_logger("config")


NORMALIZATION_MODES = ('completed', 'attempted')


@dataclass
class BenchmarkConfig:
    """Centralized configuration for a benchmark run"""
    # Camera images
    image_base_path: str = "../images/"
    image_prefix: str = "KITTI/2011_09_26/image_00/data/000000"
    image_file_type: str = ".png"
    image_start_index: int = 0
    image_end_index: int = 9
    image_fill_width: int = 4

    # Ring buffer
    buffer_size: int = 2

    # Configuration pairs
    detector_types: List[str] = field(default_factory=lambda: ['FAST', 'BRISK', 'ORB', 'AKAZE', 'SIFT', 'HARRIS'])
    descriptor_types: List[str] = field(default_factory=lambda: ['BRISK', 'FREAK', 'BRIEF', 'ORB'])
    detector_params: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    descriptor_params: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    # Region of interest (x, y, width, height)
    focus_on_roi: bool = True
    roi: Tuple[int, int, int, int] = (535, 180, 180, 150)

    # Keypoint cap, mostly useful for debugging
    limit_keypoints: bool = False
    max_keypoints: int = 50

    # Matching; descriptor_norm None derives the norm from the descriptor type
    descriptor_norm: Optional[str] = None
    matcher_type: str = 'MAT_BF'
    selector_type: str = 'SEL_KNN'
    ratio_threshold: float = 0.8

    # Reporting
    normalize_by: str = 'completed'
    detector_report_path: Optional[str] = 'task7.csv'
    descriptor_report_path: Optional[str] = 'task8_task9.csv'

    # Visualization, blocks on a key press per frame
    visualize_keypoints: bool = False
    visualize_matches: bool = False

    # Logging
    log_level: str = 'INFO'
    log_file: Optional[str] = None

    @property
    def num_frames(self) -> int:
        return self.image_end_index - self.image_start_index + 1

    @property
    def region_of_interest(self) -> RegionOfInterest:
        return RegionOfInterest.from_tuple(self.roi)

    def config_pairs(self) -> List[ConfigPair]:
        """Cross product of detectors and descriptors, detector-major"""
        return [
            ConfigPair.from_names(detector, descriptor)
            for detector in self.detector_types
            for descriptor in self.descriptor_types
        ]

    def params_for_detector(self, detector: DetectorType) -> Dict[str, Any]:
        return dict(self.detector_params.get(detector.value, {}))

    def params_for_descriptor(self, descriptor: DescriptorType) -> Dict[str, Any]:
        return dict(self.descriptor_params.get(descriptor.value, {}))

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['roi'] = list(self.roi)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BenchmarkConfig':
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")
        values = deepcopy(data)
        if 'roi' in values:
            values['roi'] = tuple(values['roi'])
        return cls(**values)


# =============================================================================
# Presets
# =============================================================================

PRESET_CONFIGS = {
    'default': {},

    'quick': {
        'detector_types': ['FAST'],
        'descriptor_types': ['BRISK'],
    },

    'full': {
        'detector_types': ['SHITOMASI', 'HARRIS', 'FAST', 'BRISK', 'ORB', 'AKAZE', 'SIFT'],
        'descriptor_types': ['BRISK', 'BRIEF', 'ORB', 'FREAK', 'AKAZE', 'SIFT'],
    },

    'flann': {
        'matcher_type': 'MAT_FLANN',
        'selector_type': 'SEL_KNN',
    },

    'debug': {
        'detector_types': ['SHITOMASI'],
        'descriptor_types': ['BRISK'],
        'limit_keypoints': True,
        'max_keypoints': 50,
        'log_level': 'DEBUG',
    },
}


def get_available_presets() -> List[str]:
    return list(PRESET_CONFIGS.keys())


def create_config_from_preset(preset: str, **overrides) -> BenchmarkConfig:
    """
    Create configuration from a preset

    Args:
        preset: Preset name ('default', 'quick', 'full', 'flann', 'debug')
        **overrides: Field values replacing the preset's

    Returns:
        BenchmarkConfig

    Raises:
        ValueError: If preset is unknown
    """
    if preset not in PRESET_CONFIGS:
        available = ', '.join(PRESET_CONFIGS.keys())
        raise ValueError(f"Unknown preset '{preset}'. Available: {available}")

    merged = merge_configs(PRESET_CONFIGS[preset], overrides)
    return BenchmarkConfig.from_dict(merged)


def merge_configs(base_config: Dict[str, Any], override_config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Merge two configuration dictionaries

    Nested dictionaries are merged recursively, everything else is replaced.
    """
    merged = deepcopy(base_config)

    for key, value in override_config.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = deepcopy(value)

    return merged


# =============================================================================
# Validation
# =============================================================================

def validate_config(config: BenchmarkConfig,
                    compat_manager: Optional[PairingCompatibilityManager] = None) -> Dict[str, List[str]]:
    """
    Validate a configuration

    Args:
        config: Configuration to validate
        compat_manager: Pairing rules the run will use, bundled rules if None

    Returns:
        Dictionary with 'errors' and 'warnings' lists
    """
    errors = []
    warnings = []

    detectors = []
    for name in config.detector_types:
        try:
            detectors.append(DetectorType.from_name(name))
        except FeatureBenchmarkError as e:
            errors.append(str(e))

    descriptors = []
    for name in config.descriptor_types:
        try:
            descriptors.append(DescriptorType.from_name(name))
        except FeatureBenchmarkError as e:
            errors.append(str(e))

    matcher = None
    try:
        matcher = MatcherType.from_name(config.matcher_type)
    except FeatureBenchmarkError as e:
        errors.append(str(e))
    try:
        SelectorType.from_name(config.selector_type)
    except FeatureBenchmarkError as e:
        errors.append(str(e))
    try:
        parse_level(config.log_level)
    except ValueError as e:
        errors.append(str(e))

    norm = None
    if config.descriptor_norm is not None:
        try:
            norm = DescriptorNorm.from_name(config.descriptor_norm)
        except FeatureBenchmarkError as e:
            errors.append(str(e))

    if not config.detector_types:
        errors.append("At least one detector type is required")
    if not config.descriptor_types:
        errors.append("At least one descriptor type is required")

    if config.image_end_index < config.image_start_index:
        errors.append("image_end_index must not be smaller than image_start_index")
    if config.buffer_size < 1:
        errors.append("buffer_size must be at least 1")
    elif config.buffer_size < 2:
        warnings.append("buffer_size < 2: no frame pairs will be matched")

    if not 0.0 < config.ratio_threshold <= 1.0:
        errors.append("ratio_threshold must be in (0, 1]")
    if config.max_keypoints < 0:
        errors.append("max_keypoints must be non-negative")
    if config.normalize_by not in NORMALIZATION_MODES:
        errors.append(f"normalize_by must be one of {', '.join(NORMALIZATION_MODES)}")

    if len(config.roi) != 4:
        errors.append("roi must be (x, y, width, height)")
    elif config.roi[2] < 0 or config.roi[3] < 0:
        errors.append("roi width and height must be non-negative")

    # Hamming distance on float descriptors fails inside OpenCV
    if norm == DescriptorNorm.BINARY and matcher == MatcherType.BRUTE_FORCE:
        for descriptor in descriptors:
            if descriptor_norm_for(descriptor) == DescriptorNorm.HOG:
                warnings.append(f"{descriptor.value} descriptors are floating point, "
                                f"brute-force Hamming matching will fail")

    if detectors and descriptors:
        if compat_manager is None:
            compat_manager = PairingCompatibilityManager()
        for detector, descriptor, reason in compat_manager.find_incompatible(detectors, descriptors):
            warnings.append(f"{detector} + {descriptor} will be skipped: {reason}")

    return {'errors': errors, 'warnings': warnings}


def check_config(config: BenchmarkConfig,
                 compat_manager: Optional[PairingCompatibilityManager] = None):
    """
    Reject a configuration before any frame is processed

    Pairs the given compat_manager rejects are logged as warnings.

    Raises:
        UnsupportedDetectorError: Unknown detector type
        UnsupportedDescriptorError: Unknown descriptor type
        UnsupportedMatcherError: Unknown norm, matcher or selector string
        ValueError: Any other validation error
    """
    for name in config.detector_types:
        DetectorType.from_name(name)
    for name in config.descriptor_types:
        DescriptorType.from_name(name)
    MatcherType.from_name(config.matcher_type)
    SelectorType.from_name(config.selector_type)
    if config.descriptor_norm is not None:
        DescriptorNorm.from_name(config.descriptor_norm)

    result = validate_config(config, compat_manager)
    if result['errors']:
        raise ValueError("Invalid configuration: " + "; ".join(result['errors']))
    for warning in result['warnings']:
        logger.warning(warning)


def print_config(config: BenchmarkConfig, title: str = "Configuration"):
    """
    Log a configuration, one key per line

    Args:
        config: Configuration to print
        title: Title for the printout
    """
    logger.info(title)
    logger.info("=" * len(title))

    def print_dict(d, indent=0):
        for key, value in d.items():
            prefix = "  " * indent
            if isinstance(value, dict) and value:
                logger.info(f"{prefix}{key}:")
                print_dict(value, indent + 1)
            else:
                logger.info(f"{prefix}{key}: {value}")

    print_dict(config.to_dict())


# =============================================================================
# Persistence
# =============================================================================

def save_config(config: BenchmarkConfig, filepath: str):
    """
    Save configuration to JSON file

    Args:
        config: Configuration to save
        filepath: Path to save file
    """
    with open(filepath, 'w') as f:
        json.dump(config.to_dict(), f, indent=2)
    logger.info(f"Configuration saved to: {filepath}")


def load_config(filepath: str) -> BenchmarkConfig:
    """
    Load configuration from JSON file

    Keys missing from the file keep their defaults.

    Args:
        filepath: Path to configuration file

    Returns:
        Loaded configuration

    Raises:
        FileNotFoundError: If file doesn't exist
        json.JSONDecodeError: If file is not valid JSON
    """
    if not os.path.exists(filepath):
        raise FileNotFoundError(f"Configuration file not found: {filepath}")

    with open(filepath, 'r') as f:
        data = json.load(f)

    logger.info(f"Configuration loaded from: {filepath}")
    return BenchmarkConfig.from_dict(data)

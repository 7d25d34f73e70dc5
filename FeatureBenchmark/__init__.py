"""
FeatureBenchmark - Keypoint Detector and Descriptor Benchmark

Runs every combination of keypoint detector and descriptor extractor over a
short camera image sequence, matches consecutive frames and reports average
keypoint counts and timings per combination.

Key Features:
- Detectors: SHITOMASI, HARRIS, FAST, BRISK, ORB, AKAZE, SIFT
- Descriptors: BRISK, BRIEF, ORB, FREAK, AKAZE, SIFT
- Brute-force or FLANN matching, nearest neighbor or k=2 ratio test
- Region-of-interest filtering of keypoints
- CSV reports and summary plots

Quick Start:
    >>> from FeatureBenchmark import create_pipeline
    >>>
    >>> pipeline = create_pipeline('quick', image_base_path='../images/')
    >>> summaries = pipeline.run()
    >>> for summary in summaries:
    ...     print(summary.combined_row())
"""

__version__ = '1.0.0'

# =============================================================================
# CORE PIPELINE
# =============================================================================

from .pipeline import (
    BenchmarkPipeline,
    PipelineState,
    create_pipeline,
)

# =============================================================================
# CORE DATA STRUCTURES
# =============================================================================

from .core_data_structures import (
    DetectorType,
    DescriptorType,
    DescriptorNorm,
    MatcherType,
    SelectorType,
    ConfigPair,
    Frame,
    AggregateStats,
    AggregateSummary,
)

# =============================================================================
# PROCESSING STAGES
# =============================================================================

from .frame_buffer import FrameBuffer

from .region_filter import (
    RegionOfInterest,
    VEHICLE_ROI,
    filter_keypoints,
)

from .detectors import (
    BaseKeypointDetector,
    create_detector,
    detect_keypoints,
    retain_best_keypoints,
)

from .descriptors import (
    BaseDescriptorExtractor,
    create_extractor,
    describe_keypoints,
    descriptor_norm_for,
)

from .matching import (
    create_matcher,
    match_descriptors,
    select_ratio_matches,
)

from .compatibility import PairingCompatibilityManager

from .image_source import ImageSequence

# =============================================================================
# CONFIGURATION
# =============================================================================

from .config import (
    BenchmarkConfig,
    PRESET_CONFIGS,
    get_available_presets,
    create_config_from_preset,
    validate_config,
    check_config,
    save_config,
    load_config,
    print_config,
)

# =============================================================================
# REPORTING
# =============================================================================

from .reporting import (
    ReportSink,
    MemoryReportSink,
    CsvReportSink,
    summaries_to_dataframe,
    plot_summary,
)

# =============================================================================
# ERRORS
# =============================================================================

from .exceptions import (
    FeatureBenchmarkError,
    UnsupportedDetectorError,
    UnsupportedDescriptorError,
    UnsupportedMatcherError,
    IncompatiblePairingError,
    EmptyBufferError,
    ImageLoadError,
    ProcessingError,
)

# =============================================================================
# LOGGING
# =============================================================================

from .logger import (
    setup_logger,
    get_logger,
    configure_root_logger,
)


__all__ = [
    # Core Pipeline
    'BenchmarkPipeline',
    'PipelineState',
    'create_pipeline',

    # Data Structures
    'DetectorType',
    'DescriptorType',
    'DescriptorNorm',
    'MatcherType',
    'SelectorType',
    'ConfigPair',
    'Frame',
    'AggregateStats',
    'AggregateSummary',

    # Processing Stages
    'FrameBuffer',
    'RegionOfInterest',
    'VEHICLE_ROI',
    'filter_keypoints',
    'BaseKeypointDetector',
    'create_detector',
    'detect_keypoints',
    'retain_best_keypoints',
    'BaseDescriptorExtractor',
    'create_extractor',
    'describe_keypoints',
    'descriptor_norm_for',
    'create_matcher',
    'match_descriptors',
    'select_ratio_matches',
    'PairingCompatibilityManager',
    'ImageSequence',

    # Configuration
    'BenchmarkConfig',
    'PRESET_CONFIGS',
    'get_available_presets',
    'create_config_from_preset',
    'validate_config',
    'check_config',
    'save_config',
    'load_config',
    'print_config',

    # Reporting
    'ReportSink',
    'MemoryReportSink',
    'CsvReportSink',
    'summaries_to_dataframe',
    'plot_summary',

    # Errors
    'FeatureBenchmarkError',
    'UnsupportedDetectorError',
    'UnsupportedDescriptorError',
    'UnsupportedMatcherError',
    'IncompatiblePairingError',
    'EmptyBufferError',
    'ImageLoadError',
    'ProcessingError',

    # Logging
    'setup_logger',
    'get_logger',
    'configure_root_logger',
]

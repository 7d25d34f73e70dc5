#!/usr/bin/env python3
"""
Feature Benchmark - Main Script

Runs every detector/descriptor combination over the first ten KITTI frames,
matches consecutive frames and writes the averaged results to two CSV files.

Requirements:
    - opencv-contrib-python (BRIEF, FREAK and Harris-Laplace live in xfeatures2d)
    - numpy, pandas, matplotlib
"""

from FeatureBenchmark import create_pipeline, plot_summary
import sys

# =============================================================================
# CONFIGURATION
# =============================================================================

# Input
IMAGE_BASE_PATH = '../images/'
IMAGE_PREFIX = 'KITTI/2011_09_26/image_00/data/000000'
IMAGE_FILE_TYPE = '.png'
IMAGE_START_INDEX = 0
IMAGE_END_INDEX = 9

# Combinations
DETECTORS = ['FAST', 'BRISK', 'ORB', 'AKAZE', 'SIFT', 'HARRIS']
DESCRIPTORS = ['BRISK', 'FREAK', 'BRIEF', 'ORB']

# Detector Parameters
DETECTOR_PARAMS = {
    'FAST': {
        'threshold': 30,
        'nonmax_suppression': True
    },
    'SHITOMASI': {
        'block_size': 4,
        'quality_level': 0.01
    }
}

# Matching
MATCHER_TYPE = 'MAT_BF'     # MAT_BF, MAT_FLANN
SELECTOR_TYPE = 'SEL_KNN'   # SEL_NN, SEL_KNN
RATIO_THRESHOLD = 0.8

# Keypoints
FOCUS_ON_ROI = True
LIMIT_KEYPOINTS = False
MAX_KEYPOINTS = 50

# Output
DETECTOR_REPORT = 'task7.csv'
DESCRIPTOR_REPORT = 'task8_task9.csv'
PLOT_FILE = None  # e.g. './output/benchmark.png'
VISUALIZE = False

# Logging
LOG_LEVEL = 'INFO'  # DEBUG, INFO, WARNING, ERROR
LOG_FILE = None

# =============================================================================
# MAIN
# =============================================================================

if __name__ == "__main__":

    pipeline = create_pipeline(
        preset='default',
        image_base_path=IMAGE_BASE_PATH,
        image_prefix=IMAGE_PREFIX,
        image_file_type=IMAGE_FILE_TYPE,
        image_start_index=IMAGE_START_INDEX,
        image_end_index=IMAGE_END_INDEX,
        detector_types=DETECTORS,
        descriptor_types=DESCRIPTORS,
        detector_params=DETECTOR_PARAMS,
        matcher_type=MATCHER_TYPE,
        selector_type=SELECTOR_TYPE,
        ratio_threshold=RATIO_THRESHOLD,
        focus_on_roi=FOCUS_ON_ROI,
        limit_keypoints=LIMIT_KEYPOINTS,
        max_keypoints=MAX_KEYPOINTS,
        detector_report_path=DETECTOR_REPORT,
        descriptor_report_path=DESCRIPTOR_REPORT,
        visualize_keypoints=VISUALIZE,
        visualize_matches=VISUALIZE,
        log_level=LOG_LEVEL,
        log_file=LOG_FILE
    )

    try:
        summaries = pipeline.run()
    except Exception as e:
        print(f"\nERROR: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)

    if PLOT_FILE:
        plot_summary(summaries, PLOT_FILE)

    print(f"\nBenchmark complete! Evaluated {len(summaries)} combinations")
    print(f"Results saved to: {DETECTOR_REPORT}, {DESCRIPTOR_REPORT}")

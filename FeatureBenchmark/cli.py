"""
Command line entry point: feature-benchmark
"""

import argparse
import sys
from typing import List, Optional

from .config import (
    create_config_from_preset,
    get_available_presets,
    load_config,
    merge_configs,
    print_config,
    BenchmarkConfig,
)
from .exceptions import FeatureBenchmarkError, ImageLoadError
from .pipeline import BenchmarkPipeline
from .reporting import plot_summary
from .logger import configure_root_logger, get_logger

logger = get_logger("cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="feature-benchmark",
        description="Benchmark keypoint detector and descriptor combinations on an image sequence"
    )
    parser.add_argument("--preset", default="default", choices=get_available_presets(),
                        help="Configuration preset (default: default)")
    parser.add_argument("--config", help="JSON configuration file, replaces the preset")
    parser.add_argument("--data-path", help="Image base path (directory containing the KITTI folder)")
    parser.add_argument("--detectors", nargs="+", help="Detector types, e.g. FAST BRISK SIFT")
    parser.add_argument("--descriptors", nargs="+", help="Descriptor types, e.g. BRISK BRIEF ORB")
    parser.add_argument("--matcher", choices=["MAT_BF", "MAT_FLANN"], help="Matcher type")
    parser.add_argument("--selector", choices=["SEL_NN", "SEL_KNN"], help="Selector type")
    parser.add_argument("--limit-keypoints", type=int, metavar="N",
                        help="Keep at most N keypoints per frame")
    parser.add_argument("--visualize", action="store_true",
                        help="Show keypoints and matches, waits for a key press per frame")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging level")
    parser.add_argument("--log-file", help="Also write the log to this file")
    parser.add_argument("--plot", metavar="PATH", help="Save a summary plot to PATH")
    parser.add_argument("--print-config", action="store_true",
                        help="Log the resolved configuration and exit")
    return parser


def config_from_args(args: argparse.Namespace) -> BenchmarkConfig:
    """Preset or JSON file, with command line options applied on top"""
    overrides = {}
    if args.data_path is not None:
        overrides['image_base_path'] = args.data_path
    if args.detectors:
        overrides['detector_types'] = args.detectors
    if args.descriptors:
        overrides['descriptor_types'] = args.descriptors
    if args.matcher:
        overrides['matcher_type'] = args.matcher
    if args.selector:
        overrides['selector_type'] = args.selector
    if args.limit_keypoints is not None:
        overrides['limit_keypoints'] = True
        overrides['max_keypoints'] = args.limit_keypoints
    if args.visualize:
        overrides['visualize_keypoints'] = True
        overrides['visualize_matches'] = True
    if args.log_level:
        overrides['log_level'] = args.log_level
    if args.log_file:
        overrides['log_file'] = args.log_file

    if args.config:
        base = load_config(args.config)
        return BenchmarkConfig.from_dict(merge_configs(base.to_dict(), overrides))
    return create_config_from_preset(args.preset, **overrides)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = config_from_args(args)
    except (FeatureBenchmarkError, ValueError, FileNotFoundError) as e:
        configure_root_logger(level=args.log_level or "INFO")
        logger.error(f"Invalid configuration: {e}")
        return 2

    configure_root_logger(level=config.log_level, log_file=config.log_file)

    if args.print_config:
        print_config(config, title="Resolved configuration")
        return 0

    try:
        pipeline = BenchmarkPipeline(config)
    except (FeatureBenchmarkError, ValueError) as e:
        logger.error(f"Invalid configuration: {e}")
        return 2

    try:
        summaries = pipeline.run()
    except ImageLoadError as e:
        logger.error(f"Benchmark aborted: {e}")
        return 1
    except (FeatureBenchmarkError, ValueError) as e:
        logger.error(f"Benchmark failed: {e}")
        return 1

    if args.plot:
        plot_summary(summaries, args.plot)

    if config.detector_report_path:
        logger.info(f"Detector summary: {config.detector_report_path}")
    if config.descriptor_report_path:
        logger.info(f"Detector/descriptor summary: {config.descriptor_report_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

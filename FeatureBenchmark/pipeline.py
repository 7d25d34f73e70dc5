"""
Benchmark pipeline driver.

For every (detector, descriptor) pair the driver runs the same sequence of
stages on each frame of the image sequence:

    load -> detect -> filter to region -> describe -> match with previous frame

and accumulates counts and timings. One summary per pair is handed to the
report sink. A fresh frame buffer is used per pair, so the first frame of a
pair is never matched against the last frame of the previous pair.
"""

from enum import Enum
from typing import List, Optional

from .compatibility import PairingCompatibilityManager
from .config import BenchmarkConfig, check_config, create_config_from_preset
from .core_data_structures import (
    AggregateStats,
    AggregateSummary,
    ConfigPair,
    DescriptorNorm,
    Frame,
)
from .descriptors import describe_keypoints, descriptor_norm_for
from .detectors import detect_keypoints, retain_best_keypoints
from .exceptions import (
    IncompatiblePairingError,
    ProcessingError,
    UnsupportedDetectorError,
    UnsupportedDescriptorError,
    UnsupportedMatcherError,
)
from .frame_buffer import FrameBuffer
from .image_source import ImageSequence
from .matching import match_descriptors
from .region_filter import filter_keypoints
from .reporting import CsvReportSink, MemoryReportSink, ReportSink
from .visualization import show_keypoints, show_matches
from .logger import get_logger, configure_root_logger

logger = get_logger("pipeline")


class PipelineState(Enum):
    """Stages a frame passes through, in order"""
    CONFIG_SELECTED = "config_selected"
    FRAME_LOADED = "frame_loaded"
    KEYPOINTS_DETECTED = "keypoints_detected"
    REGION_FILTERED = "region_filtered"
    DESCRIBED_OR_SKIPPED = "described_or_skipped"
    MATCHED_IF_ELIGIBLE = "matched_if_eligible"
    AGGREGATE_UPDATED = "aggregate_updated"


# Errors that end the current configuration pair but not the run
PAIR_FAILURES = (
    ProcessingError,
    UnsupportedDetectorError,
    UnsupportedDescriptorError,
    UnsupportedMatcherError,
)


class BenchmarkPipeline:
    """
    Runs every configured detector/descriptor pair over the image sequence

    Example:
        >>> config = create_config_from_preset('quick', image_base_path='data/')
        >>> pipeline = BenchmarkPipeline(config)
        >>> summaries = pipeline.run()
        >>> summaries[0].combined_row()
    """

    def __init__(self,
                 config: Optional[BenchmarkConfig] = None,
                 image_source: Optional[ImageSequence] = None,
                 report_sink: Optional[ReportSink] = None,
                 compat_manager: Optional[PairingCompatibilityManager] = None):
        """
        Initialize pipeline

        Args:
            config: Benchmark configuration (defaults to BenchmarkConfig())
            image_source: Frame provider; built from config if None
            report_sink: Receives one summary per pair; CSV files from config if None
            compat_manager: Pairing rules; package defaults if None

        Raises:
            UnsupportedDetectorError, UnsupportedDescriptorError,
            UnsupportedMatcherError, ValueError: Invalid configuration
        """
        self.config = config if config is not None else BenchmarkConfig()
        self.compat_manager = compat_manager or PairingCompatibilityManager()
        check_config(self.config, self.compat_manager)

        if image_source is None:
            image_source = ImageSequence(
                self.config.image_base_path,
                self.config.image_prefix,
                self.config.image_file_type,
                start_index=self.config.image_start_index,
                end_index=self.config.image_end_index,
                fill_width=self.config.image_fill_width
            )
        self.image_source = image_source

        if report_sink is None:
            if self.config.detector_report_path or self.config.descriptor_report_path:
                report_sink = CsvReportSink(self.config.detector_report_path,
                                            self.config.descriptor_report_path)
            else:
                report_sink = MemoryReportSink()
        self.report_sink = report_sink

        self.roi = self.config.region_of_interest

        self.state: Optional[PipelineState] = None
        self.frame_buffer: Optional[FrameBuffer] = None
        self.summaries: List[AggregateSummary] = []

        logger.debug(f"Pipeline initialized with {len(self.config.config_pairs())} configuration pairs, "
                     f"{len(self.image_source)} frames each")

    def _set_state(self, state: PipelineState):
        self.state = state
        logger.debug(f"State: {state.name}")

    def run(self) -> List[AggregateSummary]:
        """
        Evaluate all configuration pairs

        Returns:
            One summary per pair, in detector-major order

        Raises:
            ImageLoadError: A frame could not be loaded. Summaries of pairs
                finished before the failure have already been written.
        """
        pairs = self.config.config_pairs()
        self.summaries = []

        logger.info("=" * 70)
        logger.info(f"FEATURE BENCHMARK: {len(pairs)} configuration pairs")
        logger.info("=" * 70)

        try:
            for i, pair in enumerate(pairs, start=1):
                logger.info(f"[{i}/{len(pairs)}] Detector: {pair.detector_type.value}, "
                            f"Descriptor: {pair.descriptor_type.value}")

                stats = self.run_configuration(pair)
                summary = self._summarize(stats)
                self.report_sink.write(summary)
                self.summaries.append(summary)
        finally:
            self.report_sink.close()

        logger.info(f"Benchmark finished: {len(self.summaries)} summaries")
        return self.summaries

    def run_configuration(self, pair: ConfigPair) -> AggregateStats:
        """
        Process all frames for one detector/descriptor pair

        An incompatible pairing or a processing failure stops the pair and is
        recorded in the returned stats; frames already committed are kept.

        Args:
            pair: Detector/descriptor combination

        Returns:
            Accumulated counters for the pair
        """
        self._set_state(PipelineState.CONFIG_SELECTED)
        stats = AggregateStats(pair)
        self.frame_buffer = FrameBuffer(self.config.buffer_size)

        if self.config.descriptor_norm is not None:
            descriptor_norm = DescriptorNorm.from_name(self.config.descriptor_norm)
        else:
            descriptor_norm = descriptor_norm_for(pair.descriptor_type)

        for index in self.image_source.indices():
            stats.frames_attempted += 1
            try:
                self._process_frame(index, pair, descriptor_norm, stats)
            except IncompatiblePairingError as e:
                logger.warning(f"{pair.name}: {e}, skipping remaining frames")
                self._set_state(PipelineState.DESCRIBED_OR_SKIPPED)
                stats.status = "incompatible"
                stats.error = str(e)
                break
            except PAIR_FAILURES as e:
                logger.error(f"{pair.name} failed on frame {index}: {e}")
                stats.status = "failed"
                stats.error = str(e)
                break

        return stats

    def _process_frame(self, index: int, pair: ConfigPair,
                       descriptor_norm: DescriptorNorm, stats: AggregateStats):
        # Load image into buffer
        image = self.image_source.load_grayscale(index)
        frame = Frame(image=image, index=index)
        self.frame_buffer.push(frame)
        self._set_state(PipelineState.FRAME_LOADED)

        # Detect
        keypoints, detector_time_ms = detect_keypoints(
            image, pair.detector_type, **self.config.params_for_detector(pair.detector_type)
        )
        num_detected = len(keypoints)
        self._set_state(PipelineState.KEYPOINTS_DETECTED)

        if self.config.visualize_keypoints:
            show_keypoints(image, keypoints, pair.detector_type.value)

        # Region of interest
        if self.config.focus_on_roi:
            keypoints = filter_keypoints(keypoints, self.roi)
            logger.debug(f"{len(keypoints)} of {num_detected} keypoints inside region")
        self._set_state(PipelineState.REGION_FILTERED)

        if self.config.limit_keypoints:
            keypoints = retain_best_keypoints(keypoints, self.config.max_keypoints, pair.detector_type)
            logger.info(f"Keypoints limited to {len(keypoints)}")

        # Describe
        self.compat_manager.check_pairing(pair.detector_type, pair.descriptor_type)
        described, descriptors, descriptor_time_ms = describe_keypoints(
            keypoints, image, pair.descriptor_type,
            **self.config.params_for_descriptor(pair.descriptor_type)
        )
        frame.keypoints = described
        frame.descriptors = descriptors
        self._set_state(PipelineState.DESCRIBED_OR_SKIPPED)

        # Match with previous frame
        if self.frame_buffer.size() >= 2:
            previous = self.frame_buffer.second_last()
            matches, matching_time_ms = match_descriptors(
                previous.keypoints, frame.keypoints,
                previous.descriptors, frame.descriptors,
                descriptor_norm=descriptor_norm,
                matcher_type=self.config.matcher_type,
                selector_type=self.config.selector_type,
                ratio_threshold=self.config.ratio_threshold
            )
            frame.matches = matches
            stats.record_matching(len(matches), matching_time_ms)

            if self.config.visualize_matches:
                show_matches(previous, frame, matches)
        self._set_state(PipelineState.MATCHED_IF_ELIGIBLE)

        stats.commit_frame(num_detected, len(described), detector_time_ms, descriptor_time_ms)
        self._set_state(PipelineState.AGGREGATE_UPDATED)

    def _summarize(self, stats: AggregateStats) -> AggregateSummary:
        if self.config.normalize_by == 'attempted':
            frame_count = self.config.num_frames
        else:
            frame_count = stats.frames_completed

        summary = stats.finalize(frame_count)
        logger.info(
            f"{stats.config.name} [{summary.status}]: "
            f"{summary.avg_keypoints_detected:.1f} keypoints detected, "
            f"{summary.avg_keypoints_described:.1f} described, "
            f"{summary.avg_detector_time_ms:.2f} ms detection, "
            f"{summary.avg_total_time_ms:.2f} ms detection + description, "
            f"{summary.avg_matches:.1f} matches"
        )
        return summary


def create_pipeline(preset: str = 'default',
                    log_level: Optional[str] = None,
                    log_file: Optional[str] = None,
                    **kwargs) -> BenchmarkPipeline:
    """
    Create a benchmark pipeline from a preset

    Args:
        preset: Preset name ('default', 'quick', 'full', 'flann', 'debug')
        log_level: Logging level, overrides the preset's
        log_file: Optional path to log file
        **kwargs: BenchmarkConfig fields overriding the preset

    Returns:
        BenchmarkPipeline instance

    Examples:
        >>> pipeline = create_pipeline('quick', image_base_path='data/')
        >>> pipeline = create_pipeline('full', matcher_type='MAT_FLANN', log_file='run.log')
    """
    if log_level is not None:
        kwargs['log_level'] = log_level
    if log_file is not None:
        kwargs['log_file'] = log_file

    config = create_config_from_preset(preset, **kwargs)
    configure_root_logger(level=config.log_level, log_file=config.log_file)

    return BenchmarkPipeline(config)

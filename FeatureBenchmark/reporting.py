"""
Report sinks for benchmark summaries.

Two logically separate tables are produced, one row per configuration pair:

- detector summary: detector, average keypoints detected, average detection time
- combined summary: detector, descriptor, average keypoints detected and
  described, average detection time, average detection + description time
"""

import pandas as pd
import matplotlib.pyplot as plt
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Union

from .core_data_structures import AggregateSummary
from .logger import get_logger

logger = get_logger("reporting")


DETECTOR_COLUMNS = ['Detector Type', '#keypoints', 'Detection Time (ms)']

COMBINED_COLUMNS = [
    'Detector Type',
    'Descriptor Type',
    'averageKeypointsDetectors',
    'averageKeypointsDescriptors',
    'averageDetectorsDetectionTime (ms)',
    'averageTotalDetectionTime (ms)',
]


class ReportSink(ABC):
    """Receives one immutable summary per configuration pair"""

    @abstractmethod
    def write(self, summary: AggregateSummary):
        pass

    def close(self):
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


class MemoryReportSink(ReportSink):
    """Keeps summaries in memory"""

    def __init__(self):
        self.summaries: List[AggregateSummary] = []

    def write(self, summary: AggregateSummary):
        self.summaries.append(summary)

    @property
    def detector_rows(self):
        return [s.detector_row() for s in self.summaries]

    @property
    def combined_rows(self):
        return [s.combined_row() for s in self.summaries]


class CsvReportSink(MemoryReportSink):
    """
    Writes the detector and combined summaries to two CSV files

    Both files are rewritten after every summary, so a run that stops early
    still leaves the rows of the completed configurations on disk.
    """

    def __init__(self,
                 detector_path: Optional[Union[str, Path]] = 'task7.csv',
                 combined_path: Optional[Union[str, Path]] = 'task8_task9.csv'):
        super().__init__()
        self.detector_path = Path(detector_path) if detector_path else None
        self.combined_path = Path(combined_path) if combined_path else None

    def write(self, summary: AggregateSummary):
        super().write(summary)
        self._flush()

    def close(self):
        self._flush()

    def _flush(self):
        if self.detector_path is not None:
            self._write_csv(pd.DataFrame(self.detector_rows, columns=DETECTOR_COLUMNS), self.detector_path)
        if self.combined_path is not None:
            self._write_csv(pd.DataFrame(self.combined_rows, columns=COMBINED_COLUMNS), self.combined_path)

    @staticmethod
    def _write_csv(df: pd.DataFrame, path: Path):
        path.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(path, index=False)


def summaries_to_dataframe(summaries: List[AggregateSummary]) -> pd.DataFrame:
    """All summary fields as a DataFrame, one row per configuration pair"""
    return pd.DataFrame([s.to_dict() for s in summaries])


def plot_summary(summaries: List[AggregateSummary], filepath: Union[str, Path]) -> Optional[Path]:
    """
    Bar charts of average keypoints and timings per configuration pair

    Args:
        summaries: Finalized summaries
        filepath: Output image path

    Returns:
        Path of the saved figure, or None if there was nothing to plot
    """
    if not summaries:
        logger.warning("No summaries to plot")
        return None

    df = summaries_to_dataframe(summaries)
    labels = [f"{d}+{s}" for d, s in zip(df['detector_type'], df['descriptor_type'])]

    fig, (ax1, ax2) = plt.subplots(2, 1, figsize=(max(8, 0.6 * len(labels)), 10))

    ax1.bar(labels, df['avg_keypoints_detected'], label='detected', alpha=0.7)
    ax1.bar(labels, df['avg_keypoints_described'], label='described', alpha=0.7)
    ax1.set_title('Average Keypoints per Frame', fontsize=14, fontweight='bold')
    ax1.set_ylabel('Keypoints')
    ax1.tick_params(axis='x', rotation=90)
    ax1.legend(loc='upper right')

    ax2.bar(labels, df['avg_total_time_ms'], label='detection + description', alpha=0.7)
    ax2.bar(labels, df['avg_detector_time_ms'], label='detection', alpha=0.7)
    ax2.set_title('Average Time per Frame', fontsize=14, fontweight='bold')
    ax2.set_ylabel('Time (ms)')
    ax2.tick_params(axis='x', rotation=90)
    ax2.legend(loc='upper right')

    fig.tight_layout()

    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(filepath, dpi=150, bbox_inches='tight')
    plt.close(fig)

    logger.info(f"Plot saved as: {filepath}")
    return filepath

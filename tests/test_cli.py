import logging
import os

import pandas as pd

from FeatureBenchmark import BenchmarkConfig, BenchmarkPipeline, save_config
from FeatureBenchmark.cli import build_parser, config_from_args, main


def write_config(image_dir, tmp_path, **overrides):
    config = BenchmarkConfig(
        image_base_path=str(image_dir) + os.sep,
        image_prefix="img_",
        detector_types=['FAST'],
        descriptor_types=['BRISK'],
        detector_report_path=str(tmp_path / 'task7.csv'),
        descriptor_report_path=str(tmp_path / 'task8_task9.csv'),
    )
    for key, value in overrides.items():
        setattr(config, key, value)
    path = tmp_path / 'config.json'
    save_config(config, str(path))
    return str(path)


def test_command_line_overrides():
    args = build_parser().parse_args([
        '--preset', 'quick', '--detectors', 'ORB', 'SIFT', '--matcher', 'MAT_FLANN',
        '--limit-keypoints', '25', '--log-level', 'WARNING'
    ])
    config = config_from_args(args)
    assert config.detector_types == ['ORB', 'SIFT']
    assert config.descriptor_types == ['BRISK']
    assert config.matcher_type == 'MAT_FLANN'
    assert config.limit_keypoints is True
    assert config.max_keypoints == 25
    assert config.log_level == 'WARNING'


def test_main_writes_reports(image_dir, tmp_path):
    config_path = write_config(image_dir, tmp_path)
    plot_path = tmp_path / 'plot.png'

    assert main(['--config', config_path, '--plot', str(plot_path), '--log-level', 'WARNING']) == 0

    assert len(pd.read_csv(tmp_path / 'task7.csv')) == 1
    assert len(pd.read_csv(tmp_path / 'task8_task9.csv')) == 1
    assert plot_path.exists()


def test_main_missing_images(tmp_path):
    config_path = write_config(tmp_path / 'nowhere', tmp_path)
    assert main(['--config', config_path, '--log-level', 'ERROR']) == 1


def test_main_bad_detector(image_dir, tmp_path):
    config_path = write_config(image_dir, tmp_path)
    assert main(['--config', config_path, '--detectors', 'SURF', '--log-level', 'ERROR']) == 2


def test_main_print_config_exits_without_running(caplog):
    caplog.set_level(logging.INFO, logger='FeatureBenchmark')
    assert main(['--preset', 'quick', '--detectors', 'ORB', '--print-config', '--log-level', 'INFO']) == 0
    assert 'Resolved configuration' in caplog.text
    assert "detector_types: ['ORB']" in caplog.text
    assert 'Benchmark finished' not in caplog.text


def test_main_run_failure_is_not_a_config_error(image_dir, tmp_path, monkeypatch):
    def failing_run(self):
        raise ValueError("matcher exploded")

    monkeypatch.setattr(BenchmarkPipeline, 'run', failing_run)
    config_path = write_config(image_dir, tmp_path)
    assert main(['--config', config_path, '--log-level', 'ERROR']) == 1

import numpy as np
import pytest

from FeatureBenchmark import (
    DescriptorNorm,
    DescriptorType,
    ProcessingError,
    UnsupportedDescriptorError,
    create_extractor,
    describe_keypoints,
    descriptor_norm_for,
    detect_keypoints,
)
from FeatureBenchmark.descriptors import DESCRIPTOR_SPECS


@pytest.mark.parametrize("detector_type,descriptor_type", [
    ('FAST', 'BRISK'),
    ('FAST', 'BRIEF'),
    ('FAST', 'ORB'),
    ('FAST', 'FREAK'),
    ('FAST', 'SIFT'),
    ('SHITOMASI', 'BRISK'),
    ('AKAZE', 'AKAZE'),
    ('SIFT', 'SIFT'),
])
def test_one_descriptor_row_per_described_keypoint(small_image, detector_type, descriptor_type):
    keypoints, _ = detect_keypoints(small_image, detector_type)
    described, descriptors, elapsed_ms = describe_keypoints(keypoints, small_image, descriptor_type)

    spec = DESCRIPTOR_SPECS[DescriptorType.from_name(descriptor_type)]
    assert 0 < len(described) <= len(keypoints)
    assert descriptors.shape == (len(described), spec.width)
    assert descriptors.dtype == spec.dtype
    assert elapsed_ms >= 0.0


def test_empty_keypoints_give_empty_descriptors(small_image):
    described, descriptors, _ = describe_keypoints([], small_image, 'BRISK')
    assert described == []
    assert descriptors.shape == (0, 64)


def test_brief_width_follows_byte_count(small_image):
    keypoints, _ = detect_keypoints(small_image, 'FAST')
    extractor = create_extractor('BRIEF', num_bytes=16)
    described, descriptors = extractor.compute(small_image, keypoints)
    assert descriptors.shape == (len(described), 16)


def test_unsupported_descriptor():
    with pytest.raises(UnsupportedDescriptorError):
        create_extractor('SURF')
    with pytest.raises(ValueError):
        describe_keypoints([], np.zeros((10, 10), dtype=np.uint8), 'LATCH')


def test_descriptor_norms():
    assert descriptor_norm_for('SIFT') is DescriptorNorm.HOG
    for name in ('BRISK', 'BRIEF', 'ORB', 'FREAK', 'AKAZE'):
        assert descriptor_norm_for(name) is DescriptorNorm.BINARY


@pytest.mark.parametrize("descriptor_type", list(DescriptorType))
def test_every_extractor_constructs_on_installed_opencv(descriptor_type):
    assert create_extractor(descriptor_type) is not None


def test_misspelled_parameter_is_processing_error(small_image):
    keypoints, _ = detect_keypoints(small_image, 'FAST')
    with pytest.raises(ProcessingError) as exc_info:
        describe_keypoints(keypoints, small_image, 'BRIEF', bytes=32)
    assert exc_info.value.stage == 'description'

import json

import pytest

from FeatureBenchmark import (
    DescriptorType,
    DetectorType,
    IncompatiblePairingError,
    PairingCompatibilityManager,
)


@pytest.fixture
def manager():
    return PairingCompatibilityManager()


def test_sift_keypoints_cannot_use_orb(manager):
    assert not manager.is_compatible('SIFT', 'ORB')
    assert manager.get_incompatibility_reason(DetectorType.SIFT, DescriptorType.ORB)


def test_akaze_descriptor_needs_akaze_keypoints(manager):
    assert manager.is_compatible('AKAZE', 'AKAZE')
    assert not manager.is_compatible('FAST', 'AKAZE')


@pytest.mark.parametrize("detector", ['SHITOMASI', 'HARRIS', 'FAST', 'BRISK', 'ORB', 'AKAZE', 'SIFT'])
def test_binary_descriptors_accept_most_detectors(manager, detector):
    assert manager.is_compatible(detector, 'BRISK')
    assert manager.is_compatible(detector, 'BRIEF')
    assert manager.is_compatible(detector, 'FREAK')


def test_check_pairing_raises(manager):
    with pytest.raises(IncompatiblePairingError) as exc_info:
        manager.check_pairing('sift', 'orb')
    assert exc_info.value.detector_type == 'SIFT'
    assert exc_info.value.descriptor_type == 'ORB'
    manager.check_pairing('FAST', 'BRISK')


def test_find_incompatible(manager):
    found = manager.find_incompatible(['FAST', 'SIFT'], ['ORB', 'BRISK'])
    assert [(d, s) for d, s, _ in found] == [('SIFT', 'ORB')]


def test_custom_rules(tmp_path):
    path = tmp_path / 'rules.json'
    path.write_text(json.dumps({
        'version': 'test',
        'incompatible_pairings': [{'detector': 'FAST', 'descriptor': 'FREAK', 'reason': 'test rule'}]
    }))
    manager = PairingCompatibilityManager(str(path))
    assert manager.get_incompatibility_reason('FAST', 'FREAK') == 'test rule'
    assert manager.is_compatible('SIFT', 'ORB')


def test_missing_rules_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        PairingCompatibilityManager(str(tmp_path / 'none.json'))

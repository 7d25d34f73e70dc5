import json

import pytest

from FeatureBenchmark import (
    BenchmarkConfig,
    DetectorType,
    DescriptorType,
    MatcherType,
    PairingCompatibilityManager,
    UnsupportedDescriptorError,
    UnsupportedDetectorError,
    UnsupportedMatcherError,
    check_config,
    create_config_from_preset,
    get_available_presets,
    load_config,
    save_config,
    validate_config,
)
from FeatureBenchmark.config import merge_configs


def test_presets_are_valid():
    for preset in get_available_presets():
        config = create_config_from_preset(preset)
        assert validate_config(config)['errors'] == []


def test_preset_overrides():
    config = create_config_from_preset('quick', image_base_path='/data/', max_keypoints=20)
    assert config.detector_types == ['FAST']
    assert config.image_base_path == '/data/'
    assert config.max_keypoints == 20


def test_unknown_preset():
    with pytest.raises(ValueError, match="Unknown preset"):
        create_config_from_preset('turbo')


def test_unknown_config_key():
    with pytest.raises(ValueError, match="Unknown configuration keys"):
        BenchmarkConfig.from_dict({'detectors': ['FAST']})


def test_config_pairs_are_detector_major():
    config = BenchmarkConfig(detector_types=['FAST', 'ORB'], descriptor_types=['BRISK', 'BRIEF', 'ORB'])
    pairs = config.config_pairs()
    assert [p.name for p in pairs] == [
        'FAST+BRISK', 'FAST+BRIEF', 'FAST+ORB', 'ORB+BRISK', 'ORB+BRIEF', 'ORB+ORB'
    ]
    assert pairs[0].detector_type is DetectorType.FAST
    assert pairs[0].descriptor_type is DescriptorType.BRISK


def test_params_lookup():
    config = BenchmarkConfig(detector_params={'FAST': {'threshold': 20}})
    assert config.params_for_detector(DetectorType.FAST) == {'threshold': 20}
    assert config.params_for_detector(DetectorType.ORB) == {}
    assert config.params_for_descriptor(DescriptorType.BRISK) == {}


def test_validate_reports_errors():
    config = BenchmarkConfig(detector_types=['FAST', 'SURF'], ratio_threshold=1.5,
                             image_start_index=5, image_end_index=2, normalize_by='median')
    errors = validate_config(config)['errors']
    assert any('SURF' in e for e in errors)
    assert any('ratio_threshold' in e for e in errors)
    assert any('image_end_index' in e for e in errors)
    assert any('normalize_by' in e for e in errors)


def test_validate_warns_about_incompatible_pairs():
    config = BenchmarkConfig(detector_types=['SIFT'], descriptor_types=['ORB', 'BRISK'])
    result = validate_config(config)
    assert result['errors'] == []
    assert any('SIFT + ORB' in w for w in result['warnings'])


def test_validate_warns_about_hamming_on_sift():
    config = BenchmarkConfig(detector_types=['SIFT'], descriptor_types=['SIFT'], descriptor_norm='DES_BINARY')
    assert any('floating point' in w for w in validate_config(config)['warnings'])


def test_check_config_raises_typed_errors():
    with pytest.raises(UnsupportedDetectorError):
        check_config(BenchmarkConfig(detector_types=['SURF']))
    with pytest.raises(UnsupportedDescriptorError):
        check_config(BenchmarkConfig(descriptor_types=['LATCH']))
    with pytest.raises(UnsupportedMatcherError):
        check_config(BenchmarkConfig(matcher_type='MAT_KD'))
    with pytest.raises(ValueError):
        check_config(BenchmarkConfig(buffer_size=0))


def test_matcher_type_may_be_an_enum():
    config = BenchmarkConfig(detector_types=['SIFT'], descriptor_types=['SIFT'],
                             matcher_type=MatcherType.BRUTE_FORCE, descriptor_norm='DES_BINARY')
    result = validate_config(config)
    assert result['errors'] == []
    assert any('floating point' in w for w in result['warnings'])


def test_unknown_matcher_skips_hamming_check():
    config = BenchmarkConfig(detector_types=['SIFT'], descriptor_types=['SIFT'],
                             matcher_type='MAT_KD', descriptor_norm='DES_BINARY')
    result = validate_config(config)
    assert any('MAT_KD' in e for e in result['errors'])
    assert not any('floating point' in w for w in result['warnings'])


def test_validate_uses_given_compatibility_rules(tmp_path):
    path = tmp_path / 'rules.json'
    path.write_text(json.dumps({
        'version': 'test',
        'incompatible_pairings': [{'detector': 'FAST', 'descriptor': 'FREAK', 'reason': 'test rule'}]
    }))
    config = BenchmarkConfig(detector_types=['FAST'], descriptor_types=['FREAK'])

    assert validate_config(config)['warnings'] == []
    warnings = validate_config(config, PairingCompatibilityManager(str(path)))['warnings']
    assert warnings == ['FAST + FREAK will be skipped: test rule']


def test_unknown_log_level():
    errors = validate_config(BenchmarkConfig(log_level='VERBOSE'))['errors']
    assert any('VERBOSE' in e for e in errors)
    with pytest.raises(ValueError):
        check_config(BenchmarkConfig(log_level='VERBOSE'))


def test_merge_configs_is_recursive():
    merged = merge_configs({'detector_params': {'FAST': {'threshold': 30}}},
                           {'detector_params': {'ORB': {'max_features': 100}}})
    assert merged == {'detector_params': {'FAST': {'threshold': 30}, 'ORB': {'max_features': 100}}}


def test_save_and_load(tmp_path):
    config = create_config_from_preset('flann', roi=(1, 2, 3, 4))
    filepath = tmp_path / 'config.json'
    save_config(config, str(filepath))

    with open(filepath) as f:
        assert json.load(f)['matcher_type'] == 'MAT_FLANN'

    loaded = load_config(str(filepath))
    assert loaded == config
    assert loaded.roi == (1, 2, 3, 4)


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / 'missing.json'))

import cv2
import pytest

from FeatureBenchmark import RegionOfInterest, VEHICLE_ROI, filter_keypoints


def keypoint(x, y):
    return cv2.KeyPoint(x=float(x), y=float(y), size=7.0)


def test_vehicle_region():
    assert VEHICLE_ROI.as_tuple() == (535, 180, 180, 150)


def test_contains_uses_half_open_bounds():
    roi = RegionOfInterest(10, 20, 30, 40)
    assert roi.contains((10, 20))
    assert roi.contains((39.9, 59.9))
    assert not roi.contains((40, 30))
    assert not roi.contains((15, 60))
    assert not roi.contains((9.99, 30))


def test_filter_keeps_inside_points_in_order():
    keypoints = [keypoint(600, 200), keypoint(10, 10), keypoint(700, 300), keypoint(535, 180)]
    kept = filter_keypoints(keypoints, VEHICLE_ROI)
    assert [kp.pt for kp in kept] == [(600, 200), (700, 300), (535, 180)]


def test_filter_is_idempotent():
    keypoints = [keypoint(x, y) for x in range(500, 760, 20) for y in range(150, 360, 20)]
    once = filter_keypoints(keypoints)
    twice = filter_keypoints(once)
    assert [kp.pt for kp in once] == [kp.pt for kp in twice]
    assert all(VEHICLE_ROI.contains(kp.pt) for kp in once)


def test_filter_empty_input():
    assert filter_keypoints([]) == []


def test_from_tuple_requires_four_values():
    assert RegionOfInterest.from_tuple([1, 2, 3, 4]) == RegionOfInterest(1, 2, 3, 4)
    with pytest.raises(ValueError):
        RegionOfInterest.from_tuple((1, 2, 3))

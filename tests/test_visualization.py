import cv2

from FeatureBenchmark import Frame, detect_keypoints
from FeatureBenchmark.visualization import render_keypoints, render_matches


def test_render_keypoints_gives_color_copy(small_image):
    keypoints, _ = detect_keypoints(small_image, 'FAST')
    rendered = render_keypoints(small_image, keypoints)

    assert rendered.shape == small_image.shape + (3,)
    assert rendered.dtype == small_image.dtype
    # input stays grayscale and untouched
    assert small_image.ndim == 2


def test_render_keypoints_without_keypoints(small_image):
    assert render_keypoints(small_image, []).shape == (200, 320, 3)


def test_render_matches_places_frames_side_by_side(small_image):
    keypoints, _ = detect_keypoints(small_image, 'FAST')
    source = Frame(small_image, index=0, keypoints=keypoints)
    reference_image = small_image[:150, :300].copy()
    reference = Frame(reference_image, index=1, keypoints=detect_keypoints(reference_image, 'FAST')[0])
    count = min(5, len(source), len(reference))
    matches = [cv2.DMatch(i, i, 0.0) for i in range(count)]

    rendered = render_matches(source, reference, matches)

    assert count > 0
    assert rendered.shape == (200, 320 + 300, 3)

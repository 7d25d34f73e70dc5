"""
Optional on-screen visualization of keypoints and matches.

The show_* functions open a window, block until a key is pressed and close
the window again before returning. They need a display; render_* functions
only compose images and work headless.
"""

import cv2
import numpy as np
from typing import List

from .core_data_structures import Frame
from .logger import get_logger

logger = get_logger("visualization")


def render_keypoints(image: np.ndarray, keypoints: List[cv2.KeyPoint]) -> np.ndarray:
    """Draw rich keypoints (size and orientation) onto a copy of the image"""
    return cv2.drawKeypoints(
        image, keypoints, None,
        color=(-1, -1, -1, -1),
        flags=cv2.DRAW_MATCHES_FLAGS_DRAW_RICH_KEYPOINTS
    )


def render_matches(source: Frame, reference: Frame, matches: List[cv2.DMatch]) -> np.ndarray:
    """Side-by-side image of two frames with their matches"""
    return cv2.drawMatches(
        source.image, source.keypoints,
        reference.image, reference.keypoints,
        matches, None,
        matchColor=(-1, -1, -1, -1),
        singlePointColor=(-1, -1, -1, -1),
        flags=cv2.DRAW_MATCHES_FLAGS_DRAW_RICH_KEYPOINTS
    )


def _show_and_wait(window_name: str, image: np.ndarray):
    cv2.namedWindow(window_name, cv2.WINDOW_NORMAL)
    try:
        cv2.imshow(window_name, image)
        cv2.waitKey(0)
    finally:
        cv2.destroyWindow(window_name)


def show_keypoints(image: np.ndarray, keypoints: List[cv2.KeyPoint], detector_name: str):
    """Show detector results and wait for a key press"""
    _show_and_wait(f"{detector_name} Detector Results", render_keypoints(image, keypoints))


def show_matches(source: Frame, reference: Frame, matches: List[cv2.DMatch]):
    """Show matches between two frames and wait for a key press"""
    logger.info("Press key to continue to next image")
    _show_and_wait("Matching keypoints between two camera images",
                   render_matches(source, reference, matches))

"""
Descriptor matching between consecutive frames.

Supports brute-force and FLANN matchers combined with either nearest-neighbor
selection or k-nearest-neighbor selection with a distance ratio test.
"""

import cv2
import numpy as np
import time
from typing import List, Optional, Tuple, Union

from .core_data_structures import DescriptorNorm, MatcherType, SelectorType
from .exceptions import ProcessingError
from .logger import get_logger

logger = get_logger("matching")

DEFAULT_RATIO_THRESHOLD = 0.8

FLANN_INDEX_KDTREE = 1


def create_matcher(matcher_type: Union[str, MatcherType],
                   descriptor_norm: Union[str, DescriptorNorm] = DescriptorNorm.BINARY,
                   cross_check: bool = False,
                   trees: int = 5,
                   checks: int = 50) -> cv2.DescriptorMatcher:
    """
    Create an OpenCV descriptor matcher

    Args:
        matcher_type: 'MAT_BF' or 'MAT_FLANN'
        descriptor_norm: 'DES_BINARY' (Hamming) or 'DES_HOG' (L2), used by brute force
        cross_check: Brute-force cross check
        trees: Number of KD-trees for FLANN
        checks: Number of FLANN search checks

    Returns:
        cv2.DescriptorMatcher instance
    """
    matcher_type = MatcherType.from_name(matcher_type)
    descriptor_norm = DescriptorNorm.from_name(descriptor_norm)

    if matcher_type == MatcherType.BRUTE_FORCE:
        norm_type = cv2.NORM_L2 if descriptor_norm == DescriptorNorm.HOG else cv2.NORM_HAMMING
        return cv2.BFMatcher(norm_type, crossCheck=cross_check)

    index_params = dict(algorithm=FLANN_INDEX_KDTREE, trees=trees)
    search_params = dict(checks=checks)
    return cv2.FlannBasedMatcher(index_params, search_params)


def _is_empty(descriptors: Optional[np.ndarray]) -> bool:
    return descriptors is None or descriptors.size == 0 or len(descriptors) == 0


def select_ratio_matches(knn_matches, ratio_threshold: float = DEFAULT_RATIO_THRESHOLD) -> List[cv2.DMatch]:
    """
    Lowe's ratio test on k=2 candidate lists

    Args:
        knn_matches: Candidate lists from knnMatch, best candidate first
        ratio_threshold: Best distance must be strictly below ratio * second best

    Returns:
        Accepted best matches
    """
    good_matches = []
    for match_pair in knn_matches:
        if len(match_pair) < 2:
            continue
        best, second = match_pair[0], match_pair[1]
        if best.distance < ratio_threshold * second.distance:
            good_matches.append(best)
    return good_matches


def match_descriptors(src_keypoints: List[cv2.KeyPoint],
                      ref_keypoints: List[cv2.KeyPoint],
                      src_descriptors: Optional[np.ndarray],
                      ref_descriptors: Optional[np.ndarray],
                      descriptor_norm: Union[str, DescriptorNorm] = DescriptorNorm.BINARY,
                      matcher_type: Union[str, MatcherType] = MatcherType.BRUTE_FORCE,
                      selector_type: Union[str, SelectorType] = SelectorType.KNN,
                      ratio_threshold: float = DEFAULT_RATIO_THRESHOLD) -> Tuple[List[cv2.DMatch], float]:
    """
    Find best matches between two descriptor sets

    queryIdx of each match indexes src_descriptors / src_keypoints, trainIdx
    indexes ref_descriptors / ref_keypoints.

    Args:
        src_keypoints: Keypoints of the source (previous) frame
        ref_keypoints: Keypoints of the reference (current) frame
        src_descriptors: Source descriptor matrix
        ref_descriptors: Reference descriptor matrix
        descriptor_norm: 'DES_BINARY' or 'DES_HOG'
        matcher_type: 'MAT_BF' or 'MAT_FLANN'
        selector_type: 'SEL_NN' or 'SEL_KNN'
        ratio_threshold: Distance ratio for 'SEL_KNN'

    Returns:
        Tuple of (matches, elapsed_ms)

    Raises:
        UnsupportedMatcherError: Unknown norm, matcher or selector string
        ProcessingError: OpenCV failed inside matching
    """
    matcher_type = MatcherType.from_name(matcher_type)
    selector_type = SelectorType.from_name(selector_type)
    descriptor_norm = DescriptorNorm.from_name(descriptor_norm)

    start_time = time.time()

    if _is_empty(src_descriptors) or _is_empty(ref_descriptors):
        logger.info(f"Match Type: {matcher_type.value}, no descriptors to match")
        return [], 0.0

    if len(src_keypoints) != len(src_descriptors) or len(ref_keypoints) != len(ref_descriptors):
        raise ValueError(
            f"Descriptor rows do not match keypoints: "
            f"{len(src_descriptors)}/{len(src_keypoints)} and {len(ref_descriptors)}/{len(ref_keypoints)}"
        )

    if matcher_type == MatcherType.FLANN:
        # FLANN's KD-tree index only works on float32
        if src_descriptors.dtype != np.float32:
            src_descriptors = src_descriptors.astype(np.float32)
        if ref_descriptors.dtype != np.float32:
            ref_descriptors = ref_descriptors.astype(np.float32)

    matcher = create_matcher(matcher_type, descriptor_norm)

    try:
        if selector_type == SelectorType.NEAREST_NEIGHBOR:
            matches = list(matcher.match(src_descriptors, ref_descriptors))
        elif len(ref_descriptors) < 2:
            # No source row can have two candidates
            matches = []
        else:
            knn_matches = matcher.knnMatch(src_descriptors, ref_descriptors, k=2)
            matches = select_ratio_matches(knn_matches, ratio_threshold)
    except cv2.error as e:
        raise ProcessingError("matching", matcher_type.value, e) from e

    elapsed_ms = (time.time() - start_time) * 1000.0

    logger.info(
        f"Match Type: {matcher_type.value}, Descriptor Type: {descriptor_norm.value}, "
        f"Selector Type: {selector_type.value} {len(matches)} matches in {elapsed_ms:.2f} ms"
    )
    return matches, elapsed_ms

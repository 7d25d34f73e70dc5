"""
Region-of-interest filtering for detected keypoints.
"""

import cv2
from dataclasses import dataclass
from typing import List, Tuple, Sequence


@dataclass(frozen=True)
class RegionOfInterest:
    """Axis-aligned rectangle in pixel coordinates (x, y, width, height)"""
    x: int
    y: int
    width: int
    height: int

    @classmethod
    def from_tuple(cls, rect: Sequence[int]) -> 'RegionOfInterest':
        if len(rect) != 4:
            raise ValueError(f"Region must be (x, y, width, height), got {rect}")
        return cls(*(int(v) for v in rect))

    def contains(self, point: Tuple[float, float]) -> bool:
        # Same convention as cv::Rect::contains: top/left edges in, bottom/right out
        px, py = point
        return (self.x <= px < self.x + self.width and
                self.y <= py < self.y + self.height)

    def as_tuple(self) -> Tuple[int, int, int, int]:
        return (self.x, self.y, self.width, self.height)


# Preceding vehicle in the KITTI left camera frames
VEHICLE_ROI = RegionOfInterest(535, 180, 180, 150)


def filter_keypoints(keypoints: List[cv2.KeyPoint],
                     roi: RegionOfInterest = VEHICLE_ROI) -> List[cv2.KeyPoint]:
    """
    Keep only keypoints located inside a region of interest

    Args:
        keypoints: Detected keypoints
        roi: Rectangle to keep

    Returns:
        New list with the keypoints inside roi, in their original order
    """
    return [kp for kp in keypoints if roi.contains(kp.pt)]

"""
Ring buffer holding the most recent frames of a sequence.
"""

from typing import Iterator, List, Optional, Dict, Any

from .core_data_structures import Frame
from .exceptions import EmptyBufferError


class FrameBuffer:
    """
    Bounded FIFO of frames backed by a circular array

    Pushing onto a full buffer overwrites the oldest slot, so eviction is O(1)
    and recency order is kept through the head index.

    Example:
        >>> buffer = FrameBuffer(capacity=2)
        >>> buffer.push(frame_a)
        >>> buffer.push(frame_b)
        >>> buffer.push(frame_c)      # evicts frame_a
        >>> buffer.second_last() is frame_b
        True
    """

    def __init__(self, capacity: int = 2):
        """
        Initialize buffer

        Args:
            capacity: Maximum number of resident frames
        """
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._slots: List[Optional[Frame]] = [None] * capacity
        self._head = 0   # slot of the oldest frame
        self._size = 0

    def push(self, frame: Frame) -> Optional[Frame]:
        """
        Append a frame, evicting the oldest one when full

        Returns:
            The evicted frame, or None if nothing was evicted
        """
        if self._size < self.capacity:
            self._slots[(self._head + self._size) % self.capacity] = frame
            self._size += 1
            return None

        evicted = self._slots[self._head]
        self._slots[self._head] = frame
        self._head = (self._head + 1) % self.capacity
        return evicted

    def last(self) -> Frame:
        """Most recently pushed frame"""
        return self._from_end(1)

    def second_last(self) -> Frame:
        """Frame pushed just before the most recent one"""
        return self._from_end(2)

    def _from_end(self, offset: int) -> Frame:
        if self._size < offset:
            raise EmptyBufferError(
                f"Need {offset} resident frame(s), buffer holds {self._size}"
            )
        return self._slots[(self._head + self._size - offset) % self.capacity]

    def size(self) -> int:
        return self._size

    def is_full(self) -> bool:
        return self._size == self.capacity

    def clear(self):
        self._slots = [None] * self.capacity
        self._head = 0
        self._size = 0

    def get_stats(self) -> Dict[str, Any]:
        """Get buffer statistics"""
        return {
            'num_frames': self._size,
            'capacity': self.capacity,
            'frame_indices': [frame.index for frame in self]
        }

    def __iter__(self) -> Iterator[Frame]:
        # oldest to newest
        for i in range(self._size):
            yield self._slots[(self._head + i) % self.capacity]

    def __len__(self):
        return self._size

    def __repr__(self):
        return f"FrameBuffer({self._size}/{self.capacity} frames)"

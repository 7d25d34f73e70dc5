import numpy as np
import pytest

from FeatureBenchmark import EmptyBufferError, Frame, FrameBuffer


def make_frame(index):
    return Frame(image=np.zeros((4, 4), dtype=np.uint8), index=index)


def test_push_within_capacity_evicts_nothing():
    buffer = FrameBuffer(capacity=2)
    assert buffer.push(make_frame(0)) is None
    assert buffer.push(make_frame(1)) is None
    assert buffer.size() == 2
    assert buffer.is_full()


def test_push_on_full_buffer_evicts_oldest():
    buffer = FrameBuffer(capacity=2)
    frames = [make_frame(i) for i in range(3)]
    buffer.push(frames[0])
    buffer.push(frames[1])

    evicted = buffer.push(frames[2])

    assert evicted is frames[0]
    assert buffer.size() == 2
    assert buffer.last() is frames[2]
    assert buffer.second_last() is frames[1]


def test_size_never_exceeds_capacity():
    buffer = FrameBuffer(capacity=3)
    for i in range(10):
        buffer.push(make_frame(i))
        assert buffer.size() == min(i + 1, 3)
    assert [frame.index for frame in buffer] == [7, 8, 9]


def test_access_on_empty_buffer_raises():
    buffer = FrameBuffer()
    with pytest.raises(EmptyBufferError):
        buffer.last()
    with pytest.raises(EmptyBufferError):
        buffer.second_last()


def test_second_last_needs_two_frames():
    buffer = FrameBuffer()
    frame = make_frame(0)
    buffer.push(frame)
    assert buffer.last() is frame
    with pytest.raises(EmptyBufferError):
        buffer.second_last()


def test_empty_buffer_error_is_index_error():
    with pytest.raises(IndexError):
        FrameBuffer().last()


def test_capacity_must_be_positive():
    with pytest.raises(ValueError):
        FrameBuffer(capacity=0)


def test_clear_and_stats():
    buffer = FrameBuffer(capacity=2)
    buffer.push(make_frame(4))
    buffer.push(make_frame(5))
    assert buffer.get_stats() == {'num_frames': 2, 'capacity': 2, 'frame_indices': [4, 5]}

    buffer.clear()
    assert len(buffer) == 0
    with pytest.raises(EmptyBufferError):
        buffer.last()

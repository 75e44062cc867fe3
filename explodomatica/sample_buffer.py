"""
Sample buffer - the mono audio container every stage works on.

A buffer owns a float64 array (its capacity) plus a logical length.
Operations that shrink content only lower the logical length, they never
reallocate. Replacing a buffer's content with a derived buffer is an
explicit ownership transfer through ``SampleBuffer.adopt``.
"""

import logging
from typing import Optional

import numpy as np

logger = logging.getLogger(__name__)


class AllocationError(MemoryError):
    """Raised when storage for a buffer cannot be allocated."""
    pass


class BufferReleasedError(RuntimeError):
    """Raised when a released buffer is used."""
    pass


class SampleBuffer:
    """
    Mono sample storage with a logical length.

    Attributes:
        data: Allocated storage (capacity samples)
        nsamples: Number of meaningful samples, always <= capacity
    """

    def __init__(self, data: np.ndarray, nsamples: int = 0):
        self._data: Optional[np.ndarray] = data
        self._nsamples = 0
        self.nsamples = nsamples

    def _storage(self) -> np.ndarray:
        if self._data is None:
            raise BufferReleasedError("Buffer has been released")
        return self._data

    @property
    def data(self) -> np.ndarray:
        """Full allocated storage."""
        return self._storage()

    @property
    def capacity(self) -> int:
        return len(self._storage())

    @property
    def nsamples(self) -> int:
        return self._nsamples

    @nsamples.setter
    def nsamples(self, value: int) -> None:
        capacity = self.capacity
        if value < 0 or value > capacity:
            raise ValueError(
                f"Logical length {value} outside allocated capacity {capacity}"
            )
        self._nsamples = int(value)

    @property
    def samples(self) -> np.ndarray:
        """View of the meaningful samples, ``data[:nsamples]``."""
        return self._storage()[:self._nsamples]

    @property
    def released(self) -> bool:
        return self._data is None

    def adopt(self, other: "SampleBuffer") -> None:
        """
        Take over another buffer's storage.

        The old storage of this buffer is dropped and ``other`` is
        released, so each sample has exactly one owner afterwards.
        """
        if other is self:
            return
        storage = other._storage()
        nsamples = other.nsamples
        release(other)
        self._data = storage
        self._nsamples = nsamples

    def __len__(self) -> int:
        return self._nsamples

    def __repr__(self) -> str:
        if self.released:
            return "SampleBuffer(released)"
        return f"SampleBuffer(nsamples={self._nsamples}, capacity={self.capacity})"


def allocate(capacity: int) -> SampleBuffer:
    """
    Allocate zero-filled storage for ``capacity`` samples.

    The logical length starts at 0.

    Raises:
        AllocationError: If the storage cannot be allocated
    """
    if capacity < 0:
        raise AllocationError(f"Cannot allocate a negative capacity ({capacity})")
    try:
        data = np.zeros(int(capacity), dtype=np.float64)
    except MemoryError as e:
        logger.error("Failed to allocate %d samples", capacity)
        raise AllocationError(f"Cannot allocate buffer of {capacity} samples") from e
    return SampleBuffer(data, 0)


def from_array(samples: np.ndarray) -> SampleBuffer:
    """Build a buffer owning a float64 copy of ``samples``."""
    buffer = allocate(len(samples))
    buffer.data[:] = samples
    buffer.nsamples = len(samples)
    return buffer


def copy_buffer(buffer: SampleBuffer) -> SampleBuffer:
    """Return an independent copy of the buffer's logical content."""
    return from_array(buffer.samples)


def release(buffer: SampleBuffer) -> None:
    """Drop a buffer's storage. The buffer must not be used afterwards."""
    buffer._data = None
    buffer._nsamples = 0

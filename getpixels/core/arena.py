"""Arena allocator and TensorRef for per-call pixel buffers.

Every decode owns exactly one Arena: a contiguous buffer sized for the
image being decoded. TensorRefs are lightweight handles (offset, shape,
dtype, strides) pointing into the arena, so frame slices and axis
permutations never copy pixel data.

Key Features:
- Single owner: one Arena per pipeline call, dropped when the call ends
- Subrefs: disjoint per-frame views into an animated image's buffer
- Transpose: axis permutation by reordering shape and strides
- Generation counter: detects stale TensorRefs after arena reset

Example:
    >>> arena = Arena(size_bytes=2 * 4 * 4 * 4)
    >>> ref = arena.alloc_tensor((2, 4, 4, 4), np.uint8)
    >>> frame1 = ref.subref((1,))
    >>> arena.view(frame1)[:] = 255
    >>> whc = arena.view(ref.subref((0,)).transpose((1, 0, 2)))
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np

from getpixels.errors import ExhaustedFrameAllocationError


@dataclass(frozen=True)
class TensorRef:
    """Lightweight handle pointing to tensor data in an Arena.

    Attributes:
        offset: Byte offset into arena buffer
        shape: Tensor dimensions
        dtype: NumPy data type
        strides: Byte strides for each dimension
        generation: Arena generation counter (for staleness detection)
    """

    offset: int
    shape: tuple[int, ...]
    dtype: np.dtype[Any]
    strides: tuple[int, ...]
    generation: int

    def __post_init__(self) -> None:
        """Validate TensorRef fields."""
        if self.offset < 0:
            raise ValueError(f"offset must be non-negative, got {self.offset}")
        if len(self.shape) != len(self.strides):
            raise ValueError(
                f"shape and strides must have same length: "
                f"shape={self.shape}, strides={self.strides}"
            )
        if self.generation < 0:
            raise ValueError(f"generation must be non-negative, got {self.generation}")

    @property
    def ndim(self) -> int:
        """Number of dimensions."""
        return len(self.shape)

    @property
    def size(self) -> int:
        """Total number of elements."""
        return int(np.prod(self.shape))

    @property
    def nbytes(self) -> int:
        """Span in bytes from the first to the last element."""
        if self.size == 0:
            return 0
        last_offset = sum((s - 1) * st for s, st in zip(self.shape, self.strides))
        return last_offset + self.dtype.itemsize

    @property
    def is_contiguous(self) -> bool:
        """True when the strides describe a C-contiguous layout."""
        expected = self.dtype.itemsize
        for dim_size, stride in zip(reversed(self.shape), reversed(self.strides)):
            if dim_size != 1 and stride != expected:
                return False
            expected *= dim_size
        return True

    def subref(self, slices: tuple[slice | int, ...]) -> TensorRef:
        """Create a view into this TensorRef.

        Args:
            slices: Tuple of slices or integers for indexing

        Returns:
            New TensorRef pointing to the sliced region

        Example:
            >>> # Buffer for a 3-frame animation
            >>> ref = arena.alloc_tensor((3, 64, 64, 4), np.uint8)
            >>> # Slice for the second frame
            >>> frame_ref = ref.subref((1,))
        """
        normalized: list[slice | int] = []
        for s in slices:
            if isinstance(s, (int, slice)):
                normalized.append(s)
            else:
                raise TypeError(f"Invalid slice type: {type(s)}")

        # Pad with full slices if needed
        while len(normalized) < len(self.shape):
            normalized.append(slice(None))

        new_offset = self.offset
        new_shape: list[int] = []
        new_strides: list[int] = []

        for i, (s, size, stride) in enumerate(zip(normalized, self.shape, self.strides)):
            if isinstance(s, int):
                # Integer index: drop this dimension
                if s < 0:
                    s = size + s
                if not (0 <= s < size):
                    raise IndexError(f"Index {s} out of bounds for dimension {i} with size {size}")
                new_offset += s * stride
            else:
                start, stop, step = s.indices(size)
                if step != 1:
                    raise NotImplementedError("Strided slices not supported")
                new_shape.append(stop - start)
                new_strides.append(stride)
                new_offset += start * stride

        return TensorRef(
            offset=new_offset,
            shape=tuple(new_shape),
            dtype=self.dtype,
            strides=tuple(new_strides),
            generation=self.generation,
        )

    def transpose(self, axes: tuple[int, ...]) -> TensorRef:
        """Permute axes without touching the underlying bytes.

        Args:
            axes: Permutation of range(ndim), same meaning as np.transpose

        Returns:
            New TensorRef with reordered shape and strides
        """
        if sorted(axes) != list(range(self.ndim)):
            raise ValueError(f"axes {axes} is not a permutation of {self.ndim} dimensions")
        return TensorRef(
            offset=self.offset,
            shape=tuple(self.shape[a] for a in axes),
            dtype=self.dtype,
            strides=tuple(self.strides[a] for a in axes),
            generation=self.generation,
        )


class Arena:
    """Contiguous memory allocator with bump allocation strategy.

    The Arena manages a pre-allocated bytearray buffer and allocates tensors
    sequentially. All allocations are aligned to dtype requirements.

    Attributes:
        size: Total arena size in bytes
        offset: Current allocation offset (bump pointer)
        generation: Incremented on reset() to invalidate old TensorRefs
    """

    def __init__(self, size_bytes: int):
        """Create arena with specified size.

        Args:
            size_bytes: Total size in bytes

        Raises:
            ValueError: If size_bytes is negative
            ExhaustedFrameAllocationError: If the buffer cannot be allocated
        """
        if size_bytes < 0:
            raise ValueError(f"size_bytes must be non-negative, got {size_bytes}")

        try:
            self._buffer = bytearray(size_bytes)
        except (MemoryError, OverflowError) as exc:
            raise ExhaustedFrameAllocationError(
                f"Cannot allocate {size_bytes} bytes for pixel data"
            ) from exc
        self._size = size_bytes
        self._offset = 0
        self._generation = 0

    @property
    def size(self) -> int:
        """Total arena size in bytes."""
        return self._size

    @property
    def offset(self) -> int:
        """Current allocation offset (bytes used)."""
        return self._offset

    @property
    def generation(self) -> int:
        """Current generation counter."""
        return self._generation

    @property
    def available(self) -> int:
        """Remaining bytes available for allocation."""
        return self._size - self._offset

    def reset(self) -> None:
        """Reset arena for reuse. Invalidates all existing TensorRefs."""
        self._offset = 0
        self._generation += 1

    def alloc_tensor(
        self,
        shape: tuple[int, ...],
        dtype: np.dtype[Any] | type | str,
    ) -> TensorRef:
        """Allocate a C-contiguous tensor in the arena.

        Args:
            shape: Tensor dimensions
            dtype: NumPy data type

        Returns:
            TensorRef handle to the allocated tensor

        Raises:
            ExhaustedFrameAllocationError: If allocation would exceed arena size
        """
        dt = np.dtype(dtype)

        size = int(np.prod(shape))
        nbytes = size * dt.itemsize

        # Align offset to dtype alignment
        alignment = dt.alignment
        aligned_offset = (self._offset + alignment - 1) // alignment * alignment

        end_offset = aligned_offset + nbytes
        if end_offset > self._size:
            raise ExhaustedFrameAllocationError(
                f"Arena out of memory: need {nbytes} bytes at offset {aligned_offset}, "
                f"but arena size is {self._size} (available: {self.available})"
            )

        strides = []
        stride = dt.itemsize
        for dim_size in reversed(shape):
            strides.append(stride)
            stride *= dim_size
        strides.reverse()

        ref = TensorRef(
            offset=aligned_offset,
            shape=tuple(shape),
            dtype=dt,
            strides=tuple(strides),
            generation=self._generation,
        )
        self._offset = end_offset
        return ref

    def view(self, ref: TensorRef) -> np.ndarray:
        """Get a NumPy array view of a TensorRef.

        Args:
            ref: TensorRef to view

        Returns:
            NumPy array backed by arena memory (zero-copy)

        Raises:
            ValueError: If TensorRef is stale or out of bounds
        """
        if ref.generation != self._generation:
            raise ValueError(
                f"Stale TensorRef: arena was reset (current generation {self._generation}, "
                f"ref is from generation {ref.generation})"
            )

        end_offset = ref.offset + ref.nbytes
        if end_offset > self._size:
            raise ValueError(
                f"TensorRef out of bounds: offset={ref.offset}, nbytes={ref.nbytes}, "
                f"arena size={self._size}"
            )

        return np.ndarray(
            shape=ref.shape,
            dtype=ref.dtype,
            buffer=self._buffer,
            offset=ref.offset,
            strides=ref.strides,
        )

    def __repr__(self) -> str:
        return (
            f"Arena(size={self._size}, offset={self._offset}, "
            f"generation={self._generation}, available={self.available})"
        )

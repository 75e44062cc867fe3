"""Buffer composition: sample-wise summation and accumulation."""

from .sample_buffer import SampleBuffer, allocate


def add(a: SampleBuffer, b: SampleBuffer) -> SampleBuffer:
    """
    Sum two buffers sample by sample.

    The result is as long as the longer operand; the shorter one is
    treated as zero past its logical length.
    """
    n = max(a.nsamples, b.nsamples)
    out = allocate(n)
    out.data[:a.nsamples] += a.samples
    out.data[:b.nsamples] += b.samples
    out.nsamples = n
    return out


def accumulate(acc: SampleBuffer, inc: SampleBuffer) -> None:
    """Add ``inc`` into ``acc``; ``acc`` adopts the summed storage."""
    acc.adopt(add(acc, inc))

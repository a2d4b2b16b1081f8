## Split a roadmap duration into per-call day ranges
import math

from roadmapai.agents.schemas import MAX_CHUNK_SIZE, ChunkRange


def plan_chunks(total_days: int, chunk_size: int = MAX_CHUNK_SIZE) -> list[ChunkRange]:
    """Return contiguous, non-overlapping day ranges covering 1..total_days."""
    if total_days <= 0:
        raise ValueError(f"total_days must be positive, got {total_days}")
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")

    return [
        ChunkRange(
            start_day=i * chunk_size + 1,
            end_day=min((i + 1) * chunk_size, total_days),
        )
        for i in range(math.ceil(total_days / chunk_size))
    ]

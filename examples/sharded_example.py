#!/usr/bin/env python3
"""
Sharded distinct counting with hllcount.

Each shard builds its own HyperLogLog from the events it sees, without any
coordination. A single coordinator then merges the shards; elements seen by
more than one shard are counted once.
"""

import random
from hllcount import HyperLogLog, ExactCounter

NUM_SHARDS = 4
EVENTS_PER_SHARD = 50000
PRECISION = 14

def generate_events(shard, size):
    """User ids seen by one shard; ids overlap across shards."""
    rng = random.Random(shard)
    return [f"user_{rng.randint(0, 120000)}" for _ in range(size)]

def main():
    shards = []
    exact = ExactCounter()

    for shard in range(NUM_SHARDS):
        events = generate_events(shard, EVENTS_PER_SHARD)
        sketch = HyperLogLog(precision=PRECISION)
        sketch.add_batch(events)
        exact.add_batch(events)
        shards.append(sketch)
        print(f"Shard {shard}: ~{sketch.estimated_unique_count:.0f} distinct users")

    total = HyperLogLog(precision=PRECISION)
    for sketch in shards:
        total.merge(sketch)

    estimate = total.estimated_unique_count
    true_count = exact.estimate_cardinality()
    error = abs(estimate - true_count) / true_count * 100
    print(f"\nAll shards: ~{estimate:.0f} distinct users (exact {true_count:.0f}, error {error:.2f}%)")
    print(f"Sketch size: {total.nbytes} bytes, expected error ~{total.standard_error() * 100:.2f}%")
    print(f"Overlap between shard 0 and 1 (Jaccard): {shards[0].estimate_jaccard(shards[1]):.3f}")

if __name__ == "__main__":
    main()

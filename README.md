# tinycache

A thread-safe, fixed-size in-memory cache. A TinyLFU admission policy decides
which new keys are let in, and a sampled LFU policy decides what is evicted.
Keys are 64-bit integers. Each entry has a cost, and the costs of all entries
count against the cache's maximum cost.

The package also has the building blocks on their own:

- `tinycache.bloom`: the `Bloom` filter over 64-bit hashes. `Bloom.to_json()`
  exports it and `bloom_from_json()` reads it back.
- `tinycache.sketch`: `CMSketch`, a count-min sketch with 4-bit counters, and
  `next_power_of_two`.
- `tinycache.hashing`: `key_to_hash` turns integers, strings and bytes into a
  `(hash, conflict_hash)` pair. The module also has `xxhash64`, `mem_hash` and
  `mem_hash_string`, plus the `nano_time`, `cpu_ticks` and `fast_rand` helpers.
  `mem_hash` is seeded per process, so do not store its results.
- `tinycache.buffer`: `Buffers` and `Pool` hold reusable byte buffers, with
  sizes rounded up to a page. The module-level functions `assign_pool`,
  `get_buffer` and `put_buffer` use a default pool set with 1024-byte pages.
  Buffers are handed out as `memoryview`s.
- `tinycache.metrics`: `Metrics` counts hits, misses, keys added, updated and
  evicted, costs, and dropped or rejected work. `MetricType` names the kinds
  of counter.
- `tinycache.policy`: `Policy`, `TinyLFU` and `SampledLFU`, the admission and
  eviction logic the cache uses.
- `tinycache.ring` and `tinycache.store`: the batching access buffer and the
  sharded item map.
- `tinycache.sim`: workload generators and trace parsers for measuring hit
  ratios.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Usage

```python
from tinycache.cache import Cache, Config

with Cache(Config(num_counters=1000, max_cost=100, buffer_items=64, metrics=True)) as cache:
    cache.set(1, "one", 1)
    value, found = cache.get(1)

    # The factory returns (value, cost). Concurrent callers for the same key
    # run it only once.
    value = cache.get_or_compute(2, lambda: ("two", 1))

    removed = cache.delete(1)   # the removed value, or None
    print(cache.metrics.ratio())
```

`Config` must have positive values for `num_counters`, `max_cost` and
`buffer_items`. If it does not, `Cache` raises `ValueError`. When `set` or
`get_or_compute` is given a cost of 0, the cost comes from `Config.cost`, if
one is set. `Config.on_evict(key, value)` is called for every item the policy
evicts or rejects.

Admission runs on a background thread, so an entry that the policy rejects can
disappear shortly after it was set. `Cache.clear()` drops all entries and
resets the counters; no other calls may run while it does. `Cache.close()`
stops the background threads. Calling it a second time raises `RuntimeError`.

### Simulating workloads

```python
import io
from tinycache.sim import collection, new_reader, new_zipfian, parse_arc

keys = collection(new_zipfian(1.0001, 1, 1000), 10_000)

trace = new_reader(parse_arc, io.StringIO("127 64 0 0\n"))
first = trace()   # 127
```

A reader raises `SimulatorDone` when its input runs out. `parse_arc` raises
`BadLineError` on a line that does not have four columns. `collection` and
`string_collection` record a failed draw as 0.

## What it does not do

The cache holds everything in memory, in a single process. It does not
persist data, has no command-line tool, and does not serve anything over a
network.
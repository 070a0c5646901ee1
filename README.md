# dstore

A small toolkit for key-value datastores: a query model, query operators
that run in memory over any result stream, and two wrappers that add
locking or retries to a datastore you supply.

## What is in it

- `dstore.query`: `Query`, `Entry`, `Result` and `Results`. `Results` is
  a lazy stream: iterate it to get `Entry` objects, call `next_sync()` to
  get `Result` objects (or `None` at the end), or `rest()` to collect every
  remaining entry. The underlying source is closed at most once, when the
  stream runs out or when `close()` is called; `Results` is also a context
  manager. An error result makes iteration and `rest()` raise
  `QueryError`, whose `error` is the underlying error and whose `entries`
  (from `rest()`) are the entries gathered before it. Build results with
  `results_with_entries` or `results_from_iterator`, and swap the reported
  query with `results_replace_query`.
- `dstore.order`: `OrderByKey`, `OrderByKeyDescending`, `OrderByValue`,
  `OrderByValueDescending` and `OrderByFunction`, plus `less` and
  `sort_entries`. Orders apply hierarchically; ties fall back to the key.
- `dstore.filter`: `FilterKeyCompare`, `FilterValueCompare` and
  `FilterKeyPrefix`, with the comparison operators in the `Op` enum
  (`==`, `!=`, `>`, `>=`, `<`, `<=`). An unknown operator raises
  `ValueError`.
- `dstore.naive`: stream operators `naive_filter`, `naive_order`,
  `naive_offset` and `naive_limit`, `naive_query_apply`, which applies a
  whole `Query` to any `Results`, and `result_entries_from`, which pairs
  keys with values into entries carrying their sizes.
- `dstore.locked`: `MutexDatastore` (or `mutex_wrap`), which holds one
  lock around every operation of a child datastore, including its
  batches.
- `dstore.retry`: `RetryDatastore`, which retries operations that fail
  with errors you classify as temporary.

## Querying entries

```python
from dstore.query import Entry, Query, results_with_entries
from dstore.order import OrderByKey
from dstore.naive import naive_query_apply

entries = [Entry(key=k) for k in ["/ab/c", "/a", "/ab/cd", "/ab"]]
q = Query(prefix="/ab", orders=[OrderByKey()], limit=1, offset=1)

with naive_query_apply(q, results_with_entries(q, entries)) as res:
    print([e.key for e in res.rest()])   # ['/ab/cd']

print(q)  # SELECT keys,vals FROM "/ab" ORDER [KEY] OFFSET 1 LIMIT 1
```

Operations run in this order: prefix, filters, orders, offset, limit. A
limit or offset of zero means none. A prefix of `/ab` matches `/ab/c` but
not `/abc` or `/ab` itself. `naive_order` reads every entry before it
returns the first one.

## Wrapping a datastore

The wrappers work with any object that has the datastore methods they
call: `put(key, value)`, `get(key)`, `has(key)`, `get_size(key)`,
`delete(key)`, `sync(prefix)`, `query(query)` and `close()`, and
optionally `batch()`, `disk_usage()`, `check()`, `scrub()` and
`collect_garbage()`.

```python
from dstore.locked import mutex_wrap
from dstore.retry import RetryDatastore

safe = mutex_wrap(my_store)

patient = RetryDatastore(
    my_store,
    temp_err_func=lambda err: isinstance(err, TimeoutError),
    retries=5,
    delay=0.1,
)
```

`MutexDatastore.query` runs the whole child query while locked and hands
back the collected entries. `batch()` raises `BatchUnsupportedError` when
the child has no `batch` method. `disk_usage()` returns 0 when the child
does not report one, and `check`, `scrub` and `collect_garbage` do
nothing when the child lacks them.

`RetryDatastore` retries `get`, `put`, `has`, `get_size`, `sync` and
`disk_usage`; the n-th retry waits `n * delay` seconds first. It raises
`RetriesExhaustedError` when a temporary error outlasts every retry; any
other error passes through unchanged. `delete`, `query`, `batch` and
`close` go straight to the child.

## What it does not do

The package does not store anything itself: it has no in-memory or
on-disk datastore and no key type. The wrappers and the query operators
need a datastore, or a result stream, that you provide.

## Running the tests

```
pip install -e ".[test]"
pytest
```
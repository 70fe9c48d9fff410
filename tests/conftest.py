"""Shared fixtures: stores with predictable task ids"""

import itertools

import pytest

from todo_matrix import PRIORITY_ORDER, Partition, TaskStore


def sequential_ids(prefix: str = "t"):
    counter = itertools.count(1)
    return lambda: f"{prefix}{next(counter)}"


def assert_invariants(partition: Partition) -> None:
    """Four fixed sections, unique ids, priority matches section"""
    assert tuple(s.id for s in partition.sections) == PRIORITY_ORDER
    seen = set()
    for section in partition.sections:
        for task in section.tasks:
            assert task.priority == section.id
            assert task.id not in seen
            seen.add(task.id)


def texts(partition: Partition, bucket_id) -> list:
    return [t.text for t in partition[bucket_id].tasks]


@pytest.fixture
def store() -> TaskStore:
    """Empty store with ids t1, t2, ..."""
    return TaskStore(id_factory=sequential_ids())


@pytest.fixture
def abc_store(store: TaskStore) -> TaskStore:
    """DO_FIRST = [A, B, C] with ids t1, t2, t3"""
    for text in ("A", "B", "C"):
        store.add(text)
    return store

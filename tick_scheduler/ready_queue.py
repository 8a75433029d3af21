from __future__ import annotations

from typing import List, Optional

from .models import ProcessState


class ReadyQueue:
    """
    Fixed-capacity circular FIFO of process references used by Round Robin.

    The queue never owns the processes; the ProcessTable does. A process is
    held at most once at a time, tracked through its ``in_queue`` flag.
    Capacity should be the number of processes in the table, which is the
    most that can ever be pending at once.
    """

    def __init__(self, capacity: int):
        if capacity < 0:
            raise ValueError(f"Queue capacity must be >= 0 (got {capacity})")
        self.capacity = capacity
        self._items: List[Optional[ProcessState]] = [None] * capacity
        self._front = 0
        self._size = 0

    def __len__(self) -> int:
        return self._size

    def __bool__(self) -> bool:
        return self._size > 0

    def enqueue(self, state: ProcessState) -> bool:
        """
        Append ``state`` at the tail. Already-queued and finished processes
        are ignored. Returns True if the process was added.
        """
        if state.in_queue or state.remaining_burst <= 0:
            return False
        if self._size == self.capacity:
            raise OverflowError(f"Ready queue full (capacity {self.capacity})")

        rear = (self._front + self._size) % self.capacity
        self._items[rear] = state
        self._size += 1
        state.in_queue = True
        return True

    def dequeue(self) -> Optional[ProcessState]:
        """
        Remove and return the head, or None when the queue is empty.
        """
        if self._size == 0:
            return None

        state = self._items[self._front]
        self._items[self._front] = None
        self._front = (self._front + 1) % self.capacity
        self._size -= 1
        state.in_queue = False
        return state

    def snapshot(self) -> List[ProcessState]:
        """Current contents, head first."""
        return [self._items[(self._front + i) % self.capacity] for i in range(self._size)]

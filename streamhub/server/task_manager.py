# Copyright (c) 2025 Trae AI. All rights reserved.

import time
import threading
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional

RUNNING = "running"
COMPLETED = "completed"
FAILED = "failed"


@dataclass
class TaskState:
    total: int = 100
    status: str = RUNNING
    progress: int = 0
    message: str = "Starting..."
    start_time: float = field(default_factory=time.time)
    end_time: Optional[float] = None

    def finish(self, status: str, message: str):
        self.status = status
        self.message = message
        self.end_time = time.time()


class TaskManager:
    """
    Tracks background catalog refreshes and their progress.
    A task id can only run once at a time.
    """

    def __init__(self):
        self._tasks: Dict[str, TaskState] = {}
        self._lock = threading.Lock()

    def start_task(self, task_id: str, total_steps: int = 100) -> bool:
        with self._lock:
            current = self._tasks.get(task_id)
            if current is not None and current.status == RUNNING:
                return False
            self._tasks[task_id] = TaskState(total=total_steps)
            return True

    def update_progress(self, task_id: str, progress: int, message: Optional[str] = None):
        with self._lock:
            task = self._tasks.get(task_id)
            if task is None:
                return
            task.progress = progress
            if message:
                task.message = message

    def complete_task(self, task_id: str, message: str = "Completed"):
        with self._lock:
            task = self._tasks.get(task_id)
            if task is not None:
                task.progress = task.total
                task.finish(COMPLETED, message)

    def fail_task(self, task_id: str, message: str):
        with self._lock:
            task = self._tasks.get(task_id)
            if task is not None:
                task.finish(FAILED, message)

    def get_task_status(self, task_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            task = self._tasks.get(task_id)
            return asdict(task) if task else None

    def get_all_tasks(self) -> Dict[str, Dict[str, Any]]:
        with self._lock:
            return {task_id: asdict(task) for task_id, task in self._tasks.items()}

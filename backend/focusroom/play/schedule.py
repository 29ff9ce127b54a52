from enum import Enum
from typing import Iterable, Optional, Set


class AlertMode(str, Enum):
    COMMON = "common"  # check whatever task is current
    SELECTIVE = "selective"  # check only the selected tasks


class AlertSchedule:
    """Decides when a focus check is due, from elapsed focus seconds.

    With `repeat` a check is due at every multiple of `frequency_seconds`;
    otherwise only once per focus session. Call `reset()` when a new focus
    session begins. In selective mode only the tasks in `task_ids` are checked.
    """

    def __init__(
        self,
        frequency_seconds: int,
        repeat: bool = True,
        enabled: bool = True,
        mode: AlertMode = AlertMode.COMMON,
        task_ids: Iterable[int] = (),
    ):
        self.frequency_seconds = frequency_seconds
        self.repeat = repeat
        self.enabled = enabled
        self.mode = AlertMode(mode)
        self.task_ids: Set[int] = set(task_ids)
        self._triggered: Set[int] = set()

    def reset(self) -> None:
        self._triggered.clear()

    def covers(self, task_id: Optional[int]) -> bool:
        if self.mode == AlertMode.COMMON:
            return True
        return task_id is not None and task_id in self.task_ids

    def due(self, elapsed_seconds: int) -> bool:
        if not self.enabled or self.frequency_seconds <= 0 or elapsed_seconds <= 0:
            return False
        if elapsed_seconds % self.frequency_seconds:
            return False
        if not self.repeat and elapsed_seconds != self.frequency_seconds:
            return False
        if elapsed_seconds in self._triggered:
            return False
        self._triggered.add(elapsed_seconds)
        return True

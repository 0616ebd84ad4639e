"""
Types shared by the safety lookup resolver and the analysis pipeline.
"""
import threading
from dataclasses import dataclass, field
from typing import Callable, Optional

from safety_core.models.ingredient import AuthoritativeData


@dataclass
class RunToken:
    """Generation handle for one analysis run. Cancelled once a newer run starts."""
    generation: int
    _cancelled: threading.Event = field(default_factory=threading.Event, repr=False, compare=False)

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def is_current(self) -> bool:
        return not self._cancelled.is_set()


# resolve(name, token) -> data or None; must never raise
SafetyResolver = Callable[[str, Optional[RunToken]], Optional[AuthoritativeData]]

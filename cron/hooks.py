"""
Callback registry for scheduled event hooks.

Apps register their callbacks from ``AppConfig.ready()``; the scheduler looks
them up by hook name when an event is due.
"""

from typing import Callable, Dict, List

Callback = Callable[[], object]


class HookRegistry:
    def __init__(self):
        self._callbacks: Dict[str, List[Callback]] = {}

    def register(self, hook: str, callback: Callback) -> None:
        callbacks = self._callbacks.setdefault(hook, [])
        if callback not in callbacks:
            callbacks.append(callback)

    def callbacks(self, hook: str) -> List[Callback]:
        return list(self._callbacks.get(hook, []))


registry = HookRegistry()

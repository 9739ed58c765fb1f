from typing import List, Callable
from dataclasses import dataclass
from types import TracebackType

from hygiene.messages import error


class Callback:
    cancelled: bool = False

    def cancel(self) -> None:
        """
        Disarms the callback so that the scope skips it on exit.
        """
        self.cancelled = True


@dataclass
class OnExitCallback(Callback):
    value: Callable[[], None]


@dataclass
class OnFailureCallback(Callback):
    value: Callable[[type[BaseException]], None]


@dataclass
class OnSuccessCallback(Callback):
    value: Callable[[], None]


class Scope:
    def __init__(self) -> None:
        self.deferred: List[Callback] = []

    def defer(self, fn: Callable[[], None]) -> Callback:
        return self.on_exit(fn)

    def on_exit(self, fn: Callable[[], None]) -> Callback:
        callback = OnExitCallback(fn)
        self.deferred.append(callback)
        return callback

    def on_failure(self, fn: Callable[[type[BaseException]], None]) -> Callback:
        callback = OnFailureCallback(fn)
        self.deferred.append(callback)
        return callback

    def on_success(self, fn: Callable[[], None]) -> Callback:
        callback = OnSuccessCallback(fn)
        self.deferred.append(callback)
        return callback

    def __enter__(self):
        assert len(self.deferred) == 0
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        for callback in self.deferred[::-1]:
            if callback.cancelled:
                continue
            match callback:
                case OnExitCallback(fn):
                    try:
                        fn()
                    except Exception as e:
                        error(f"Error during deferred execution: {e}")
                case OnFailureCallback(fn):
                    if exc_type is None:
                        continue
                    try:
                        fn(exc_type)
                    except Exception as e:
                        error(f"Error during deferred execution: {e}")
                case OnSuccessCallback(fn):
                    if exc_type is not None:
                        continue
                    try:
                        fn()
                    except Exception as e:
                        error(f"Error during deferred execution: {e}")
        self.deferred.clear()

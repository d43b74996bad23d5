from __future__ import annotations

import inspect

from typing_extensions import Self


class _CachedValue:
    def __init__(self, func=None) -> None:
        self._is_async = False
        self._func = None
        if func is not None:
            self.__call__(func)

    def __call__(self, func) -> Self:
        self.__doc__ = getattr(func, "__doc__")
        self.__name__ = getattr(func, "__name__")
        self.__module__ = getattr(func, "__module__")
        self._is_async = inspect.iscoroutinefunction(func)
        self._func = func
        return self


class cached_property(_CachedValue):  # noqa
    """Computes the value once and stores it in the instance dict under the same name."""

    def __get__(self, obj, cls):
        if obj is None:
            return self

        value = self._func(obj)
        obj.__dict__[self.__name__] = value
        return value


class cached_method(_CachedValue):  # noqa
    """Method without arguments, the first result replaces the method on the instance.

    For coroutines only the first awaited call stores its result,
    a failed call leaves the method uncached.
    """

    def __get__(self, obj, cls):
        if obj is None:
            return self

        def _wrapper():
            value = self._func(obj)

            def _return_value():
                return value

            obj.__dict__[self.__name__] = _return_value
            return value

        async def _async_wrapper():
            value = await self._func(obj)

            async def _return_value():
                return value

            obj.__dict__.setdefault(self.__name__, _return_value)
            return value

        if self._is_async:
            return _async_wrapper
        return _wrapper

"""
Callable cloning strategies.
"""

from __future__ import annotations

import logging
import types
from functools import partial
from typing import Any

from deepclone.core.classifier import type_name
from deepclone.core.context import CloneContext, attr_segment
from deepclone.core.interfaces import ICloner
from deepclone.core.options import FunctionStrategy
from deepclone.core.tracker import MISSING

from .structural import clone_attributes

logger = logging.getLogger(__name__)


class CallableCloner(ICloner):
    """
    Cloner for functions, methods and partials (kind: 'callable').

    Behaviour follows ``CloneOptions.clone_function``:
    - ``keep`` (default): the callable is shared; closures cannot be cloned
      in general, so sharing is the only safe default.
    - ``copy``: Python functions become new function objects sharing code,
      globals and closure cells, with cloned defaults and ``__dict__``; bound
      methods are rebound to the clone of their ``__self__``; ``partial``
      objects get cloned arguments. Built-in callables stay shared.
    - a callable factory: ``factory(fn, path)`` returns the clone.
    """

    def clone(self, value: Any, ctx: CloneContext) -> Any:
        strategy = ctx.options.clone_function
        if strategy is FunctionStrategy.KEEP:
            return value
        if strategy is FunctionStrategy.COPY:
            return self._copy(value, ctx)

        result = strategy(value, ctx.path)
        ctx.register(value, result)
        return result

    def _copy(self, value: Any, ctx: CloneContext) -> Any:
        if isinstance(value, types.FunctionType):
            return self._copy_function(value, ctx)
        if isinstance(value, types.MethodType):
            return self._copy_method(value, ctx)
        if isinstance(value, partial):
            return self._copy_partial(value, ctx)

        logger.debug(
            "Keeping %s at %s by reference; it cannot be copied",
            type_name(value),
            ctx.path or "<root>",
        )
        return value

    def _copy_function(
        self, value: types.FunctionType, ctx: CloneContext
    ) -> types.FunctionType:
        result = types.FunctionType(
            value.__code__,
            value.__globals__,
            value.__name__,
            None,
            value.__closure__,
        )
        ctx.register(value, result)
        result.__qualname__ = value.__qualname__
        result.__module__ = value.__module__
        result.__doc__ = value.__doc__
        if hasattr(value, "__annotate__"):
            # Lazily evaluated annotations: share the generator, don't evaluate it
            result.__annotate__ = value.__annotate__
        else:
            result.__annotations__ = dict(value.__annotations__)
        result.__defaults__ = ctx.clone_child(
            value.__defaults__, attr_segment("__defaults__")
        )
        result.__kwdefaults__ = ctx.clone_child(
            value.__kwdefaults__, attr_segment("__kwdefaults__")
        )
        clone_attributes(value, result, ctx)
        return result

    def _copy_method(self, value: types.MethodType, ctx: CloneContext) -> types.MethodType:
        func = ctx.clone_child(value.__func__, attr_segment("__func__"))
        owner = ctx.clone_child(value.__self__, attr_segment("__self__"))
        hit = ctx.lookup(value)
        if hit is not MISSING:
            return hit
        result = types.MethodType(func, owner)
        ctx.register(value, result)
        return result

    def _copy_partial(self, value: partial, ctx: CloneContext) -> partial:
        func = ctx.clone_child(value.func, attr_segment("func"))
        args = ctx.clone_child(value.args, attr_segment("args"))
        keywords = ctx.clone_child(value.keywords, attr_segment("keywords"))
        hit = ctx.lookup(value)
        if hit is not MISSING:
            return hit
        result = type(value)(func, *args, **keywords)
        ctx.register(value, result)
        clone_attributes(value, result, ctx)
        return result

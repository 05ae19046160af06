"""
Date and pattern cloners.
"""

from __future__ import annotations

import datetime as dt
import re

from deepclone.core.context import CloneContext
from deepclone.core.interfaces import ICloner


class DateCloner(ICloner):
    """
    Cloner for ``datetime``, ``date`` and ``time`` values (kind: 'date').

    ``replace()`` without arguments builds a new instance of the same class
    with the same fields (including ``tzinfo`` and ``fold``), so the clone
    denotes the same instant but is a distinct object. Subclasses such as
    ``pandas.Timestamp`` keep their class and sub-microsecond precision.
    """

    def clone(self, value: dt.date | dt.time, ctx: CloneContext) -> dt.date | dt.time:
        result = value.replace()
        ctx.register(value, result)
        return result


class PatternCloner(ICloner):
    """
    Cloner for compiled regular expressions (kind: 'pattern').

    The clone is compiled from the same source text and flag set. Flags are a
    bit set, so their order is preserved by construction. The ``re`` module
    caches compiled patterns, so the clone may be the cached (identical)
    object; compiled patterns are immutable, so sharing one is safe.
    """

    def clone(self, value: re.Pattern, ctx: CloneContext) -> re.Pattern:
        result = re.compile(value.pattern, value.flags)
        ctx.register(value, result)
        return result

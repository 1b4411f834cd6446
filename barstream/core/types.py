"""Shared type aliases for readability and contract enforcement.

Numeric values are either ``float`` or ``decimal.Decimal`` depending on the
factory selected for a run. The aliases below make signatures state which
one a parameter expects without committing to a representation.
"""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, TypeAlias, Union

Num: TypeAlias = Union[float, Decimal]

# Callback signatures used by indicator contexts.
ChangeListener: TypeAlias = Callable[[datetime, Any, Any], None]
UpdateListener: TypeAlias = Callable[[datetime], None]

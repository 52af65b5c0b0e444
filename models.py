from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(eq=False)
class Element:
    """
    Queue の要素（単方向リンクのノード）
    value が None のときは「文字列なし」を表す（"" とは別物）
    """
    value: Optional[str]
    next: Optional["Element"] = None

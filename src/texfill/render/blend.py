"""
Porter-Duff compositing operators.

Each operator takes the backdrop ``(Cb, Ab)`` and the source ``(Cs, As)``
as non-premultiplied float arrays and returns the result ``(C, A)``.
Colors have shape ``(H, W, 3)`` and alphas ``(H, W, 1)``.
"""

import logging

from texfill.constants import CompositeOperation
from texfill.render.utils import clip, divide

logger = logging.getLogger(__name__)


def source_over(Cb, Ab, Cs, As):
    A = As + Ab * (1.0 - As)
    C = divide(Cs * As + Cb * Ab * (1.0 - As), A)
    return clip(C), clip(A)


def source_atop(Cb, Ab, Cs, As):
    """Paint only where the backdrop is opaque, keeping backdrop alpha."""
    C = Cs * As + Cb * (1.0 - As)
    return clip(C), Ab.copy()


OPERATORS = {
    CompositeOperation.SOURCE_OVER: source_over,
    CompositeOperation.SOURCE_ATOP: source_atop,
}

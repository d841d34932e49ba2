from datetime import datetime
from typing import List, Optional, Union

from minutebits.domain.bitset import BitSet
from minutebits.domain.models import Granularity
from minutebits.exceptions import InvalidExpression
from minutebits.services.tracker import EventTracker


class QueryService:
    """Turns request-shaped queries into tracker calls.

    Expression nodes are read by attribute: an operator node has ``op`` and
    ``operands``, a leaf has ``event``, ``granularity`` and ``at``. Kept
    separate from the endpoints so expression evaluation can be tested
    without an HTTP client.
    """

    def __init__(self, tracker: EventTracker):
        self.tracker = tracker

    def resolve(self, node) -> BitSet:
        if not hasattr(node, "op"):
            return self.tracker.query(node.granularity, node.event, node.at)
        operands = [self.resolve(child) for child in node.operands]
        if node.op == "not":
            if len(operands) != 1:
                raise InvalidExpression("'not' takes exactly one operand")
            return ~operands[0]
        if node.op == "minus":
            if len(operands) != 2:
                raise InvalidExpression("'minus' takes exactly two operands")
            return operands[0] - operands[1]
        if len(operands) < 2:
            raise InvalidExpression(f"'{node.op}' takes at least two operands")
        result = operands[0]
        for operand in operands[1:]:
            if node.op == "and":
                result = result & operand
            elif node.op == "or":
                result = result | operand
            elif node.op == "xor":
                result = result ^ operand
            else:
                raise InvalidExpression(f"Unknown operator '{node.op}'")
        return result

    def summarize(self, node, ids: Optional[List[int]] = None) -> dict:
        bitset = self.resolve(node)
        out = {"key": bitset.key, "count": bitset.length()}
        if ids is not None:
            out["members"] = list(bitset & ids)
        return out

    def members(
        self,
        granularity: Union[str, Granularity],
        event: str,
        at: Optional[datetime],
        ids: List[int],
    ) -> List[int]:
        return list(self.tracker.query(granularity, event, at) & ids)

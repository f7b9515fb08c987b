"""LangGraph nodes for the game turn workflow"""

from .gate_node import gate_node, route_after_gate
from .claim_node import detect_claim_node, route_after_claim
from .prize_node import issue_prize_node, confirm_transaction_node, route_after_issue
from .prompt_node import compose_prompt_node

__all__ = [
    "gate_node",
    "route_after_gate",
    "detect_claim_node",
    "route_after_claim",
    "issue_prize_node",
    "confirm_transaction_node",
    "route_after_issue",
    "compose_prompt_node"
]

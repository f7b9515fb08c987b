"""LangGraph Workflow for one game turn

- StateGraph with context_schema for static runtime context
- Conditional edges pick between fixed replies, the prize path and the model
- No checkpointer: session state lives in the SessionStore
"""

import logging
from langgraph.graph import StateGraph, END

from .state import TurnState
from .context import TurnContext
from .nodes import (
    gate_node,
    route_after_gate,
    detect_claim_node,
    route_after_claim,
    issue_prize_node,
    confirm_transaction_node,
    route_after_issue,
    compose_prompt_node
)

logger = logging.getLogger(__name__)


def create_turn_workflow() -> StateGraph:
    """Create the turn workflow

    Flow:
    START → gate ─┬→ END (already won / claim in progress / exhausted)
                  └→ detect_claim ─┬→ END (invalid address / duplicate claim)
                                   ├→ compose_prompt → END
                                   └→ issue_prize ─┬→ END (mint failed)
                                                   └→ confirm_transaction → END

    Returns:
        StateGraph configured with all nodes and edges
    """
    logger.info("🏗️ Creating turn workflow")

    workflow = StateGraph(TurnState, context_schema=TurnContext)

    # ============================================================================
    # Add Nodes
    # ============================================================================

    workflow.add_node("gate", gate_node)                                # Count turn, end finished games
    workflow.add_node("detect_claim", detect_claim_node)                # Win detector
    workflow.add_node("issue_prize", issue_prize_node)                  # Mint call
    workflow.add_node("confirm_transaction", confirm_transaction_node)  # Hash polling
    workflow.add_node("compose_prompt", compose_prompt_node)            # System prompt for the model

    # ============================================================================
    # Define Workflow Edges
    # ============================================================================

    workflow.set_entry_point("gate")

    workflow.add_conditional_edges(
        "gate",
        route_after_gate,
        {"detect_claim": "detect_claim", END: END}
    )
    workflow.add_conditional_edges(
        "detect_claim",
        route_after_claim,
        {"issue_prize": "issue_prize", "compose_prompt": "compose_prompt", END: END}
    )
    workflow.add_conditional_edges(
        "issue_prize",
        route_after_issue,
        {"confirm_transaction": "confirm_transaction", END: END}
    )

    workflow.add_edge("confirm_transaction", END)
    workflow.add_edge("compose_prompt", END)

    logger.info("✅ Turn workflow created: gate → claim → (prize | prompt) → END")
    return workflow


def create_turn_agent():
    """Create the compiled turn workflow

    Returns:
        Compiled LangGraph graph ready for ainvoke(..., context=TurnContext)
    """
    agent = create_turn_workflow().compile()
    logger.info("✅ Turn workflow compiled")
    return agent

"""
LangGraph state machine — quiz pipeline with conditional entry.

Graph topology:
  PDF upload: START → reader → generator → END
  Raw text:   START → generator → END  (reader skipped)

Conditional entry checks state["mode"].
"""

from langgraph.graph import END, START, StateGraph

from agents.generator import generator_node
from agents.reader import reader_node
from state import QuizState


def route_entry(state: QuizState) -> str:
    """Conditional entry: skip the reader when text was submitted directly."""
    if state.get("mode") == "pdf":
        return "reader"
    return "generator"


workflow = StateGraph(QuizState)

workflow.add_node("reader", reader_node)
workflow.add_node("generator", generator_node)

workflow.add_conditional_edges(START, route_entry, {
    "reader": "reader",
    "generator": "generator",
})

workflow.add_edge("reader", "generator")
workflow.add_edge("generator", END)

graph = workflow.compile()

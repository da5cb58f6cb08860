"""
LangGraph tool-calling agent: agent → (tools → agent)* → END.

The agent node asks the LLM for either a final answer or tool calls; the tools node runs
the requested tools and feeds their observations back. Rounds are capped at MAX_AGENT_ROUNDS.
Shared by the Q&A agent and the search coordinator.
"""

import json
import logging
from typing import Any, TypedDict

from langgraph.graph import END, StateGraph

from app.agent.llm import chat_with_tools
from app.agent.tools import Tool, execute_tool
from app.core.config import AGENT_TEMPERATURE, MAX_AGENT_ROUNDS

logger = logging.getLogger(__name__)


class AgentState(TypedDict):
    messages: list  # OpenAI chat messages
    pending_tool_calls: list  # [{"id", "name", "arguments"}] from the last agent turn
    steps: list  # [{"tool", "tool_input", "observation"}]
    output: str
    rounds: int


def history_to_messages(history: list | None) -> list[dict]:
    """Map {"role": "user"|"assistant", "content"} turns to chat messages, dropping empty ones."""
    messages = []
    for m in history or []:
        role = (m.get("role") or "user").strip().lower()
        content = (m.get("content") or "").strip()
        if role in ("user", "assistant") and content:
            messages.append({"role": role, "content": content})
    return messages


def build_graph(
    tools: list[Tool],
    temperature: float = AGENT_TEMPERATURE,
    max_rounds: int = MAX_AGENT_ROUNDS,
    model: str | None = None,
):
    """Build and compile the tool-calling graph for the given tools."""
    tool_schemas = [t.schema() for t in tools]

    async def _agent_node(state: AgentState) -> dict:
        content, tool_calls = await chat_with_tools(
            state["messages"], tool_schemas, model=model, temperature=temperature
        )
        if not tool_calls:
            logger.info("[graph:agent] final answer len=%d", len(content or ""))
            return {"output": content or "", "pending_tool_calls": []}
        assistant_msg = {
            "role": "assistant",
            "content": content or "",
            "tool_calls": [
                {
                    "id": tc["id"],
                    "type": "function",
                    "function": {"name": tc["name"], "arguments": json.dumps(tc.get("arguments") or {})},
                }
                for tc in tool_calls
            ],
        }
        return {"messages": state["messages"] + [assistant_msg], "pending_tool_calls": tool_calls}

    async def _tools_node(state: AgentState) -> dict:
        messages = list(state["messages"])
        steps = list(state["steps"])
        for tc in state["pending_tool_calls"]:
            args = tc.get("arguments") or {}
            observation = await execute_tool(tools, tc.get("name", ""), args)
            steps.append({"tool": tc.get("name", ""), "tool_input": args.get("input", ""), "observation": observation})
            messages.append({"role": "tool", "tool_call_id": tc.get("id", ""), "content": observation})
        return {
            "messages": messages,
            "steps": steps,
            "pending_tool_calls": [],
            "rounds": state["rounds"] + 1,
        }

    def _route_after_agent(state: AgentState) -> str:
        if state.get("pending_tool_calls") and state.get("rounds", 0) < max_rounds:
            return "tools"
        if state.get("pending_tool_calls"):
            logger.warning("[graph:route_after_agent] round limit %d reached; stopping", max_rounds)
        return END

    graph = StateGraph(AgentState)
    graph.add_node("agent", _agent_node)
    graph.add_node("tools", _tools_node)
    graph.set_entry_point("agent")
    graph.add_conditional_edges("agent", _route_after_agent, {"tools": "tools", END: END})
    graph.add_edge("tools", "agent")
    return graph.compile()


async def run_tool_agent(
    system_prompt: str,
    tools: list[Tool],
    user_input: str,
    chat_history: list | None = None,
    temperature: float = AGENT_TEMPERATURE,
) -> dict[str, Any]:
    """
    Run the tool-calling agent once.
    Returns {"input", "output", "intermediate_steps"}; output may be "" when the model
    stopped without a final answer (e.g. round limit reached).
    """
    hist = history_to_messages(chat_history)
    logger.info("[run_tool_agent] START input=%r history_len=%d tools=%s", user_input, len(hist), [t.name for t in tools])
    initial: AgentState = {
        "messages": [{"role": "system", "content": system_prompt}, *hist, {"role": "user", "content": user_input}],
        "pending_tool_calls": [],
        "steps": [],
        "output": "",
        "rounds": 0,
    }
    final = await build_graph(tools, temperature=temperature).ainvoke(initial)
    steps = final.get("steps") or []
    output = (final.get("output") or "").strip()
    logger.info("[run_tool_agent] END steps=%d output_len=%d", len(steps), len(output))
    return {"input": user_input, "output": output, "intermediate_steps": steps}

"""
A tool-calling agent: a chat model bound to a fixed set of tools,
driven in a loop that alternates between two steps.

- agent: the model is called with the whole conversation, and its
    reply is appended to the conversation.
- tools: if the reply requests tool calls, each tool is called and its
    result is appended to the conversation as a tool message, in the
    order of the requests. Control then returns to the agent step.

The loop ends when the model replies without requesting tools. The
reply is then the answer to the conversation turn.

The agent holds no conversation state: the conversation is given by
the caller and returned extended with the new messages, so that a
multi-turn exchange is obtained by appending a new human message to
the returned conversation. Alternatively, a checkpointer may be given
to keep the conversation of a thread between calls.

Example:
    ```python
    from langchain_core.messages import HumanMessage

    from lcs.config import Settings
    from lcs.language_models.model_manager import ModelManager
    from lcs.language_models.agent import (
        create_search_agent,
        final_answer,
    )

    manager = ModelManager(Settings())
    manager.initialize()
    agent = create_search_agent(manager)

    messages = agent.invoke(
        [HumanMessage("What is the weather in Khulna?")]
    )
    print(final_answer(messages))
    messages = agent.invoke(
        messages + [HumanMessage("What about Dhaka?")]
    )
    ```
"""

import asyncio
from collections.abc import Sequence
from typing import Any

from langchain_core.language_models import LanguageModelInput
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import (
    AIMessage,
    BaseMessage,
    ToolCall,
    ToolMessage,
)
from langchain_core.runnables import Runnable
from langchain_core.tools import BaseTool

from lcs.utils.logging import LoggerBase, get_logger
from .errors import AgentIterationLimitError, ToolNotFoundError
from .model_manager import ModelManager
from .langchain.tools import create_search_tool

DEFAULT_MAX_ITERATIONS = 25


class MemoryCheckpointer:
    """Keeps the conversation of each thread in memory for the
    lifetime of the process."""

    def __init__(self) -> None:
        self._threads: dict[str, list[BaseMessage]] = {}

    def get(self, thread_id: str) -> list[BaseMessage]:
        return list(self._threads.get(thread_id, []))

    def put(self, thread_id: str, messages: Sequence[BaseMessage]) -> None:
        self._threads[thread_id] = list(messages)

    def delete(self, thread_id: str) -> None:
        self._threads.pop(thread_id, None)


class ToolCallingAgent:
    """
    A chat model bound to a set of tools, with the loop that executes
    the tool calls requested by the model.

    Args:
        model: the chat model
        tools: the tools the model may call. The model is bound to
            these tools once, at construction.
        max_iterations: the maximum number of model calls in one
            invocation
        checkpointer: optional store of the conversation of threads
        logger: a logger object
    """

    def __init__(
        self,
        model: BaseChatModel,
        tools: Sequence[BaseTool] = (),
        *,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        checkpointer: MemoryCheckpointer | None = None,
        logger: LoggerBase | None = None,
    ) -> None:
        if max_iterations < 1:
            raise ValueError("max_iterations must be at least 1")

        self.tools: dict[str, BaseTool] = {t.name: t for t in tools}
        self.model: Runnable[LanguageModelInput, BaseMessage] = (
            model.bind_tools(list(tools)) if tools else model
        )
        self.max_iterations = max_iterations
        self.checkpointer = checkpointer
        self._logger = logger or get_logger(__name__)

    def invoke(
        self,
        messages: Sequence[BaseMessage],
        *,
        thread_id: str | None = None,
    ) -> list[BaseMessage]:
        """
        Run the agent loop until the model gives an answer.

        Args:
            messages: the conversation so far, ending with the new
                human message. Not modified.
            thread_id: if given together with a checkpointer, the
                conversation stored for the thread is continued.

        Returns:
            the conversation extended with the messages of the turn.

        Raises:
            AgentIterationLimitError: if the model did not produce an
                answer within max_iterations calls
            ToolNotFoundError: if the model requested an unknown tool
            the errors of the model and of the tools.
        """
        conversation = self._start(messages, thread_id)
        for step in range(1, self.max_iterations + 1):
            reply = self.model.invoke(conversation)
            conversation.append(reply)
            calls = self._tool_calls(reply, step)
            if not calls:
                return self._finish(conversation, thread_id)
            tools = self._lookup(calls)
            for tool, call in zip(tools, calls):
                conversation.append(self._run_tool(tool, call))

        raise AgentIterationLimitError(self.max_iterations)

    async def ainvoke(
        self,
        messages: Sequence[BaseMessage],
        *,
        thread_id: str | None = None,
    ) -> list[BaseMessage]:
        """
        Asynchronous version of invoke. The tool calls requested in
        one reply run concurrently; their results are appended in
        the order of the requests.
        """
        conversation = self._start(messages, thread_id)
        for step in range(1, self.max_iterations + 1):
            reply = await self.model.ainvoke(conversation)
            conversation.append(reply)
            calls = self._tool_calls(reply, step)
            if not calls:
                return self._finish(conversation, thread_id)
            tools = self._lookup(calls)
            tasks = [
                asyncio.ensure_future(self._arun_tool(tool, call))
                for tool, call in zip(tools, calls)
            ]
            try:
                results = await asyncio.gather(*tasks)
            except BaseException:
                # a failed call aborts the turn: the others are cancelled
                for task in tasks:
                    task.cancel()
                await asyncio.gather(*tasks, return_exceptions=True)
                raise
            conversation.extend(results)

        raise AgentIterationLimitError(self.max_iterations)

    def _start(
        self, messages: Sequence[BaseMessage], thread_id: str | None
    ) -> list[BaseMessage]:
        conversation = list(messages)
        if thread_id is not None and self.checkpointer is not None:
            stored = self.checkpointer.get(thread_id)
            if conversation[: len(stored)] != stored:
                conversation = stored + conversation
        return conversation

    def _finish(
        self, conversation: list[BaseMessage], thread_id: str | None
    ) -> list[BaseMessage]:
        if thread_id is not None and self.checkpointer is not None:
            self.checkpointer.put(thread_id, conversation)
        return conversation

    def _tool_calls(self, reply: BaseMessage, step: int) -> list[ToolCall]:
        calls = reply.tool_calls if isinstance(reply, AIMessage) else []
        self._logger.debug(
            f"Agent step {step}: {len(calls)} tool call(s) requested"
        )
        return calls

    def _lookup(self, calls: list[ToolCall]) -> list[BaseTool]:
        # all requested tools must exist before any of them runs
        for call in calls:
            if call["name"] not in self.tools:
                raise ToolNotFoundError(call["name"], list(self.tools))
        return [self.tools[call["name"]] for call in calls]

    def _run_tool(self, tool: BaseTool, call: ToolCall) -> ToolMessage:
        self._logger.info(f"Calling tool {call['name']}: {call['args']}")
        output = tool.invoke({**call, "type": "tool_call"})
        return _as_tool_message(output, call)

    async def _arun_tool(
        self, tool: BaseTool, call: ToolCall
    ) -> ToolMessage:
        self._logger.info(f"Calling tool {call['name']}: {call['args']}")
        output = await tool.ainvoke({**call, "type": "tool_call"})
        return _as_tool_message(output, call)


def _as_tool_message(output: Any, call: ToolCall) -> ToolMessage:
    # tools invoked with a tool call return a ToolMessage, unless
    # they return one of their own
    if isinstance(output, ToolMessage):
        return output
    return ToolMessage(
        content=output if isinstance(output, str) else str(output),
        name=call["name"],
        tool_call_id=call["id"] or "",
    )


def final_answer(messages: Sequence[BaseMessage]) -> str:
    """The text content of the last message of the conversation."""
    if not messages:
        return ""
    content = messages[-1].content
    if isinstance(content, str):
        return content
    return "".join(
        block if isinstance(block, str) else str(block.get("text", ""))
        for block in content
    )


def create_search_agent(
    manager: ModelManager,
    *,
    checkpointer: MemoryCheckpointer | None = None,
    logger: LoggerBase | None = None,
) -> ToolCallingAgent:
    """
    Create an agent with the chat model of the manager bound to the
    web search tool.

    Args:
        manager: an initialized ModelManager
        checkpointer: optional store of the conversation of threads
        logger: a logger object

    Raises:
        ModelManagerNotInitializedError: if the manager was not
            initialized
        ConfigurationError: if the search API key is missing
    """
    settings = manager.get_config()
    return ToolCallingAgent(
        manager.get_chat_model(),
        [create_search_tool(settings)],
        max_iterations=settings.agent.max_iterations,
        checkpointer=checkpointer,
        logger=logger,
    )

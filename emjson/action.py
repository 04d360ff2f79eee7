"""Token-driven automaton whose states are handled by callbacks."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Optional

from .data import State, TokenType

DFA = dict[State, dict[TokenType, State]]


class ReturnCode(Enum):
    """Outcome of :meth:`ActionMachine.run`."""

    ALL_REDUCTIONS_ARE_COMPLETED = 0
    FAILED_TO_DO_ALL_REDUCTIONS = 1
    PANIC_WHILE_PROCESSING = 2
    NULL_MAIN_DFA_PASSED = 3


class FlowCode(IntEnum):
    """What an action asks the machine to do next."""

    GO_TO_SP_DFA = 1
    SAFE = 0
    DO_NOT_CHANGE_STATE = -1
    PANIC = -2
    BACK_TO_PREV = -3
    COMPILE_DONE = 2


@dataclass(frozen=True)
class Flow:
    """An action's verdict; ``advance`` says whether to consume the token."""

    code: FlowCode
    state: State = State.TYPE_CHECK
    advance: bool = True


@dataclass(frozen=True)
class Token:
    """A lexed token."""

    type: TokenType
    value: str


@dataclass
class SavedState:
    """A suspended automaton and the state it was in."""

    dfa: DFA
    state: State


@dataclass
class ActionContext:
    """Resumable execution state of an :class:`ActionMachine`."""

    dfa_stack: list[SavedState] = field(default_factory=list)
    current_state: State = State.TYPE_CHECK
    current_dfa: DFA = field(default_factory=dict)


@dataclass
class ActionResult:
    """Result of a run: status, pending automata and the next token index."""

    status: ReturnCode
    dfas: list[SavedState]
    index: int


def _copy_dfa(dfa: DFA) -> DFA:
    return {state: dict(edges) for state, edges in dfa.items()}


class ActionMachine(ABC):
    """Drives :meth:`action` over a token list, with nested special automata."""

    def __init__(self, machine: Optional[DFA] = None) -> None:
        self.machine = machine
        self.specials_dfa: dict[State, DFA] = {}

    @abstractmethod
    def action(self, index: int, tokens: list[Token], state: State) -> Flow:
        """Handle ``tokens[index]`` while in ``state``."""

    def add_special_dfa(self, start_state: State, dfa: DFA) -> None:
        """Register the automaton entered when an action jumps to ``start_state``."""
        self.specials_dfa[start_state] = dfa

    def default_context(self, start_state: State = State.TYPE_CHECK) -> ActionContext:
        """A fresh context starting in ``start_state`` on the main automaton."""
        if self.machine is None:
            return ActionContext()
        return ActionContext([], start_state, _copy_dfa(self.machine))

    def run(
        self,
        tokens: list[Token],
        start_state: State = State.TYPE_CHECK,
        index: int = 0,
        ctx: Optional[ActionContext] = None,
    ) -> ActionResult:
        """Process tokens from ``index``; a given ``ctx`` is updated in place so a run can resume."""
        if self.machine is None:
            return ActionResult(ReturnCode.NULL_MAIN_DFA_PASSED, [], index)
        if ctx is None:
            ctx = self.default_context(start_state)

        while index < len(tokens):
            flow = self.action(index, tokens, ctx.current_state)
            if flow.advance:
                index += 1

            if flow.code is FlowCode.PANIC:
                return ActionResult(ReturnCode.PANIC_WHILE_PROCESSING, list(ctx.dfa_stack), index)
            if flow.code is FlowCode.GO_TO_SP_DFA:
                ctx.dfa_stack.append(SavedState(ctx.current_dfa, ctx.current_state))
                ctx.current_dfa = self.specials_dfa.setdefault(flow.state, {})
                ctx.current_state = flow.state
            elif flow.code is FlowCode.BACK_TO_PREV:
                if not ctx.dfa_stack:
                    return ActionResult(ReturnCode.PANIC_WHILE_PROCESSING, [], index)
                saved = ctx.dfa_stack.pop()
                ctx.current_dfa = saved.dfa
                ctx.current_state = saved.state
            elif flow.code is FlowCode.COMPILE_DONE:
                break
            elif flow.code is not FlowCode.DO_NOT_CHANGE_STATE and index < len(tokens):
                edges = ctx.current_dfa.get(ctx.current_state, {})
                ctx.current_state = edges.get(tokens[index].type, State.TYPE_CHECK)

        status = (
            ReturnCode.FAILED_TO_DO_ALL_REDUCTIONS
            if ctx.dfa_stack
            else ReturnCode.ALL_REDUCTIONS_ARE_COMPLETED
        )
        return ActionResult(status, list(ctx.dfa_stack), index)
"""Table-driven lexer built from per-token deterministic automata."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class MatchStatus(Enum):
    """Outcome of a single lexer step."""

    SUCCESS = 0
    END_OF_FILE = 1
    NO_MATCHED_TOKEN = 2


@dataclass
class TokenDFA:
    """Automaton recognising one kind of token.

    ``dfa`` maps a state name to a mapping of input characters to the
    next state name.
    """

    dfa: dict[str, dict[str, str]] = field(default_factory=dict)
    start_state: str = ""
    final_states: set[str] = field(default_factory=set)
    ignore: bool = False
    token_identifier: int = 0

    def add_ascii_range(self, state: str, start: str, end: str, next_state: str) -> None:
        """Add a transition from ``state`` to ``next_state`` on every character in ``start..end``."""
        transitions = self.dfa.setdefault(state, {})
        for code in range(ord(start), ord(end) + 1):
            transitions[chr(code)] = next_state

    def add_final_state(self, state_name: str) -> None:
        """Mark ``state_name`` as accepting."""
        self.final_states.add(state_name)

    def _walk(self, buffer: str, start: int) -> tuple[str, int]:
        """Follow transitions as far as possible; return the last state and the length consumed."""
        state = self.start_state
        length = 0
        for ch in buffer[start:]:
            next_state = self.dfa.get(state, {}).get(ch)
            if next_state is None:
                break
            state = next_state
            length += 1
        return state, length


@dataclass(frozen=True)
class MatchResult:
    """A token found by :meth:`Matcher.get_token` and the position after it."""

    status: MatchStatus
    token_identifier: int
    value: str
    index: int


class Matcher:
    """Longest-match lexer; on equal length the token added last wins."""

    def __init__(self) -> None:
        self._automata: list[TokenDFA] = []

    def __len__(self) -> int:
        return len(self._automata)

    def insert_token(self, token: TokenDFA) -> int:
        """Register ``token`` and return its index in the engine."""
        self._automata.append(token)
        return len(self._automata) - 1

    def free_tokens(self) -> None:
        """Remove every registered token."""
        self._automata.clear()

    def create_word_token(self, word: str, token_identifier: int, ignore: bool = False) -> int:
        """Register a token matching exactly ``word`` and return its index."""
        automaton = TokenDFA(
            start_state="state_0",
            final_states={word},
            ignore=ignore,
            token_identifier=token_identifier,
        )
        last = len(word) - 1
        for position, ch in enumerate(word):
            target = word if position == last else f"state_{position + 1}"
            automaton.dfa.setdefault(f"state_{position}", {})[ch] = target
        return self.insert_token(automaton)

    def insert_token_as_str(
        self,
        token_dfa: str,
        finals: set[str],
        token_identifier: int,
        ignore: bool = False,
    ) -> int:
        """Register a token described as whitespace-separated ``state char next`` triples.

        The first state named is the start state. Raises :class:`ValueError`
        when the description is malformed.
        """
        fields = token_dfa.split()
        if not fields or len(fields) % 3:
            raise ValueError(f"malformed token description: {token_dfa!r}")
        automaton = TokenDFA(
            start_state=fields[0],
            final_states=set(finals),
            ignore=ignore,
            token_identifier=token_identifier,
        )
        triples = zip(fields[0::3], fields[1::3], fields[2::3])
        for state, ch, next_state in triples:
            if len(ch) != 1:
                raise ValueError(f"transition symbol must be one character, got {ch!r}")
            automaton.dfa.setdefault(state, {})[ch] = next_state
        return self.insert_token(automaton)

    def get_token(self, buffer: str, index: int = 0) -> MatchResult:
        """Find the next non-ignored token in ``buffer`` starting at ``index``."""
        size = len(buffer)
        while True:
            best_len = 0
            best_ident = 0
            best_pos = 0
            for position, automaton in enumerate(self._automata):
                state, length = automaton._walk(buffer, index)
                if state in automaton.final_states and length >= best_len:
                    best_len = length
                    best_ident = automaton.token_identifier
                    best_pos = position

            if best_len == 0 and index < size:
                return MatchResult(MatchStatus.NO_MATCHED_TOKEN, -1, "", index)

            value = buffer[index:index + best_len]
            index += best_len

            if self._automata and self._automata[best_pos].ignore and index < size:
                continue

            status = MatchStatus.END_OF_FILE if index >= size else MatchStatus.SUCCESS
            return MatchResult(status, best_ident, value, index)
"""First-order Markov transition model."""

import logging
import random
from dataclasses import dataclass, replace
from typing import Dict, Generic, Hashable, List, Optional, Protocol, TextIO, Tuple, TypeVar, runtime_checkable

import torch


logger = logging.getLogger(__name__)

T = TypeVar('T', bound=Hashable)

# cursor value before the first token, so that None stays a valid token
_NO_CURSOR = object()


@runtime_checkable
class RandomSource(Protocol):
    """Anything with a `random()` method returning floats in [0, 1)."""

    def random(self) -> float: ...


class EmptyModelError(RuntimeError):
    """Raised when sampling from a model that has not seen any token."""


@dataclass
class MarkovConfig:
    """Configuration for training and generation."""
    max_length: int = 1000
    seed: Optional[int] = None
    separator: str = ' '
    log_every: int = 10000


@dataclass
class Transition(Generic[T]):
    """Directed edge to `to`, observed `count` times."""
    to: T
    count: int = 1
    probability: float = 1.0


class TransitionModel(Generic[T]):
    """A first-order Markov chain built one token at a time."""

    def __init__(self, rng: Optional[RandomSource] = None, seed: Optional[int] = None):
        """
        Args:
            rng: Random source used for sampling, anything with a `random()` method
            seed: Seed for a fresh `random.Random` when no rng is given
        """
        self.rng = rng if rng is not None else random.Random(seed)
        self._states: Dict[T, List[Transition[T]]] = {}
        self._cursor = _NO_CURSOR

    def __len__(self) -> int:
        return len(self._states)

    def __contains__(self, element) -> bool:
        return element in self._states

    @property
    def states(self) -> List[T]:
        """States in the order they were first seen."""
        return list(self._states)

    @property
    def cursor(self) -> Optional[T]:
        """The last token added, or None before the first one."""
        return None if self._cursor is _NO_CURSOR else self._cursor

    def add_element(self, element: T) -> None:
        """Add the next token of the observed sequence."""
        if element not in self._states:
            self._states[element] = []

        if self._cursor is _NO_CURSOR:
            self._cursor = element
            return

        transitions = self._states[self._cursor]
        for transition in transitions:
            if transition.to == element:
                transition.count += 1
                break
        else:
            transitions.append(Transition(to=element))

        self._cursor = element

    def _normalize_probabilities(self) -> None:
        for transitions in self._states.values():
            total = sum(t.count for t in transitions)
            for transition in transitions:
                transition.probability = transition.count / total

    def transitions(self, state: T) -> Tuple[Transition[T], ...]:
        """Normalized outgoing transitions of `state`, in insertion order."""
        self._normalize_probabilities()
        return tuple(replace(t) for t in self._states[state])

    def count(self, source: T, destination: T) -> int:
        """Number of times `destination` was seen right after `source`."""
        for transition in self._states.get(source, ()):
            if transition.to == destination:
                return transition.count
        return 0

    def _sample(self, transitions: List[Transition[T]]) -> T:
        # inverse CDF over insertion order
        r = self.rng.random()
        cumulative = 0.0
        for transition in transitions:
            cumulative += transition.probability
            if r < cumulative:
                return transition.to
        return transitions[-1].to

    def generate(self, max_length: int) -> List[T]:
        """
        Random walk over the chain.

        The walk starts from a state picked uniformly among all states and
        takes at most `max_length` steps, so the result holds at most
        `max_length + 1` tokens (the start token included). It stops early
        when it reaches a state with no outgoing transition.
        """
        if max_length < 0:
            raise ValueError(f"max_length must be non-negative, got {max_length}")

        self._normalize_probabilities()
        if not self._states:
            raise EmptyModelError("Cannot generate from an empty model")

        states = list(self._states)
        current = states[int(self.rng.random() * len(states))]
        generated = [current]
        logger.debug(f"Generating chain with {max_length} steps from {current!r}")

        for _ in range(max_length):
            transitions = self._states[current]
            if not transitions:
                logger.debug(f"Reached dead end {current!r} after {len(generated)} tokens")
                break
            current = self._sample(transitions)
            generated.append(current)

        return generated

    def print_to_dot(self, out: TextIO) -> None:
        """Write the chain as a GraphViz digraph."""
        self._normalize_probabilities()

        out.write("digraph G {\n")
        for state, transitions in self._states.items():
            source = _quote(state)
            out.write(f"{source}\n")
            for transition in transitions:
                out.write(
                    f'{source} -> {_quote(transition.to)} '
                    f'[label="{transition.probability:g} ({transition.count})"]\n'
                )
        out.write("}\n")

    def transition_matrix(self) -> Tuple[List[T], torch.Tensor]:
        """
        Dense view of the chain.

        Returns the states in insertion order and a float64 tensor P where
        P[i, j] is the probability of moving from states[i] to states[j].
        Rows of states without outgoing transitions are zero.
        """
        if not self._states:
            raise EmptyModelError("Cannot build a matrix for an empty model")

        vocab = list(self._states)
        stoi = {s: i for i, s in enumerate(vocab)}
        counts = torch.zeros((len(vocab), len(vocab)), dtype=torch.float64)
        for state, transitions in self._states.items():
            for transition in transitions:
                counts[stoi[state], stoi[transition.to]] = transition.count

        # dead-end rows are all zeros, clamp keeps them that way
        totals = counts.sum(dim=1, keepdim=True).clamp(min=1)
        return vocab, counts / totals


def _quote(value) -> str:
    text = str(value).replace('\\', '\\\\').replace('"', '\\"')
    return f'"{text}"'

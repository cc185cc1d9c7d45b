"""Utilities for training and generation."""

import logging
from pathlib import Path
from typing import Iterable, TextIO, Union

from minimarkov.models.markov import TransitionModel
from minimarkov.data.corpus import iter_tokens


logger = logging.getLogger(__name__)


class Trainer:
    """Feeds token streams into a TransitionModel."""

    def __init__(self, model: TransitionModel, log_every: int = 10000):
        """
        Args:
            model: The transition model to train
            log_every: Log progress every this many tokens
        """
        if log_every <= 0:
            raise ValueError(f"log_every must be positive, got {log_every}")
        self.model = model
        self.log_every = log_every

    def feed(self, tokens: Iterable) -> int:
        """Add tokens to the model in order and return how many were added."""
        fed = 0
        for fed, token in enumerate(tokens, start=1):
            self.model.add_element(token)
            if fed % self.log_every == 0:
                logger.info(f"Fed {fed} tokens, {len(self.model)} states")
        return fed

    def train_file(self, path: Union[str, Path]) -> int:
        """Train on the sanitized words of a text file."""
        fed = self.feed(iter_tokens(path))
        logger.info(f"Trained on {fed} tokens from {path}: {len(self.model)} states")
        return fed


class Generator:
    """Text generation helper for TransitionModel."""

    def __init__(self, model: TransitionModel, separator: str = ' '):
        self.model = model
        self.separator = separator

    def generate(self, max_length: int = 1000) -> str:
        """Generate a walk and join its tokens with the separator."""
        return self.separator.join(str(t) for t in self.model.generate(max_length))

    def write(self, out: TextIO, max_length: int = 1000) -> str:
        text = self.generate(max_length)
        out.write(text)
        return text

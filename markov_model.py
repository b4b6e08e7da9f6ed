"""
A fixed-order Markov Chain for character-level text generation.

"""

import logging
import random
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

from tqdm import tqdm

logger = logging.getLogger(__name__)


class InvalidConfigurationError(ValueError):
    """Raised when a model or config value cannot be used."""


@dataclass
class CharObservation:
    """One character seen after a window, with its count and probabilities."""
    character: str
    count: int = 1
    p: float = 0.0
    cp: float = 0.0

    def __str__(self) -> str:
        return f"({self.character} {self.count} {self.p} {self.cp})"


class FrequencyTable:
    """Next-character counts for a single window, kept in first-seen order."""

    def __init__(self):
        self._entries: List[CharObservation] = []
        # position of each character in _entries
        self._index: Dict[str, int] = {}

    def update(self, character: str) -> None:
        """Record one more occurrence of character after this window."""
        position = self._index.get(character)
        if position is None:
            self._index[character] = len(self._entries)
            self._entries.append(CharObservation(character))
        else:
            self._entries[position].count += 1

    def compute_probabilities(self) -> None:
        """
        Set p and cp on every entry.
        The running sum follows insertion order, which is also the order
        sample() scans in.
        """
        total_count = self.total_count
        if total_count == 0:
            return

        cumulative = 0.0
        for entry in self._entries:
            entry.p = entry.count / total_count
            cumulative += entry.p
            entry.cp = cumulative
        # rounding can leave the running sum just short of 1.0
        self._entries[-1].cp = 1.0

    def sample(self, draw: float) -> Optional[str]:
        """Return the first character whose cp reaches draw, or None."""
        for entry in self._entries:
            if draw <= entry.cp:
                return entry.character
        return None

    def get(self, character: str) -> Optional[CharObservation]:
        """Return the observation for character, or None if never seen."""
        position = self._index.get(character)
        if position is None:
            return None
        return self._entries[position]

    @property
    def total_count(self) -> int:
        """Number of observations across all characters."""
        return sum(entry.count for entry in self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[CharObservation]:
        return iter(self._entries)

    def __str__(self) -> str:
        return " ".join(str(entry) for entry in self._entries)


class MarkovModel:
    """A fixed-window Markov model over characters."""

    def __init__(self, window_length: int, seed: Optional[int] = None):
        """
        Create an untrained model.
        Args:
            window_length: Number of preceding characters used as context
            seed: Seed for the sampling source; None gives a different walk
                  on every run
        """
        if isinstance(window_length, bool) or not isinstance(window_length, int):
            raise InvalidConfigurationError(
                f"window_length must be an integer, got {window_length!r}")
        if window_length < 1:
            raise InvalidConfigurationError("window_length must be at least 1")

        self.window_length = window_length
        self.seed = seed
        self._random = random.Random(seed)
        self._tables: Dict[str, FrequencyTable] = {}

    def train(self, corpus_text: str, progress: bool = False) -> None:
        """
        Learn window -> next character frequencies from corpus_text.
        Counts from earlier calls are kept; probabilities are recomputed
        from the combined counts once the whole corpus has been scanned.
        """
        window_length = self.window_length
        steps = len(corpus_text) - window_length
        if steps < 1:
            logger.warning(
                "Corpus of %d characters is too short for window length %d, nothing learned",
                len(corpus_text), window_length)
            return

        for i in tqdm(range(steps), desc="Training", unit="char", disable=not progress):
            window = corpus_text[i:i + window_length]
            table = self._tables.get(window)
            if table is None:
                table = self._tables[window] = FrequencyTable()
            table.update(corpus_text[i + window_length])

        for table in self._tables.values():
            table.compute_probabilities()

        logger.info("Trained on %d characters: %d windows, %d transitions",
                    len(corpus_text), len(self._tables), steps)

    def reset(self) -> None:
        """Forget everything learned so far."""
        self._tables.clear()

    def generate(self, seed_text: str, length: int) -> str:
        """
        Extend seed_text by up to length characters.
        Stops early when the trailing window was never seen in training.
        A seed shorter than the window is returned as is.
        """
        if length < 0:
            raise ValueError("length must not be negative")

        if len(seed_text) < self.window_length:
            return seed_text

        generated = list(seed_text)
        window = seed_text[-self.window_length:]

        for _ in range(length):
            table = self._tables.get(window)
            if table is None:
                logger.debug("Dead end at window %r after %d characters",
                             window, len(generated) - len(seed_text))
                break

            next_char = table.sample(self._random.random())
            if next_char is None:
                break

            generated.append(next_char)
            window = window[1:] + next_char

        logger.debug("Generated %d of %d requested characters",
                     len(generated) - len(seed_text), length)
        return ''.join(generated)

    def table_for(self, window: str) -> Optional[FrequencyTable]:
        """Return the table learned for window, or None."""
        return self._tables.get(window)

    def windows(self) -> List[str]:
        """Return trained windows in first-seen order."""
        return list(self._tables)

    def get_stats(self) -> Dict:
        """Return basic statistics about the trained model."""
        if not self._tables:
            return {"windows": 0, "total_transitions": 0}

        total_transitions = sum(table.total_count for table in self._tables.values())
        return {
            "windows": len(self._tables),
            "total_transitions": total_transitions,
            "avg_transitions_per_window": total_transitions / len(self._tables)
        }

    def __contains__(self, window: str) -> bool:
        return window in self._tables

    def __len__(self) -> int:
        return len(self._tables)

    def __str__(self) -> str:
        return ''.join(f"{window} : {table}\n" for window, table in self._tables.items())

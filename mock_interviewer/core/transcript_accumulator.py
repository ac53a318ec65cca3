"""
Ordered, append-only store for the utterances of one call.
"""
import logging
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from mock_interviewer.models.session import Utterance

logger = logging.getLogger(__name__)


class TranscriptAccumulator:
    """Keeps finalized utterances in the order they arrived."""

    def __init__(self, utterances: Optional[Iterable[Utterance]] = None):
        self._utterances: List[Utterance] = []
        if utterances:
            self.extend(utterances)

    def append(self, utterance: Utterance) -> None:
        if not isinstance(utterance, Utterance):
            raise TypeError(f"Expected Utterance, got {type(utterance).__name__}")
        self._utterances.append(utterance)
        logger.debug(f"Transcript line {len(self._utterances)} from {utterance.speaker.value}")

    def extend(self, utterances: Iterable[Utterance]) -> None:
        for utterance in utterances:
            self.append(utterance)

    @property
    def last(self) -> Optional[Utterance]:
        return self._utterances[-1] if self._utterances else None

    def snapshot(self) -> Tuple[Utterance, ...]:
        """Immutable copy of the transcript so far."""
        return tuple(self._utterances)

    def to_dicts(self) -> List[Dict[str, str]]:
        return [utterance.to_dict() for utterance in self._utterances]

    def __len__(self) -> int:
        return len(self._utterances)

    def __iter__(self) -> Iterator[Utterance]:
        return iter(tuple(self._utterances))

    def __bool__(self) -> bool:
        return bool(self._utterances)

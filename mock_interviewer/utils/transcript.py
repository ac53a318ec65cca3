"""
Transcript utilities for Mock Interviewer.

This module provides functionality for working with interview transcripts,
including saving, loading, and formatting.
"""
import os
import json
import logging
from datetime import datetime
from typing import Dict, List, Any, Optional, Sequence, Union

from mock_interviewer.models.session import Utterance

logger = logging.getLogger(__name__)

TranscriptEntry = Union[Utterance, Dict[str, Any]]

def _entry_to_dict(entry: TranscriptEntry) -> Dict[str, str]:
    if isinstance(entry, Utterance):
        return entry.to_dict()
    return {"role": str(entry.get("role", "")), "content": str(entry.get("content", ""))}

def transcript_to_dicts(transcript: Sequence[TranscriptEntry]) -> List[Dict[str, str]]:
    """Convert utterances (or already-serialized entries) to role/content dictionaries."""
    return [_entry_to_dict(entry) for entry in transcript]

def transcript_from_dicts(entries: Sequence[Dict[str, Any]]) -> List[Utterance]:
    """
    Build utterances from role/content dictionaries.

    Raises:
        ValueError: If an entry has an unknown role
        KeyError: If an entry lacks a role or content
    """
    return [Utterance.from_dict(entry) for entry in entries]

def format_transcript_for_prompt(transcript: Sequence[TranscriptEntry]) -> str:
    """
    Format a transcript as the bulleted log the feedback scorer reads.

    Args:
        transcript: Utterances or role/content dictionaries

    Returns:
        One "- role: content" line per entry
    """
    return "".join(
        f"- {entry['role']}: {entry['content']}\n" for entry in transcript_to_dicts(transcript)
    )

def save_transcript_to_json(
    transcript: Sequence[TranscriptEntry],
    metadata: Optional[Dict[str, Any]] = None,
    filename: Optional[str] = None,
    directory: str = "transcripts"
) -> str:
    """
    Save an interview transcript to a JSON file.

    Args:
        transcript: Utterances or role/content dictionaries
        metadata: Optional metadata to include
        filename: Optional filename (auto-generated if None)
        directory: Directory to save the transcript in

    Returns:
        Path to the saved JSON file
    """
    # Create directory if it doesn't exist
    if not os.path.exists(directory):
        os.makedirs(directory)
        logger.info(f"Created directory {directory}")

    # Generate default filename if none provided
    if not filename:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filename = f"interview_transcript_{timestamp}.json"

    filepath = os.path.join(directory, filename)

    data = {
        "metadata": metadata or {},
        "timestamp": datetime.now().isoformat(),
        "transcript": transcript_to_dicts(transcript)
    }

    try:
        with open(filepath, "w") as f:
            json.dump(data, f, indent=2)

        logger.info(f"Saved transcript to {filepath}")
        return filepath
    except Exception as e:
        logger.error(f"Error saving transcript: {e}")
        raise

def load_transcript_from_json(filepath: str) -> Dict[str, Any]:
    """
    Load an interview transcript from a JSON file.

    Accepts either the layout written by ``save_transcript_to_json`` or a bare
    list of role/content entries.

    Args:
        filepath: Path to the JSON file

    Returns:
        Dictionary with ``metadata`` and ``transcript`` (a list of utterances)
    """
    try:
        with open(filepath, "r") as f:
            data = json.load(f)

        if isinstance(data, list):
            data = {"metadata": {}, "transcript": data}
        data["transcript"] = transcript_from_dicts(data.get("transcript", []))

        logger.info(f"Loaded transcript from {filepath}")
        return data
    except Exception as e:
        logger.error(f"Error loading transcript: {e}")
        raise

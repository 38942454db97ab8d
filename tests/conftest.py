"""Shared test fixtures and seed data.

Provides:
- Transcript seed data with and without word-level timestamps
- A matching script for the seed transcript
- Isolated working directory for CLI runs (log files, config.yaml)
"""

from __future__ import annotations

import json

import pytest


# ── Seed data ────────────────────────────────────────────────────────────────

SAMPLE_SEGMENTS = [
    {"id": 0, "start": 0.0, "end": 2.5, "text": "Um, let me start over.", "words": []},
    {"id": 1, "start": 2.5, "end": 5.0, "text": "We shipped the new release",
     "words": [
         {"text": "We", "start": 2.6, "end": 2.8},
         {"text": "shipped", "start": 2.9, "end": 3.4},
         {"text": "the", "start": 3.5, "end": 3.6},
         {"text": "new", "start": 3.7, "end": 4.0},
         {"text": "release", "start": 4.1, "end": 4.8},
     ]},
    {"id": 2, "start": 5.0, "end": 8.0, "text": "on Friday and everyone celebrated.",
     "words": [
         {"text": "on", "start": 5.1, "end": 5.3},
         {"text": "Friday", "start": 5.4, "end": 5.9},
         {"text": "and", "start": 6.0, "end": 6.2},
         {"text": "everyone", "start": 6.3, "end": 6.9},
         {"text": "celebrated.", "start": 7.0, "end": 7.7},
     ]},
    {"id": 3, "start": 8.5, "end": 11.0, "text": "Thanks for watching the show", "words": []},
]

SAMPLE_SCRIPT = """\
INT. OFFICE - DAY

We shipped the new release on Friday, and everyone celebrated!
----
Thanks for watching the show.
"""


@pytest.fixture
def sample_segments():
    """Return a deep copy of sample segments."""
    return json.loads(json.dumps(SAMPLE_SEGMENTS))


@pytest.fixture
def sample_transcript(sample_segments):
    return {"segments": sample_segments, "language": "en", "duration": 11.0}


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Run inside tmp_path so log files and config.yaml stay isolated."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def sample_script():
    return SAMPLE_SCRIPT

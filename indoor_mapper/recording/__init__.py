"""Trajectory recording and graph synthesis.

- RecordingSession: accepted points, touched nodes, running distance
- RecorderStateMachine: Idle <-> Recording lifecycle
- TrajectorySynthesizer: sample processing and connection synthesis
- link_vertical: cross-floor stairs/lift auto-linking
"""

from indoor_mapper.recording.session import RecordingSession
from indoor_mapper.recording.state_machine import RecorderStateMachine
from indoor_mapper.recording.synthesizer import TrajectorySynthesizer, link_vertical

__all__ = [
    "RecordingSession",
    "RecorderStateMachine",
    "TrajectorySynthesizer",
    "link_vertical",
]

"""The top level of the package contains functions to load MIDI files,
separate their notes into monophonic voices, evaluate the separation
against the MIDI channels or tracks, and save the voices.

"""

from .__version__ import __version__
from .note import Note
from .voice import Voice, InvalidTransitionException
from .parameters import VoiceSplittingParameters, DEFAULT_PARAMETERS
from .state import SearchState
from .model import (
    BeamSearchModel,
    NoteOrderException,
    EmptyHypothesesException,
    group_by_onset,
    split_voices,
    estimate_voices,
)
from .evaluation import f1_score, evaluate_song, evaluate, EvaluationResult
from .tuning import parameter_grid, tune
from .io import load_midi, load_midi_batches, save_voices_midi, voices_to_text

__all__ = [
    "Note",
    "Voice",
    "VoiceSplittingParameters",
    "DEFAULT_PARAMETERS",
    "SearchState",
    "BeamSearchModel",
    "NoteOrderException",
    "EmptyHypothesesException",
    "InvalidTransitionException",
    "group_by_onset",
    "split_voices",
    "estimate_voices",
    "f1_score",
    "evaluate_song",
    "evaluate",
    "EvaluationResult",
    "parameter_grid",
    "tune",
    "load_midi",
    "load_midi_batches",
    "save_voices_midi",
    "voices_to_text",
]

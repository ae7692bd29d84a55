#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
This module contains methods for writing separated voices as text, one
note per line.
"""

__all__ = ["voices_to_text", "save_voices_text"]


def voices_to_text(voices, song_id=0):
    """Text representation of separated voices

    Each line holds the fields ``songID noteID voiceID onsetTime
    offsetTime pitch velocity`` (times in microseconds) of one note.
    Notes are listed in onset order across all voices, notes with equal
    onsets in the order of their voices. The note ID counts the lines.

    Parameters
    ----------
    voices : list of Voice
        The voices
    song_id : int or str, optional
        Identifier of the song. Defaults to 0.

    Returns
    -------
    str
        The lines, separated by newlines.
    """
    rows = [
        (note, voice_id) for voice_id, voice in enumerate(voices) for note in voice.notes
    ]
    rows.sort(key=lambda row: (row[0].onset_time, row[1]))

    return "\n".join(
        "{0} {1} {2} {3} {4} {5} {6}".format(
            song_id,
            note_id,
            voice_id,
            note.onset_time,
            note.offset_time,
            note.pitch,
            note.velocity,
        )
        for note_id, (note, voice_id) in enumerate(rows)
    )


def save_voices_text(voices, out, song_id=0):
    """Write :func:`voices_to_text` of `voices` to a filename or a
    file-like object"""
    text = voices_to_text(voices, song_id) + "\n"
    if hasattr(out, "write"):
        out.write(text)
    else:
        with open(out, "w") as f:
            f.write(text)

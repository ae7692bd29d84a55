#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
This module contains the note representation used by the voice
separation model.
"""

__all__ = ["Note"]


class Note(object):
    """A note played in a piece, as decoded from a MIDI stream.

    Times are expressed in microseconds. The note is created when its
    onset is decoded and closed (see :meth:`close`) when the matching
    offset arrives. The voice separation search never modifies a note,
    except for stamping the resolved voice index into :attr:`voice`
    once the search has finished.

    Parameters
    ----------
    pitch : int
        MIDI pitch of the note
    velocity : int
        MIDI velocity of the note
    onset_time : int
        Onset time in microseconds
    onset_tick : int or None, optional
        Onset in MIDI ticks. `None` if the note is not aligned to a
        tick grid.
    offset_time : int or None, optional
        Offset time in microseconds. `None` while the note is still
        sounding.
    offset_tick : int or None, optional
        Offset in MIDI ticks.
    channel : int, optional
        Source channel (or track) of the note. This is the gold standard
        label used for evaluation, it is never used by the search.
        Defaults to 0.
    note_id : str or int or None, optional
        Identifier of the note

    Attributes
    ----------
    voice : int or None
        Index of the voice the note was assigned to by the voice
        separation, or `None` if it has not been assigned yet.
    """

    def __init__(
        self,
        pitch,
        velocity,
        onset_time,
        onset_tick=None,
        offset_time=None,
        offset_tick=None,
        channel=0,
        note_id=None,
    ):
        self.pitch = int(pitch)
        self.velocity = int(velocity)
        self.onset_time = int(onset_time)
        self.onset_tick = onset_tick
        self.offset_time = None
        self.offset_tick = None
        self.channel = channel
        self.id = note_id
        self.voice = None

        if offset_time is not None:
            self.close(offset_time, offset_tick)

    @classmethod
    def from_seconds(
        cls, pitch, onset_sec, duration_sec, velocity=64, channel=0, note_id=None
    ):
        """Create a closed note from onset and duration in seconds."""
        onset_time = int(round(onset_sec * 10**6))
        offset_time = int(round((onset_sec + duration_sec) * 10**6))
        return cls(
            pitch,
            velocity,
            onset_time,
            offset_time=offset_time,
            channel=channel,
            note_id=note_id,
        )

    def close(self, offset_time, offset_tick=None):
        """Set the offset of the note.

        Raises
        ------
        ValueError
            If the offset precedes the onset.
        """
        offset_time = int(offset_time)
        if offset_time < self.onset_time:
            raise ValueError(
                "offset {0} precedes onset {1} of note {2}".format(
                    offset_time, self.onset_time, self
                )
            )
        self.offset_time = offset_time
        self.offset_tick = offset_tick

    @property
    def is_active(self):
        """True while the note has not been closed"""
        return self.offset_time is None

    @property
    def duration_time(self):
        if self.offset_time is None:
            raise ValueError("Note {0} has not been closed".format(self))
        return self.offset_time - self.onset_time

    def overlaps(self, other):
        """Whether `other` has the same pitch and sounds at the same time

        Tick positions are used when both notes have them, times
        otherwise.
        """
        if other is None or self.pitch != other.pitch:
            return False

        if None not in (
            self.onset_tick,
            self.offset_tick,
            other.onset_tick,
            other.offset_tick,
        ):
            on, off = self.onset_tick, self.offset_tick
            o_on, o_off = other.onset_tick, other.offset_tick
        else:
            on, off = self.onset_time, self.offset_time
            o_on, o_off = other.onset_time, other.offset_time

        if off is None or o_off is None:
            return False

        return on < o_off and off > o_on

    def __str__(self):
        return "Note {id}: pitch {pi}, vel {vel}, [{on}-{off}] channel {ch}".format(
            id=self.id,
            pi=self.pitch,
            vel=self.velocity,
            on=self.onset_time,
            off=self.offset_time if self.offset_time is not None else "open",
            ch=self.channel,
        )

    def __repr__(self):
        return "<{0}>".format(self)

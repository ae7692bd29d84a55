#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
This module contains the conversion between MIDI ticks and microseconds.
"""
import numpy as np

__all__ = ["TempoMap", "DEFAULT_TEMPO"]

# microseconds per quarter (120 BPM)
DEFAULT_TEMPO = 500000


class TempoMap(object):
    """Piecewise linear map between MIDI ticks and time in microseconds

    Parameters
    ----------
    ticks_per_beat : int
        Parts per quarter of the MIDI file
    changes : iterable of (int, int), optional
        Tempo changes as pairs of absolute tick and tempo (microseconds
        per quarter). The tempo before the first change is
        :data:`DEFAULT_TEMPO`. If several changes share a tick, the last
        one wins.

    Notes
    -----
    Both directions round down to integers (exactly, in integer
    arithmetic), so converting a tick to a time and back may be off by
    one.
    """

    def __init__(self, ticks_per_beat, changes=()):
        if ticks_per_beat <= 0:
            raise ValueError("ticks_per_beat must be positive")

        self.ticks_per_beat = ticks_per_beat

        ticks = [0]
        tempos = [DEFAULT_TEMPO]
        for tick, tempo in sorted(changes, key=lambda c: c[0]):
            if tick < 0:
                raise ValueError("Tempo changes cannot have negative ticks")
            if tick == ticks[-1]:
                tempos[-1] = tempo
            else:
                ticks.append(tick)
                tempos.append(tempo)

        times = [0]
        for i in range(1, len(ticks)):
            times.append(
                self._time_in_segment(ticks[i], ticks[i - 1], times[-1], tempos[i - 1])
            )

        self.ticks = np.array(ticks, dtype=np.int64)
        self.times = np.array(times, dtype=np.int64)
        self.tempos = np.array(tempos, dtype=np.int64)

    def _time_in_segment(self, tick, start_tick, start_time, tempo):
        return int((tick - start_tick) * tempo // self.ticks_per_beat) + start_time

    @property
    def changes(self):
        """Tempo changes as a list of (tick, tempo) pairs, including the
        initial tempo at tick 0"""
        return [(int(tick), int(tempo)) for tick, tempo in zip(self.ticks, self.tempos)]

    def tempo_at_tick(self, tick):
        """Tempo (microseconds per quarter) in effect at `tick`"""
        idx = max(int(np.searchsorted(self.ticks, tick, side="right")) - 1, 0)
        return int(self.tempos[idx])

    def tick_to_time(self, tick):
        """Time in microseconds of `tick`"""
        idx = max(int(np.searchsorted(self.ticks, tick, side="right")) - 1, 0)
        return self._time_in_segment(
            tick, int(self.ticks[idx]), int(self.times[idx]), int(self.tempos[idx])
        )

    def time_to_tick(self, time):
        """Tick of the time `time` (in microseconds)"""
        idx = max(int(np.searchsorted(self.times, time, side="right")) - 1, 0)
        tick_offset = (time - int(self.times[idx])) * self.ticks_per_beat
        return int(tick_offset // int(self.tempos[idx])) + int(self.ticks[idx])

    def __repr__(self):
        return "<TempoMap ppq={0} changes={1}>".format(self.ticks_per_beat, self.changes)

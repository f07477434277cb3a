"""
Smoke tests for the demonstration helpers.
"""

import pytest
import numpy as np

from hoamic.codec.examples import (
    generate_test_tone, demonstrate_channel_gains, demonstrate_polar_pattern,
    demonstrate_orbiting_source
)


class TestTestTone:

    @pytest.mark.parametrize('waveform', ['sine', 'square', 'sawtooth', 'noise'])
    def test_waveforms(self, waveform):
        tone = generate_test_tone(220.0, duration=0.05, sample_rate=8000, waveform=waveform, amplitude=0.25)
        assert tone.shape == (400,)
        assert np.max(np.abs(tone)) <= 0.25 + 1e-12

    def test_unknown_waveform(self):
        with pytest.raises(ValueError):
            generate_test_tone(waveform='triangle')


class TestDemonstrations:

    def test_channel_gains(self, capsys):
        demonstrate_channel_gains(2)
        out = capsys.readouterr().out
        assert "W=+1.000" in out
        assert "(9 channels)" in out

    def test_polar_pattern(self, capsys):
        demonstrate_polar_pattern(order=1, steps=4)
        lines = capsys.readouterr().out.strip().splitlines()
        assert len(lines) == 2 + 4

    def test_orbiting_source(self, capsys):
        output = demonstrate_orbiting_source(order=2, duration=0.1, sample_rate=8000, buffer_size=100)
        assert output.shape == (800,)
        assert "front" in capsys.readouterr().out

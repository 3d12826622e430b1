"""Tests for chaosstream.audio.export."""

import numpy as np
import pytest
from scipy.io import wavfile

from chaosstream.audio.export import (
    channel_name,
    collect_channels,
    export_audio,
    normalize_channels,
    total_samples,
    write_channels,
)
from chaosstream.config import load_config
from chaosstream.errors import ConfigError, DegenerateNormalizationError


class TestTotalSamples:
    """Sample budget for a bounded export."""

    def test_default_budget(self):
        assert total_samples(2.0, 48000) == 96000

    def test_rounds_instead_of_truncating(self):
        assert total_samples(0.1, 30) == 3
        assert total_samples(1.0001, 1000) == 1000

    @pytest.mark.parametrize("total_time,rate", [(0.0, 48000), (-1.0, 48000), (1.0, 0), (1.0, -5), (0.0001, 1000)])
    def test_invalid_inputs_raise(self, total_time, rate):
        with pytest.raises(ConfigError):
            total_samples(total_time, rate)


class TestChannels:
    """Per-coordinate channel buffers."""

    def test_channel_names(self):
        assert [channel_name(i) for i in range(5)] == ["x", "y", "z", "a", "b"]
        assert channel_name(25) == "w"
        assert channel_name(26) == "x1"
        assert channel_name(29) == "a1"

    def test_every_coordinate_gets_its_own_channel(self):
        states = np.arange(60.0).reshape(2, 30)
        channels = collect_channels(states)
        assert len(channels) == 30
        np.testing.assert_array_equal(channels["x"], [0.0, 30.0])
        np.testing.assert_array_equal(channels["x1"], [26.0, 56.0])
        np.testing.assert_array_equal(channels["a1"], [29.0, 59.0])

    def test_collect_channels(self):
        states = np.arange(12, dtype=float).reshape(4, 3)
        channels = collect_channels(states)
        assert list(channels) == ["x", "y", "z"]
        np.testing.assert_array_equal(channels["y"], [1.0, 4.0, 7.0, 10.0])

    def test_collect_channels_rejects_flat_input(self):
        with pytest.raises(ConfigError):
            collect_channels(np.zeros(5))

    def test_normalize_channels_independently(self):
        channels = normalize_channels({"x": np.array([2.0, -1.0]), "y": np.array([0.5, 0.25])})
        np.testing.assert_allclose(channels["x"], [1.0, -0.5])
        np.testing.assert_allclose(channels["y"], [1.0, 0.5])

    def test_degenerate_channel_fails_whole_batch(self):
        with pytest.raises(DegenerateNormalizationError):
            normalize_channels({"x": np.array([1.0]), "y": np.zeros(3)})


class TestWriteChannels:
    """WAV output."""

    def test_float32_mono_files(self, tmp_path):
        data = np.array([0.0, 0.5, -1.0, 0.25])
        paths = write_channels({"x": data}, 8000, tmp_path)
        assert paths == [tmp_path / "x.wav"]
        rate, read = wavfile.read(paths[0])
        assert rate == 8000
        assert read.dtype == np.float32
        np.testing.assert_allclose(read, data)


class TestExportAudio:
    """Full bounded audio path."""

    def test_lorenz96_export(self, tmp_path):
        cfg = load_config(overrides={
            "audio": {"total_time": 0.01, "sampling_rate": 1000, "output_dir": str(tmp_path)},
        })
        paths = export_audio(cfg)
        assert [p.name for p in paths] == ["x.wav", "y.wav", "z.wav", "a.wav", "b.wav"]
        for path in paths:
            rate, data = wavfile.read(path)
            assert rate == 1000
            assert len(data) == 10
            assert np.max(np.abs(data)) == pytest.approx(1.0)

    def test_lorenz_export_writes_three_channels(self, tmp_path):
        cfg = load_config(overrides={
            "model": "lorenz",
            "audio": {"total_time": 0.05, "sampling_rate": 200, "output_dir": str(tmp_path / "wav")},
        })
        paths = export_audio(cfg)
        assert sorted(p.name for p in paths) == ["x.wav", "y.wav", "z.wav"]

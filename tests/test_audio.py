"""
Tests for the audio cue state machine and cue routing.

Uses an in-memory backend so no audio device is needed.
"""

from pathlib import Path

import pytest

from gapflight.flight_core.audio import AudioBoard, AudioCue, AudioError, CueState


class FakeSound:
    def __init__(self, path):
        self.path = path
        self.volume = 1.0
        self.playing = False
        self.plays = 0


class FakeBackend:
    """
    Records calls; ``fail_plays`` makes the next N play() calls fail.
    """

    def __init__(self, fail_plays=0, fail_load=False):
        self.fail_plays = fail_plays
        self.fail_load = fail_load
        self.loaded = []

    def load(self, path):
        if self.fail_load:
            raise AudioError(f"sound file not found: {path}")
        sound = FakeSound(path)
        self.loaded.append(sound)
        return sound

    def play(self, sound, loops=0):
        if self.fail_plays > 0:
            self.fail_plays -= 1
            raise AudioError("autoplay blocked")
        sound.playing = True
        sound.plays += 1

    def stop(self, sound):
        sound.playing = False

    def set_volume(self, sound, volume):
        sound.volume = volume


def _cue(backend, volume=0.8):
    return AudioCue("flap", Path("flap.wav"), volume=volume, backend=backend, verbose=False)


class TestAudioCue:
    """Test IDLE / PLAY_REQUESTED / PLAYING / BLOCKED transitions."""

    def test_initial_state(self):
        cue = _cue(FakeBackend())
        assert cue.state is CueState.IDLE

    def test_play_succeeds(self):
        backend = FakeBackend()
        cue = _cue(backend)
        assert cue.play() is CueState.PLAYING
        sound = backend.loaded[0]
        assert sound.playing
        assert sound.volume == 0.8
        assert not cue.muted

    def test_replay_restarts(self):
        """Each play() restarts the same sound."""
        backend = FakeBackend()
        cue = _cue(backend)
        cue.play()
        cue.play()
        assert len(backend.loaded) == 1
        assert backend.loaded[0].plays == 2

    def test_blocked_falls_back_to_muted(self):
        backend = FakeBackend(fail_plays=1)
        cue = _cue(backend)
        assert cue.play() is CueState.BLOCKED
        assert cue.muted
        assert backend.loaded[0].playing
        assert backend.loaded[0].volume == 0.0

    def test_gesture_unmutes(self):
        backend = FakeBackend(fail_plays=1)
        cue = _cue(backend, volume=0.6)
        cue.play()
        cue.notify_gesture()
        assert cue.state is CueState.PLAYING
        assert not cue.muted
        assert backend.loaded[0].volume == 0.6

    def test_muted_retry_failure_goes_idle(self):
        backend = FakeBackend(fail_plays=2)
        cue = _cue(backend)
        assert cue.play() is CueState.IDLE
        assert not cue.muted

        cue.notify_gesture()
        assert cue.state is CueState.IDLE

    def test_missing_file_never_raises(self):
        cue = _cue(FakeBackend(fail_load=True))
        assert cue.play() is CueState.IDLE

    def test_gesture_on_playing_cue_is_noop(self):
        backend = FakeBackend()
        cue = _cue(backend)
        cue.play()
        cue.notify_gesture()
        assert cue.state is CueState.PLAYING

    def test_stop(self):
        backend = FakeBackend()
        cue = _cue(backend)
        cue.play()
        cue.stop()
        assert cue.state is CueState.IDLE
        assert not backend.loaded[0].playing

    def test_warns_once(self, capsys):
        """Repeated failures print a single diagnostic line."""
        backend = FakeBackend(fail_load=True)
        cue = AudioCue("hit", Path("hit.wav"), backend=backend, verbose=True)
        cue.play()
        cue.play()
        out = capsys.readouterr().out
        assert len(out.strip().splitlines()) == 1
        assert out.count("play() blocked") == 1


class TestAudioBoard:
    """Test routing from game cue names to sounds."""

    @pytest.fixture
    def board(self, tmp_path):
        return AudioBoard.from_directory(tmp_path, backend=FakeBackend(), verbose=False)

    def test_flap_and_token_share_sound(self, board):
        board("flap")
        board("token")
        assert board.cue("flap").state is CueState.PLAYING
        assert board.cue("hit").state is CueState.IDLE

    def test_hit(self, board):
        board("hit")
        assert board.cue("hit").state is CueState.PLAYING

    def test_music_start_stop(self, board):
        board("music_start")
        assert board.cue("music").state is CueState.PLAYING
        board("music_stop")
        assert board.cue("music").state is CueState.IDLE

    def test_unknown_cue_ignored(self, board):
        board("fanfare")
        assert all(board.cue(n).state is CueState.IDLE for n in ("flap", "hit", "music"))

    def test_board_gesture_unmutes_all(self, tmp_path):
        board = AudioBoard.from_directory(tmp_path, backend=FakeBackend(fail_plays=1), verbose=False)
        board("music_start")
        assert board.cue("music").state is CueState.BLOCKED
        board.notify_gesture()
        assert board.cue("music").state is CueState.PLAYING

    def test_stop_all(self, board):
        board("music_start")
        board("hit")
        board.stop_all()
        assert board.cue("music").state is CueState.IDLE
        assert board.cue("hit").state is CueState.IDLE

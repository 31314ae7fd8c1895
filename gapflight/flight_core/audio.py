"""
Audio Cues
==========

Fire-and-forget sound playback with a muted-retry fallback.

Each cue runs a small state machine:

    IDLE -> PLAY_REQUESTED -> PLAYING
                           -> BLOCKED  (muted retry playing, waits for a gesture)
                           -> IDLE     (muted retry failed; stays silent)

A user gesture (notify_gesture) unmutes a BLOCKED cue. No method here
raises; audio failures never reach the frame loop.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

AUDIO_DIR = Path(__file__).parent.parent.parent / "assets" / "audio"


class AudioError(Exception):
    """Raised by a backend when a sound cannot be loaded or played."""


class CueState(Enum):
    IDLE = "idle"
    PLAY_REQUESTED = "play_requested"
    PLAYING = "playing"
    BLOCKED = "blocked"


class MixerBackend:
    """pygame.mixer backend; translates pygame failures into AudioError."""

    def _ensure_mixer(self) -> None:
        if not PYGAME_AVAILABLE:
            raise AudioError("pygame is not installed")
        if pygame.mixer.get_init() is None:
            try:
                pygame.mixer.init()
            except pygame.error as e:
                raise AudioError(f"mixer unavailable: {e}") from e

    def load(self, path: Path) -> Any:
        self._ensure_mixer()
        if not Path(path).exists():
            raise AudioError(f"sound file not found: {path}")
        try:
            return pygame.mixer.Sound(str(path))
        except pygame.error as e:
            raise AudioError(f"cannot decode {path}: {e}") from e

    def play(self, sound: Any, loops: int = 0) -> None:
        channel = sound.play(loops=loops)
        if channel is None:
            raise AudioError("no free mixer channel")

    def stop(self, sound: Any) -> None:
        sound.stop()

    def set_volume(self, sound: Any, volume: float) -> None:
        sound.set_volume(volume)


class AudioCue:
    """
    One playable sound.

    play() always restarts from the beginning.
    """

    def __init__(
        self,
        name: str,
        path: Path,
        loops: int = 0,
        volume: float = 1.0,
        backend: Optional[Any] = None,
        verbose: bool = True
    ):
        self.name = name
        self._path = Path(path)
        self._loops = loops
        self._volume = volume
        self._backend = backend if backend is not None else MixerBackend()
        self._verbose = verbose

        self._sound: Optional[Any] = None
        self._state = CueState.IDLE
        self._muted = False
        self._warned = False

    @property
    def state(self) -> CueState:
        return self._state

    @property
    def muted(self) -> bool:
        return self._muted

    def _warn(self, message: str) -> None:
        if self._verbose and not self._warned:
            print(message)
            self._warned = True

    def _start(self, volume: float) -> None:
        if self._sound is None:
            self._sound = self._backend.load(self._path)
        self._backend.stop(self._sound)
        self._backend.set_volume(self._sound, volume)
        self._backend.play(self._sound, self._loops)

    def play(self) -> CueState:
        """Request playback; falls back to a muted retry on failure."""
        self._state = CueState.PLAY_REQUESTED
        try:
            self._start(self._volume)
            self._muted = False
            self._state = CueState.PLAYING
            return self._state
        except AudioError as e:
            self._warn(f"play() blocked for {self._path}: {e}")
            self._state = CueState.BLOCKED

        try:
            self._start(0.0)
            self._muted = True
        except AudioError as e:
            self._warn(f"fallback muted play failed for {self._path}: {e}")
            self._muted = False
            self._state = CueState.IDLE
        return self._state

    def notify_gesture(self) -> None:
        """Restore volume on a cue that is playing muted."""
        if self._state is not CueState.BLOCKED or not self._muted:
            return
        try:
            self._backend.set_volume(self._sound, self._volume)
            self._muted = False
            self._state = CueState.PLAYING
        except AudioError as e:
            self._warn(f"unmute failed for {self._path}: {e}")

    def stop(self) -> None:
        """Halt playback."""
        if self._sound is not None:
            try:
                self._backend.stop(self._sound)
            except AudioError:
                pass
        self._muted = False
        self._state = CueState.IDLE


class AudioBoard:
    """
    Maps game cue names to sounds; usable directly as CoreGame's cue_sink.

    - flap, token: flap sound
    - hit: hit sound
    - music_start / music_stop: looping background music
    """

    def __init__(self, cues: Dict[str, AudioCue]):
        self._cues = cues

    @classmethod
    def from_directory(
        cls,
        audio_dir: Optional[Path] = None,
        backend: Optional[Any] = None,
        verbose: bool = True
    ) -> "AudioBoard":
        audio_dir = Path(audio_dir) if audio_dir is not None else AUDIO_DIR
        backend = backend if backend is not None else MixerBackend()
        return cls({
            "flap": AudioCue("flap", audio_dir / "flap.wav", backend=backend, verbose=verbose),
            "hit": AudioCue("hit", audio_dir / "hit.wav", backend=backend, verbose=verbose),
            "music": AudioCue("music", audio_dir / "music.ogg", loops=-1, volume=0.6,
                              backend=backend, verbose=verbose),
        })

    def cue(self, name: str) -> Optional[AudioCue]:
        return self._cues.get(name)

    def __call__(self, cue_name: str) -> None:
        if cue_name in ("flap", "token"):
            self._play("flap")
        elif cue_name == "hit":
            self._play("hit")
        elif cue_name == "music_start":
            self._play("music")
        elif cue_name == "music_stop":
            music = self._cues.get("music")
            if music is not None:
                music.stop()

    def _play(self, name: str) -> None:
        cue = self._cues.get(name)
        if cue is not None:
            cue.play()

    def notify_gesture(self) -> None:
        """Forward a user gesture to every cue."""
        for cue in self._cues.values():
            cue.notify_gesture()

    def stop_all(self) -> None:
        for cue in self._cues.values():
            cue.stop()

"""
Flight Core - The heart of the game.

This module provides the frame-stepped simulation, the session controller,
and all supporting systems (spawning, progression, scoring, rendering).

Main exports:
- CoreGame: Session controller (start / flap / restart, one step per frame)
- FlightEnv: Gymnasium environment for headless agents
- PhysicsWorld: Avatar, obstacles and tokens
- ProgressionPolicy: Speed and gap from score
- FrameClock / FrameLoop: Bounded delta-time and frame scheduling
- GameConfig: Configuration loaded from game_config.yaml
"""

from gapflight.flight_core.config_loader import GameConfig, load_config
from gapflight.flight_core.entities import Avatar, Obstacle, BonusToken
from gapflight.flight_core.physics_world import PhysicsWorld, FrameEvents
from gapflight.flight_core.progression import ProgressionPolicy
from gapflight.flight_core.scoring import ScoreTracker
from gapflight.flight_core.clock import FrameClock, FrameLoop
from gapflight.flight_core.game import CoreGame, Phase, StepResult
from gapflight.flight_core.env_gym import FlightEnv

__all__ = [
    "GameConfig",
    "load_config",
    "Avatar",
    "Obstacle",
    "BonusToken",
    "PhysicsWorld",
    "FrameEvents",
    "ProgressionPolicy",
    "ScoreTracker",
    "FrameClock",
    "FrameLoop",
    "CoreGame",
    "Phase",
    "StepResult",
    "FlightEnv",
]

"""
Gap Flight Package
==================

Core simulation, rendering and presentation for Gap Flight, a one-button
arcade game: keep the avatar airborne, pass through the gaps, grab tokens.

- flight_core: simulation, session controller, renderer, audio, HUD
- game_config.yaml: every tunable constant of the game
"""

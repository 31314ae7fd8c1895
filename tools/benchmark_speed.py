"""
Performance Benchmark
=====================

Measures frame throughput of the simulation, the Gymnasium wrapper and the
headless renderer.

Usage:
    python -m tools.benchmark_speed [--frames N] [--quick]
"""

from __future__ import annotations

import argparse
import os
import sys
import time

import numpy as np

from gapflight.flight_core.config_loader import load_config
from gapflight.flight_core.env_gym import FlightEnv
from gapflight.flight_core.game import CoreGame


def _random_policy(rng: np.random.Generator, flap_prob: float = 0.08) -> int:
    return int(rng.random() < flap_prob)


def benchmark_core_game(
    num_frames: int = 5000,
    seed: int = 42
) -> dict:
    """
    Benchmark raw CoreGame without Gym overhead.

    Args:
        num_frames: Number of frames.
        seed: Random seed.

    Returns:
        Dict with timing results.
    """
    config = load_config()
    game = CoreGame(config=config, seed=seed)
    rng = np.random.default_rng(seed)
    dt = 1.0 / config.session.frame_rate

    game.start()
    start = time.perf_counter()
    sessions = 1

    for _ in range(num_frames):
        if _random_policy(rng) or game.is_over:
            if game.is_over:
                sessions += 1
            game.trigger()
        game.step(dt)

    elapsed = time.perf_counter() - start

    return {
        "mode": "core_game",
        "num_frames": num_frames,
        "sessions": sessions,
        "best_score": game.best_score,
        "elapsed_seconds": elapsed,
        "frames_per_second": num_frames / elapsed,
        "ms_per_frame": (elapsed * 1000) / num_frames
    }


def benchmark_env(
    num_frames: int = 5000,
    seed: int = 42,
    render: bool = False
) -> dict:
    """
    Benchmark FlightEnv, optionally rendering every frame.

    Args:
        num_frames: Number of env steps.
        seed: Random seed.
        render: Also produce an RGB frame per step.

    Returns:
        Dict with timing results.
    """
    env = FlightEnv(render_mode="rgb_array" if render else None)
    rng = np.random.default_rng(seed)

    env.reset(seed=seed)
    start = time.perf_counter()

    for _ in range(num_frames):
        _, _, terminated, truncated, _ = env.step(_random_policy(rng))
        if render:
            env.render()
        if terminated or truncated:
            env.reset()

    elapsed = time.perf_counter() - start
    env.close()

    return {
        "mode": "env_render" if render else "env",
        "num_frames": num_frames,
        "elapsed_seconds": elapsed,
        "frames_per_second": num_frames / elapsed,
        "ms_per_frame": (elapsed * 1000) / num_frames
    }


def run_all_benchmarks(frames: int = 5000, include_render: bool = True) -> list:
    """Run all benchmarks and print a summary table."""
    results = []

    print("=" * 60)
    print("GAP FLIGHT PERFORMANCE BENCHMARK")
    print("=" * 60)
    print()

    print("Benchmarking CoreGame (raw)...")
    results.append(benchmark_core_game(num_frames=frames))

    print("Benchmarking FlightEnv...")
    results.append(benchmark_env(num_frames=frames))

    if include_render:
        # Headless rendering needs no window
        os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
        print("Benchmarking FlightEnv + rgb_array render...")
        results.append(benchmark_env(num_frames=max(1, frames // 10), render=True))

    print()
    print(f"{'Mode':<16} {'Frames':>8} {'Frames/s':>12} {'ms/frame':>10}")
    print("-" * 50)
    for r in results:
        print(f"{r['mode']:<16} {r['num_frames']:>8} {r['frames_per_second']:>12.1f} {r['ms_per_frame']:>10.3f}")

    return results


def main():
    parser = argparse.ArgumentParser(description="Benchmark Gap Flight performance")
    parser.add_argument("--frames", type=int, default=5000, help="Frames per benchmark")
    parser.add_argument("--no-render", action="store_true", help="Skip the render benchmark")
    parser.add_argument("--quick", action="store_true", help="Quick benchmark (fewer frames)")

    args = parser.parse_args()

    frames = 500 if args.quick else args.frames
    run_all_benchmarks(frames=frames, include_render=not args.no_render)
    return 0


if __name__ == "__main__":
    sys.exit(main())

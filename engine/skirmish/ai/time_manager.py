"""
Time management for timed search.

The search polls a Deadline at the top of every iteration. A TimeManager
decides how long each move may think, optionally spreading a game clock
over the expected number of remaining moves.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional
import time


@dataclass
class Deadline:
    """Wall-clock budget for one search."""
    budget_ms: float
    started: float = field(default_factory=time.perf_counter)

    @classmethod
    def start(cls, budget_ms: float, floor_ms: float = 0.0) -> Deadline:
        """Start a deadline now; budgets below floor_ms are raised to it."""
        return cls(budget_ms=max(floor_ms, budget_ms))

    @property
    def elapsed(self) -> float:
        """Seconds since start."""
        return time.perf_counter() - self.started

    def expired(self) -> bool:
        return self.elapsed * 1000.0 >= self.budget_ms


@dataclass
class TimeConfig:
    """Configuration for time-managed search."""

    # Total game time in seconds (None = fixed time per move)
    total_time: Optional[float] = None

    # Per-move limits in milliseconds
    min_move_time_ms: int = 10
    max_move_time_ms: int = 5000
    default_move_time_ms: int = 300  # Used when no game clock

    # Reserve this much time (seconds) at end of game
    time_buffer: float = 1.0

    # Estimated game length for initial time allocation
    estimated_moves: int = 40


@dataclass
class TimeManager:
    """
    Tracks remaining game time and converts it into per-move budgets.
    """

    config: TimeConfig = field(default_factory=TimeConfig)

    # Time tracking
    remaining_time: float = field(init=False)
    moves_played: int = 0
    estimated_moves_remaining: int = field(init=False)

    # Statistics for analysis
    total_iterations: int = 0
    total_time_used: float = 0.0

    def __post_init__(self):
        """Initialize time tracking."""
        if self.config.total_time is not None:
            self.remaining_time = max(0.0, self.config.total_time - self.config.time_buffer)
        else:
            self.remaining_time = float('inf')
        self.estimated_moves_remaining = self.config.estimated_moves

    def get_move_budget_ms(self) -> int:
        """
        Milliseconds to spend on the next move.

        Without a game clock this is the default move time. With one, the
        remaining time is split evenly over the estimated remaining moves.
        Both are clamped to [min_move_time_ms, max_move_time_ms].
        """
        if self.config.total_time is None:
            target = self.config.default_move_time_ms
        else:
            per_move = self.remaining_time / max(1, self.estimated_moves_remaining)
            target = int(per_move * 1000)

        return max(self.config.min_move_time_ms,
                   min(self.config.max_move_time_ms, target))

    def update(self, elapsed_time: float, iterations_run: int) -> None:
        """
        Update time manager after a move.

        Args:
            elapsed_time: Time spent on this move (seconds)
            iterations_run: Number of search iterations actually run
        """
        self.remaining_time = max(0.0, self.remaining_time - elapsed_time)
        self.moves_played += 1
        self.estimated_moves_remaining = max(1, self.estimated_moves_remaining - 1)

        self.total_iterations += iterations_run
        self.total_time_used += elapsed_time

    @property
    def avg_iterations_per_move(self) -> float:
        if self.moves_played == 0:
            return 0.0
        return self.total_iterations / self.moves_played

    @property
    def avg_time_per_move(self) -> float:
        """Average time per move so far (seconds)."""
        if self.moves_played == 0:
            return 0.0
        return self.total_time_used / self.moves_played

    def stats(self) -> dict:
        """Return statistics about time management."""
        return {
            'remaining_time': self.remaining_time,
            'moves_played': self.moves_played,
            'estimated_moves_remaining': self.estimated_moves_remaining,
            'total_iterations': self.total_iterations,
            'total_time_used': self.total_time_used,
            'avg_iterations_per_move': self.avg_iterations_per_move,
            'avg_time_per_move': self.avg_time_per_move,
        }


def create_time_manager(
    total_time: Optional[float] = None,
    move_time_ms: int = 300,
    min_move_time_ms: int = 10,
) -> TimeManager:
    """
    Create a time manager with given settings.

    Args:
        total_time: Total game time in seconds, or None for a fixed time per move
        move_time_ms: Time per move when there is no game clock
        min_move_time_ms: Lower bound for any move

    Returns:
        Configured TimeManager instance.
    """
    config = TimeConfig(
        total_time=total_time,
        default_move_time_ms=move_time_ms,
        min_move_time_ms=min_move_time_ms,
    )
    return TimeManager(config=config)

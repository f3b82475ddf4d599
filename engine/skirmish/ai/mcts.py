"""
Monte Carlo Tree Search for the pawns-and-knights variant.

Plain UCT: selection by mean value plus an exploration bonus, one child
expanded per iteration, a random rollout scored by material, and a backup
that flips the sign at every level.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import NamedTuple, Optional, Protocol
import logging
import math
import numpy as np

from ..core.board import BoardState, Color
from ..core.moves import SimpleMove, generate_simple_moves, apply_move
from .evaluator import MaterialEvaluator
from .time_manager import Deadline, TimeManager

logger = logging.getLogger(__name__)


class Evaluator(Protocol):
    """Protocol for position evaluators."""
    def evaluate(self, board: BoardState) -> int:
        """Return a White-relative score for board."""
        ...


@dataclass
class MCTSConfig:
    """Configuration for MCTS."""
    exploration: float = math.sqrt(2.0)  # UCT constant C
    rollout_plies: int = 24  # 12 moves per side max in a rollout
    min_time_ms: int = 10  # Floor applied to any requested budget
    max_iterations: Optional[int] = None  # Optional cap; one iteration always runs
    seed: Optional[int] = None  # Seed for the default random generator


@dataclass(eq=False)
class Node:
    """
    A node in the search tree.

    value_sum accumulates rollout results; the sign flips at every level
    on the way up, so each node's mean is read relative to its parent's
    choice.
    """
    board: BoardState
    side: Color
    move: Optional[SimpleMove] = None  # None for the root
    parent: Optional[Node] = field(default=None, repr=False)
    untried_moves: Optional[list[SimpleMove]] = field(default=None, repr=False)
    children: list[Node] = field(default_factory=list, repr=False)

    # Statistics
    visit_count: int = 0
    value_sum: float = 0.0

    def __post_init__(self) -> None:
        if self.untried_moves is None:
            self.untried_moves = generate_simple_moves(self.board, self.side)

    @property
    def value(self) -> float:
        """Mean value of this node (0 when unvisited)."""
        if self.visit_count == 0:
            return 0.0
        return self.value_sum / self.visit_count

    def is_fully_expanded(self) -> bool:
        return not self.untried_moves

    def is_terminal(self) -> bool:
        """No untried moves and no children: the side to move had nothing to play."""
        return not self.untried_moves and not self.children

    def uct_score(self, parent_visits: int, exploration: float) -> float:
        """
        UCT = mean + C * sqrt(ln(parent_visits) / child_visits)

        Both visit counts are floored at 1.
        """
        bonus = math.sqrt(math.log(max(1, parent_visits)) / max(1, self.visit_count))
        return self.value + exploration * bonus

    def select_child(self, exploration: float) -> Node:
        """Child with the highest UCT score (first one wins ties)."""
        best_score = float('-inf')
        best_child = None

        for child in self.children:
            score = child.uct_score(self.visit_count, exploration)
            if score > best_score:
                best_score = score
                best_child = child

        return best_child

    def expand(self, rng: np.random.Generator) -> Node:
        """Remove one untried move at random and add the resulting child."""
        if not self.untried_moves:
            return self
        move = self.untried_moves.pop(int(rng.integers(len(self.untried_moves))))
        child = Node(
            board=apply_move(self.board, move),
            side=self.side.opponent,
            move=move,
            parent=self,
        )
        self.children.append(child)
        return child

    def backpropagate(self, value: float) -> None:
        """Add value here and walk to the root, negating at each level."""
        node = self
        while node is not None:
            node.visit_count += 1
            node.value_sum += value
            node = node.parent
            value = -value

    def tree_size(self) -> int:
        """Number of nodes in the subtree rooted here."""
        count = 0
        stack = [self]
        while stack:
            node = stack.pop()
            count += 1
            stack.extend(node.children)
        return count


class MoveChoice(NamedTuple):
    """Decision returned by the driver."""
    move: SimpleMove
    board: BoardState


class MCTS:
    """
    Time-bounded Monte Carlo Tree Search with random rollouts.

    Randomness comes from an injected numpy Generator so searches can be
    reproduced in tests.
    """

    def __init__(
        self,
        evaluator: Optional[Evaluator] = None,
        config: Optional[MCTSConfig] = None,
        rng: Optional[np.random.Generator] = None
    ):
        self.evaluator = evaluator or MaterialEvaluator()
        self.config = config or MCTSConfig()
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)

    def search(self, board: BoardState, side: Color, time_budget_ms: float) -> tuple[Node, dict]:
        """
        Run MCTS from board with side to move until the deadline passes.

        At least one iteration runs whenever side has a move. A root with no
        moves returns immediately without iterating.

        Returns (root_node, info_dict).
        """
        deadline = Deadline.start(time_budget_ms, self.config.min_time_ms)
        root = Node(board=board, side=side)

        iterations = 0
        if root.is_terminal():
            logger.info(f"No moves for {side}; search skipped")
        else:
            cap = self.config.max_iterations
            while True:
                # The first iteration always runs so a decision exists
                if iterations > 0 and (deadline.expired() or (cap is not None and iterations >= cap)):
                    break
                self._iterate(root)
                iterations += 1

        elapsed = deadline.elapsed
        info = {
            'iterations': iterations,
            'budget_ms': deadline.budget_ms,
            'elapsed_time': elapsed,
            'tree_size': root.tree_size(),
            'iterations_per_second': iterations / elapsed if elapsed > 0 else 0,
        }
        logger.debug(
            f"Search for {side}: {iterations} iterations in {elapsed * 1000:.1f}ms, "
            f"{info['tree_size']} nodes"
        )
        return root, info

    def _iterate(self, root: Node) -> None:
        """Run one select/expand/rollout/backup cycle."""
        node = root

        # SELECT: descend through fully expanded nodes
        while node.is_fully_expanded() and node.children:
            node = node.select_child(self.config.exploration)

        # EXPAND
        if not node.is_fully_expanded():
            node = node.expand(self.rng)

        # SIMULATE
        value = self.rollout(node.board, node.side, root.side)

        # BACKUP
        node.backpropagate(value)

    def rollout(self, board: BoardState, side: Color, root_side: Color) -> float:
        """
        Play random moves for up to rollout_plies and score the result.

        Stops early when the side to move has no moves. The score is
        material from root_side's point of view.
        """
        for _ in range(self.config.rollout_plies):
            moves = generate_simple_moves(board, side)
            if not moves:
                break
            board = apply_move(board, moves[int(self.rng.integers(len(moves)))])
            side = side.opponent

        score = self.evaluator.evaluate(board)  # positive = White ahead
        return float(score if root_side == Color.WHITE else -score)

    def select_move(self, root: Node) -> Node:
        """Robust child: the most visited child of root."""
        if not root.children:
            raise ValueError("No legal moves")
        return max(root.children, key=lambda c: c.visit_count)

    def analyze(self, root: Node, top_k: int = 5) -> list[dict]:
        """
        Analyze search results.

        Returns list of top moves with statistics.
        """
        moves = []
        for child in root.children:
            moves.append({
                'move': child.move,
                'algebraic': str(child.move),
                'visits': child.visit_count,
                'value': child.value,
            })

        moves.sort(key=lambda m: m['visits'], reverse=True)
        return moves[:top_k]

    def search_timed(
        self,
        board: BoardState,
        side: Color,
        time_manager: TimeManager
    ) -> tuple[Node, dict]:
        """
        Run MCTS with the budget chosen by time_manager, then charge the
        time used to it.

        Returns (root_node, info_dict).
        """
        budget_ms = time_manager.get_move_budget_ms()
        root, info = self.search(board, side, budget_ms)
        time_manager.update(info['elapsed_time'], info['iterations'])
        return root, info


def choose_move(
    board: BoardState,
    side: Color,
    time_budget_ms: float,
    config: Optional[MCTSConfig] = None,
    rng: Optional[np.random.Generator] = None,
    evaluator: Optional[Evaluator] = None
) -> Optional[MoveChoice]:
    """
    Pick a move for side by searching for about time_budget_ms.

    Returns the most visited root move with its resulting board, or None
    when side has no moves.
    """
    mcts = MCTS(evaluator, config, rng)
    root, _ = mcts.search(board, side, time_budget_ms)
    if not root.children:
        return None
    best = mcts.select_move(root)
    return MoveChoice(best.move, best.board)

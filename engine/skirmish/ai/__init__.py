"""AI components: material evaluation, time management and MCTS."""

from .evaluator import MaterialEvaluator, evaluate_material
from .time_manager import Deadline, TimeConfig, TimeManager
from .mcts import MCTS, MCTSConfig, MoveChoice, choose_move

"""Space invaders - simulation core, arcade front-end and gymnasium environment"""

from .simulation import GameState, Simulation, level_message
from .formations import generate_formation

__all__ = ['GameState', 'Simulation', 'level_message', 'generate_formation']

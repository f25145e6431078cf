"""
Panda Stack Core - the game simulation and its interfaces.

This module provides the tick-driven game, its rule components, renderers
and a Gymnasium environment wrapper.

Main exports:
- CoreGame: Game orchestrator, one tick per frame
- PandaStackEnv: Gymnasium environment for agents
- GameConfig: Configuration loaded from game_config.yaml
- FeedbackHooks / GameEvent: Fire-and-forget feedback events
"""

from panda_stack.core.config_loader import GameConfig, load_config, get_config
from panda_stack.core.entity import Entity
from panda_stack.core.stack import Stack
from panda_stack.core.stacking import StackingResolver, LandingDecision
from panda_stack.core.camera import Camera
from panda_stack.core.session import SessionState, Phase
from panda_stack.core.events import FeedbackHooks, GameEvent
from panda_stack.core.input import InputBuffer, DragTracker, LEFT, RIGHT
from panda_stack.core.game import CoreGame, TickResult
from panda_stack.core.env_gym import PandaStackEnv

__all__ = [
    "GameConfig",
    "load_config",
    "get_config",
    "Entity",
    "Stack",
    "StackingResolver",
    "LandingDecision",
    "Camera",
    "SessionState",
    "Phase",
    "FeedbackHooks",
    "GameEvent",
    "InputBuffer",
    "DragTracker",
    "LEFT",
    "RIGHT",
    "CoreGame",
    "TickResult",
    "PandaStackEnv",
]

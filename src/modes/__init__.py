from src.modes.base import ModeRegistry
from src.modes.chat.handler import mode as chat_mode
from src.modes.classify.handler import mode as classify_mode
from src.modes.council.handler import mode as council_mode
from src.modes.plan.handler import mode as plan_mode


def create_registry() -> ModeRegistry:
    """Create and populate the mode registry."""
    registry = ModeRegistry()
    registry.register(chat_mode)
    registry.register(classify_mode)
    registry.register(plan_mode)
    registry.register(council_mode)
    return registry

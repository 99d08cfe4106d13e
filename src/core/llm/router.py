from dataclasses import dataclass

from src.core.config import Settings, settings as default_settings


@dataclass(frozen=True)
class ModelConfig:
    model_id: str


class ModelRouter:
    """Routes request modes to gateway models.

    Unknown modes resolve to the chat model.
    """

    def __init__(self, settings: Settings | None = None):
        cfg = settings or default_settings
        self._task_model_map: dict[str, ModelConfig] = {
            "classify": ModelConfig(model_id=cfg.classify_model),
            "plan": ModelConfig(model_id=cfg.plan_model),
            "council": ModelConfig(model_id=cfg.council_model),
            "chat": ModelConfig(model_id=cfg.chat_model),
        }

    def get_model(self, task: str) -> ModelConfig:
        config = self._task_model_map.get(task)
        if config is None:
            return self._task_model_map["chat"]
        return config

"""YAML instruction contracts with startup validation.

Each mode keeps its system prompt in a versioned ``prompts.yaml`` next to
its handler module. Files are read on every call and nothing is cached;
handlers use ``aload_prompt`` so the read happens off the event loop.

Usage in a mode handler::

    from pathlib import Path
    from src.modes.prompt_loader import aload_prompt

    prompts = await aload_prompt(Path(__file__).parent)
    system = prompts["system_prompt"].format(current_page="stream")
"""

import asyncio
import logging
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

REQUIRED_KEYS = ("version", "system_prompt")


class PromptContractError(ValueError):
    """A prompts.yaml file is missing or unusable."""


def load_prompt(mode_dir: Path) -> dict[str, Any]:
    """Load and check ``prompts.yaml`` for a mode directory."""
    yaml_path = mode_dir / "prompts.yaml"
    try:
        data = yaml.safe_load(yaml_path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise PromptContractError(f"{yaml_path}: not found") from e
    except yaml.YAMLError as e:
        raise PromptContractError(f"{yaml_path}: {e}") from e

    problems = _check_contract(data)
    if problems:
        raise PromptContractError(f"{yaml_path}: {'; '.join(problems)}")
    return data


async def aload_prompt(mode_dir: Path) -> dict[str, Any]:
    """``load_prompt`` in a worker thread, for use inside request handlers."""
    return await asyncio.to_thread(load_prompt, mode_dir)


def _check_contract(data: Any) -> list[str]:
    if not isinstance(data, dict):
        return [f"expected a YAML mapping, got {type(data).__name__}"]
    return [f"missing required {key!r} key" for key in REQUIRED_KEYS if key not in data]


def validate_all_prompts(modes_dir: Path) -> list[str]:
    """Validate every ``prompts.yaml`` found under *modes_dir*.

    Returns a list of human-readable error strings (empty = all good).
    Called at application startup to catch typos early.
    """
    errors: list[str] = []
    for yaml_path in sorted(modes_dir.rglob("prompts.yaml")):
        try:
            data = yaml.safe_load(yaml_path.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            errors.append(f"{yaml_path}: {exc}")
            continue
        errors.extend(f"{yaml_path}: {problem}" for problem in _check_contract(data))
    return errors

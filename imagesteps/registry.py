import logging
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional

from .steps import BUILTIN_STEPS, StepImplementation

logger = logging.getLogger(__name__)


def build_registry(implementations: Iterable[StepImplementation]) -> Mapping[str, StepImplementation]:
    """
    Build the read-only action -> implementation table. Runs once at import;
    nothing registers steps afterwards.
    """
    table: Dict[str, StepImplementation] = {}
    for impl in implementations:
        if impl.name in table:
            raise ValueError(f"Duplicate step action: {impl.name}")
        table[impl.name] = impl
        logger.debug("Registered step %s", impl.name)
    return MappingProxyType(table)


_REGISTRY = build_registry(BUILTIN_STEPS)


def resolve_step(action: str) -> Optional[StepImplementation]:
    return _REGISTRY.get(action)


def available_steps() -> List[str]:
    return sorted(_REGISTRY)

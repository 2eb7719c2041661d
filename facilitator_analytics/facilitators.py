import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

from loguru import logger
from pydantic import BaseModel, Field, ValidationError, field_validator

from facilitator_analytics.exceptions import FacilitatorConfigError
from facilitator_analytics.utils import normalize_address


class Facilitator(BaseModel):
    id: str = Field(..., description="Stable identifier used by the dashboard")
    name: str = Field(..., description="Display name, also the SQL label for the address cluster")
    addresses: List[str] = Field(..., min_length=1, description="Relayer addresses sending facilitated transactions")

    @field_validator('addresses')
    @classmethod
    def validate_addresses(cls, v):
        return [normalize_address(a) for a in v]


class FacilitatorRegistry:
    """Known facilitators plus the lookups the queries need."""

    def __init__(self, facilitators: List[Facilitator]):
        self.facilitators = list(facilitators)
        self._by_name = {f.name: f for f in self.facilitators}

    def __iter__(self):
        return iter(self.facilitators)

    def __len__(self):
        return len(self.facilitators)

    @property
    def names(self) -> List[str]:
        return [f.name for f in self.facilitators]

    @property
    def all_addresses(self) -> List[str]:
        return [address for f in self.facilitators for address in f.addresses]

    def get_by_name(self, name: str) -> Optional[Facilitator]:
        return self._by_name.get(name)


def load_facilitators(config_path: str = None) -> FacilitatorRegistry:
    """
    Load the facilitator registry from a JSON file.

    Args:
        config_path: Optional path to the registry file. Falls back to the
            FACILITATORS_CONFIG environment variable, then the bundled file.

    Returns:
        FacilitatorRegistry built from the file

    Raises:
        FacilitatorConfigError: If the file is missing, not JSON, or fails validation
    """
    if config_path is None:
        config_path = os.getenv('FACILITATORS_CONFIG') or Path(__file__).parent / 'facilitators.json'

    config_path = Path(config_path)

    if not config_path.exists():
        raise FacilitatorConfigError(f"Facilitator registry not found at {config_path}")

    try:
        with open(config_path, 'r') as f:
            config_data = json.load(f)
    except json.JSONDecodeError as e:
        raise FacilitatorConfigError(f"Invalid JSON in facilitator registry {config_path}: {e}") from e

    registry = _build_registry(config_data)
    logger.info(f"Loaded {len(registry)} facilitators from {config_path}")
    return registry


def _build_registry(config: Dict[str, Any]) -> FacilitatorRegistry:
    if not isinstance(config, dict) or not isinstance(config.get('facilitators'), list):
        raise FacilitatorConfigError("Missing required configuration key: facilitators")

    try:
        facilitators = [Facilitator.model_validate(entry) for entry in config['facilitators']]
    except ValidationError as e:
        raise FacilitatorConfigError(f"Invalid facilitator entry: {e}") from e

    seen = set()
    for facilitator in facilitators:
        if facilitator.name in seen:
            raise FacilitatorConfigError(f"Duplicate facilitator name: {facilitator.name}")
        seen.add(facilitator.name)

    return FacilitatorRegistry(facilitators)


@lru_cache(maxsize=1)
def get_facilitators() -> FacilitatorRegistry:
    return load_facilitators()

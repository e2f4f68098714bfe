"""Settings for loading dictionaries."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, fields

from .dictionary import ItemShape, MalformedInputError, Serialization

logger = logging.getLogger(__name__)


@dataclass
class RubifierSettings:
    """Dictionary sources plus how their lists are encoded."""
    # Each entry is a payload mapping, a file path or an http(s) URL
    dictionaries: list = field(default_factory=list)
    format: ItemShape = ItemShape.OBJECT
    serialization: Serialization = Serialization.JSON

    def __post_init__(self):
        try:
            self.format = ItemShape(self.format)
        except ValueError:
            raise MalformedInputError(f'Unknown dictionary format: {self.format!r}') from None
        try:
            self.serialization = Serialization(self.serialization)
        except ValueError:
            raise MalformedInputError(
                f'Unknown dictionary serialization: {self.serialization!r}'
            ) from None
        if isinstance(self.dictionaries, (str, Mapping)):
            self.dictionaries = [self.dictionaries]
        else:
            self.dictionaries = list(self.dictionaries)

    @classmethod
    def from_mapping(cls, options: Mapping | None = None) -> 'RubifierSettings':
        """Build settings from a plain dict, ignoring keys it does not know."""
        options = dict(options or {})
        known = {f.name for f in fields(cls)}
        for key in list(options):
            if key not in known:
                logger.warning(f'Ignoring unknown setting: {key}')
                del options[key]
        return cls(**options)

"""Base model for database models."""
from typing import Dict, Any


class BaseModel:
    """Dict-backed record; unknown fields are carried through untouched."""

    id_field = '_id'

    def __init__(self, **kwargs):
        """Initialize model with data."""
        self._data = kwargs

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BaseModel':
        """Create model instance from dictionary."""
        return cls(**data)

    @property
    def id(self) -> str:
        return str(self._data.get(self.id_field))

    def __getattr__(self, name: str) -> Any:
        """Get attribute from data."""
        if name.startswith('_'):
            raise AttributeError(name)
        return self._data.get(name)

    def __repr__(self) -> str:
        """String representation."""
        return f"{self.__class__.__name__}({self._data})"

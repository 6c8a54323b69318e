"""Base model class for dbwrapper models with serialization support."""

from typing import Any, Dict
from pydantic import BaseModel, ConfigDict


class DbWrapperBaseModel(BaseModel):
    """Base model for all dbwrapper models with built-in serialization.

    Provides common functionality for all dbwrapper models including:
    - Serialization to dictionary via to_dict()
    - Consistent configuration
    """
    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        validate_assignment=True
    )

    def to_dict(self) -> Dict[str, Any]:
        """Convert model to dictionary for serialization.

        Enum members are flattened to their values so the result is
        JSON friendly.

        Returns:
            Dictionary representation suitable for JSON serialization
        """
        data = self.model_dump(by_alias=False, exclude_none=True)

        def convert_nested(obj):
            if isinstance(obj, dict):
                return {k: convert_nested(v) for k, v in obj.items()}
            elif isinstance(obj, (list, tuple)):
                return [convert_nested(item) for item in obj]
            elif hasattr(obj, 'value'):  # Handle enums
                return obj.value
            return obj

        return convert_nested(data)

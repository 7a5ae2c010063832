from pydantic import BaseModel, ConfigDict, ValidationError
from typing import Any, Dict, Optional

class BaseLeagueModel(BaseModel):
    """Shared configuration for league records: every assignment is validated."""
    model_config = ConfigDict(validate_assignment=True)

    def update_field(self, field_name: str, value: Any) -> Optional[str]:
        """Apply one admin correction. Returns the error message if rejected (field left unchanged)."""
        if field_name not in type(self).model_fields:
            return f"Unknown field: {field_name}"
        try:
            setattr(self, field_name, value)
        except ValidationError as e:
            return e.errors()[0]['msg']
        return None

    def update_fields(self, **fields: Any) -> Dict[str, str]:
        """Apply several corrections. Returns {field: message} for the rejected ones."""
        errors = {}
        for name, value in fields.items():
            message = self.update_field(name, value)
            if message:
                errors[name] = message
        return errors

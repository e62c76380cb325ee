from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any, Optional

from .errors import InvalidConfigError


@dataclass(frozen=True)
class ClassifierConfig:
    """
    Stable, SDK-first configuration for snippet classification.

    The CLI and HTTP service map flags/payloads -> this object; the SDK accepts it directly.
    """

    # Model asset. None -> $SNIPPET_LID_MODEL_PATH, then the packaged model.
    model_path: Optional[str] = None

    # Truncate input before tokenization. None -> classify the full text.
    max_input_chars: Optional[int] = None

    # Serialization schema version for backwards-compatible config dicts.
    # NOTE: keep this field last to avoid breaking positional construction.
    schema_version: int = 1

    def normalized(self) -> "ClassifierConfig":
        """Return a normalized config (types/constraints)."""

        max_chars: Optional[int] = None
        if self.max_input_chars is not None:
            try:
                max_chars = int(self.max_input_chars)
            except (TypeError, ValueError):
                raise InvalidConfigError("max_input_chars must be an integer") from None
            if max_chars < 1:
                raise InvalidConfigError("max_input_chars must be >= 1")

        model_path = None if self.model_path is None else str(self.model_path).strip() or None
        return ClassifierConfig(
            model_path=model_path,
            max_input_chars=max_chars,
            schema_version=max(1, int(self.schema_version)),
        )

    def to_dict(self) -> dict[str, object]:
        return dict(asdict(self))

    @classmethod
    def from_dict(cls, data: dict[str, object], *, strict: bool = False) -> "ClassifierConfig":
        """
        Load a config from a JSON-friendly dict.

        Backward compatibility policy:
          - Dicts without `schema_version` are accepted.
          - Unknown keys are ignored by default (strict=False).
        """

        if not isinstance(data, dict):
            raise InvalidConfigError("config must be a dict")

        allowed = {f.name for f in fields(cls)}
        unknown = sorted([k for k in data.keys() if k not in allowed])
        if unknown and strict:
            raise InvalidConfigError(f"Unknown config keys: {', '.join(unknown)}")

        def as_opt_str(v: Any) -> Optional[str]:
            if v is None:
                return None
            s = str(v).strip()
            return s if s else None

        kwargs: dict[str, Any] = {}
        if "model_path" in data:
            kwargs["model_path"] = as_opt_str(data.get("model_path"))
        if "max_input_chars" in data:
            kwargs["max_input_chars"] = data.get("max_input_chars")

        v = data.get("schema_version")
        try:
            kwargs["schema_version"] = 1 if v is None else int(v)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            kwargs["schema_version"] = 1

        return cls(**kwargs).normalized()

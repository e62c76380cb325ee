from __future__ import annotations

from typing import Any, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from .classifier import LanguageClassifier
from .config import ClassifierConfig
from .errors import EmptyInputError, InvalidConfigError
from .model import LanguageModel

API_SCHEMA_VERSION = 1


class ApiModel(BaseModel):
    # Backward compatibility: ignore unknown request fields.
    model_config = ConfigDict(extra="ignore")


class ClassifyRequest(ApiModel):
    schema_version: int = Field(default=API_SCHEMA_VERSION, ge=1)
    text: str
    scores: bool = False
    config: Optional[dict[str, Any]] = None


class ClassifyResponse(ApiModel):
    schema_version: int
    language: str
    n_tokens: int
    n_known_tokens: int
    votes: Optional[dict[str, float]] = None


class LabelsResponse(ApiModel):
    schema_version: int
    languages: list[str]


def _ensure_supported_schema_version(v: int) -> None:
    # Missing -> current; equal -> accepted; future -> explicit client error.
    if int(v) > API_SCHEMA_VERSION:
        raise HTTPException(
            status_code=400,
            detail=(
                f"Unsupported schema_version={v}. "
                f"Server supports <= {API_SCHEMA_VERSION}."
            ),
        )


def create_app(*, model: Optional[LanguageModel] = None) -> FastAPI:
    app = FastAPI(
        title="snippet-lid API",
        version=str(API_SCHEMA_VERSION),
        description="Programming-language identification for code snippets.",
    )
    # Model path is fixed per process; request configs may only tune per-call options.
    classifier = LanguageClassifier(model=model)

    @app.get("/healthz")
    def healthz() -> dict[str, object]:
        return {"ok": True, "schema_version": API_SCHEMA_VERSION}

    @app.get("/labels", response_model=LabelsResponse)
    def labels_endpoint() -> LabelsResponse:
        return LabelsResponse(
            schema_version=API_SCHEMA_VERSION,
            languages=list(classifier.model.labels.languages()),
        )

    @app.post("/classify", response_model=ClassifyResponse)
    def classify_endpoint(req: ClassifyRequest) -> ClassifyResponse:
        _ensure_supported_schema_version(req.schema_version)
        clf = classifier
        try:
            if req.config:
                cfg = ClassifierConfig.from_dict(req.config)
                clf = LanguageClassifier(
                    model=classifier.model,
                    config=ClassifierConfig(max_input_chars=cfg.max_input_chars),
                )
            result = clf.analyze(req.text or "")
        except (EmptyInputError, InvalidConfigError) as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

        return ClassifyResponse(
            schema_version=API_SCHEMA_VERSION,
            language=result.language,
            n_tokens=result.n_tokens,
            n_known_tokens=result.n_known_tokens,
            votes=result.votes if req.scores else None,
        )

    return app


app = create_app()

"""REST API routes for analysis parsing and Suno pack generation."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from music_factory.models.analysis import Analysis, TargetLength
from music_factory.models.pack import (
    AnalyzeReferenceSongRequest,
    AnalyzeReferenceSongResult,
    GenerateNoteResult,
    GenerateSunoPackResult,
    SaveSongAnalysisResult,
    SunoPack,
    ValidationResult,
)
from music_factory.models.parsed_analysis import ParsedAnalysis, ParseValidation
from music_factory.preprocessing.analysis_markdown import (
    parse_analysis_markdown,
    validate_parsed_analysis,
)
from music_factory.services import pack_service
from music_factory.services.patterns import CORE_TYPE_PATTERNS
from music_factory.services.storage import DataStore
from music_factory.services.validator import validate_suno_pack

log = logging.getLogger(__name__)


class SaveAnalysisRequest(BaseModel):
    slug: str = Field(description="File name without extension, e.g. 'yoasobi_idol'")
    markdown: str = Field(description="Analysis markdown content")


class ParseMarkdownRequest(BaseModel):
    markdown: str


class ParseMarkdownResponse(BaseModel):
    parsed: ParsedAnalysis
    validation: ParseValidation


class GeneratePackRequest(BaseModel):
    analysis_path: str = Field(min_length=1, description="Path under the data directory")
    target_length: Optional[TargetLength] = None
    include_image_prompt: bool = True


class RenderPackRequest(BaseModel):
    analysis: Analysis
    include_image_prompt: bool = True


class ValidatePackRequest(BaseModel):
    style: str
    lyrics: str


class ValidateDirRequest(BaseModel):
    output_dir: str = Field(min_length=1, description="e.g. 'outputs/yorushika_tadakiminihare'")


class GenerateNoteRequest(BaseModel):
    analysis_path: str = Field(min_length=1)


def create_app(store: DataStore | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    store = store or DataStore()
    app = FastAPI(
        title="Music Factory API",
        description="Render Suno style, lyrics and image prompts from song analyses",
        version="0.1.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/api/health")
    async def health_check() -> dict:
        """Health check endpoint."""
        return {"status": "ok"}

    @app.get("/api/core-types")
    async def core_types() -> dict:
        return {
            "core_types": [
                {
                    "name": p.name,
                    "description": p.description,
                    "genre_tags": list(p.genre_tags),
                    "tempo_range": p.tempo_range.model_dump(),
                }
                for p in CORE_TYPE_PATTERNS.values()
            ]
        }

    @app.post("/api/analysis")
    async def save_analysis(request: SaveAnalysisRequest) -> SaveSongAnalysisResult:
        """Parse, check and store an analysis markdown document."""
        try:
            return pack_service.save_song_analysis(request.slug, request.markdown, store)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

    @app.post("/api/analysis/parse")
    async def parse_analysis(request: ParseMarkdownRequest) -> ParseMarkdownResponse:
        parsed = parse_analysis_markdown(request.markdown)
        return ParseMarkdownResponse(parsed=parsed, validation=validate_parsed_analysis(parsed))

    @app.post("/api/analyze-reference")
    async def analyze_reference(request: AnalyzeReferenceSongRequest) -> AnalyzeReferenceSongResult:
        """Synthesize an analysis YAML from a core-type preset."""
        try:
            return pack_service.analyze_reference_song(request, store)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

    @app.post("/api/suno-pack")
    async def generate_pack(request: GeneratePackRequest) -> GenerateSunoPackResult:
        """Generate and write a Suno pack from a stored analysis file."""
        try:
            return pack_service.generate_suno_pack(
                request.analysis_path,
                target_length=request.target_length,
                include_image_prompt=request.include_image_prompt,
                store=store,
            )
        except FileNotFoundError:
            raise HTTPException(status_code=404, detail=f"Analysis not found: {request.analysis_path}")
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

    @app.post("/api/suno-pack/render")
    async def render_pack(request: RenderPackRequest) -> SunoPack:
        """Render a pack for an inline analysis without writing files."""
        return pack_service.build_suno_pack(request.analysis, request.include_image_prompt)

    @app.post("/api/suno-pack/validate")
    async def validate_pack(request: ValidatePackRequest) -> ValidationResult:
        return validate_suno_pack(request.style, request.lyrics)

    @app.post("/api/suno-pack/validate-dir")
    async def validate_pack_dir(request: ValidateDirRequest) -> ValidationResult:
        try:
            return pack_service.validate_suno_pack_dir(request.output_dir, store)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

    @app.post("/api/note")
    async def generate_note(request: GenerateNoteRequest) -> GenerateNoteResult:
        """Write a note.com article draft for a stored analysis."""
        try:
            return pack_service.generate_note(request.analysis_path, store)
        except FileNotFoundError:
            raise HTTPException(status_code=404, detail=f"Analysis not found: {request.analysis_path}")
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

    return app

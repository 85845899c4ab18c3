"""Construction of provider clients from settings."""

import instructor
from anthropic import Anthropic
from loguru import logger

from cortex.config import Settings
from cortex.embedders.base import Embedder
from cortex.embedders.openai_embedder import OpenAIEmbedder
from cortex.embedders.voyage_embedder import VoyageEmbedder
from cortex.llms.base import RelationshipClassifier, UnconfiguredClassifier
from cortex.llms.instructor_classifier import InstructorRelationshipClassifier


def build_embedder(config: Settings) -> Embedder:
    options = {"model": config.embedding_model} if config.embedding_model else {}
    if config.embedding_provider == "voyage":
        if not config.voyage_ai_api_key:
            raise RuntimeError("Missing VOYAGE_AI_API_KEY environment variable.")
        return VoyageEmbedder(api_key=config.voyage_ai_api_key, **options)
    if not config.openai_api_key:
        raise RuntimeError("Missing OPENAI_API_KEY environment variable.")
    return OpenAIEmbedder(api_key=config.openai_api_key, **options)


def build_classifier(config: Settings) -> RelationshipClassifier:
    if not config.anthropic_api_key:
        logger.warning("ANTHROPIC_API_KEY not set, relationships will use the similarity fallback")
        return UnconfiguredClassifier()
    # Create instructor client with Anthropic Claude
    anthropic_client = Anthropic(api_key=config.anthropic_api_key)
    instructor_client = instructor.from_anthropic(
        anthropic_client, mode=instructor.Mode.ANTHROPIC_TOOLS
    )
    return InstructorRelationshipClassifier(
        instructor_client,
        model=config.classifier_model,
        preview_chars=config.candidate_preview_chars,
    )

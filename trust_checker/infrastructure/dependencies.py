"""Dependency injection configuration for hexagonal architecture."""

import asyncio
import logging
from functools import lru_cache
from typing import Any, Dict, Optional

from ..domain.heuristics.trust_analyzer import TrustAnalyzer
from ..domain.heuristics.trusted_sources import get_trusted_sources
from ..domain.services.chunk_selector import ChunkSelector
from ..domain.services.evidence_gatherer import EvidenceGatherer
from ..domain.services.pipeline_coordinator import PipelineCoordinator
from ..domain.services.sentence_classifier import SentenceClassifier
from ..domain.services.verdict_engine import VerdictEngine
from .ai.openai_adapter import OpenAIAdapter
from .extraction.article_extractor import WebArticleExtractor
from .search.factory import SearchProviderFactory
from .settings import Settings
from .storage.history import AnalysisHistory

logger = logging.getLogger(__name__)


class ServiceContainer:
    """Service container for dependency injection.

    Synchronous services are built eagerly. Services that need network
    providers are built on first use, since provider initialization is async.
    """

    def __init__(self, settings: Optional[Settings] = None):
        """Initialize service container."""
        self.settings = settings or Settings.from_env()
        self._services: Dict[str, Any] = {}
        self._openai = OpenAIAdapter(self.settings.openai_config())
        self._search_factory = SearchProviderFactory()
        self._lock = asyncio.Lock()
        self._providers_ready = False
        self._setup_services()

    def _setup_services(self):
        """Setup the services that need no network providers."""
        logger.info("🔧 Setting up service container...")
        table = get_trusted_sources(self.settings.trusted_sources_path, self.settings.strict_domains)
        self._services = {
            "history": AnalysisHistory(self.settings.history_size),
            "trust_analyzer": TrustAnalyzer(table),
            "sentence_splitter": SentenceClassifier(),
            "article_extractor": WebArticleExtractor(self.settings.extractor_config()),
            "llm": None,
            "search": None,
        }
        logger.info("✅ Service container setup completed")

    async def _ensure_providers(self) -> None:
        """Create network providers and the services that depend on them."""
        if self._providers_ready:
            return
        async with self._lock:
            if self._providers_ready:
                return

            extractor = self._services["article_extractor"]
            await extractor.initialize()

            try:
                logger.info("🤖 Setting up LLM provider...")
                await self._openai.initialize()
                llm = self._openai
            except ConnectionError as e:
                logger.warning(f"⚠️ Failed to setup LLM provider: {e}")
                llm = None

            logger.info("🔎 Setting up search providers...")
            search = await self._search_factory.create_fallback(
                {
                    "tavily": {"config": self.settings.tavily_config()},
                    "serpapi": {"config": self.settings.serpapi_config()},
                },
                order=["tavily", "serpapi"],
            )
            logger.info(f"✅ Search providers ready: {search.available_providers}")

            chunk_selector = ChunkSelector(llm, max_concurrency=self.settings.max_concurrency)
            gatherer = EvidenceGatherer(search, extractor, chunk_selector, self.settings.gatherer_config())
            self._services.update(
                {
                    "llm": llm,
                    "search": search,
                    "evidence_gatherer": gatherer,
                }
            )
            if llm is not None:
                classifier = SentenceClassifier(llm)
                verdict_engine = VerdictEngine(llm, chunk_selector)
                self._services.update(
                    {
                        "sentence_classifier": classifier,
                        "verdict_engine": verdict_engine,
                        "pipeline_coordinator": PipelineCoordinator(extractor, classifier, gatherer, verdict_engine),
                    }
                )
            self._providers_ready = True

    def get(self, service_name: str) -> Any:
        """Get a service by name.

        Raises:
            KeyError: If service not found
            RuntimeError: If the service needs an LLM provider that is not configured
        """
        if service_name not in self._services:
            if self._providers_ready and service_name in ("sentence_classifier", "verdict_engine", "pipeline_coordinator"):
                raise RuntimeError("LLM provider unavailable: set OPENAI_API_KEY")
            raise KeyError(f"Service '{service_name}' not found")
        return self._services[service_name]

    def get_history(self) -> AnalysisHistory:
        return self.get("history")

    def get_trust_analyzer(self) -> TrustAnalyzer:
        return self.get("trust_analyzer")

    def get_sentence_splitter(self) -> SentenceClassifier:
        """Classifier without an LLM provider, for segmentation only."""
        return self.get("sentence_splitter")

    async def get_article_extractor(self) -> WebArticleExtractor:
        extractor = self.get("article_extractor")
        await extractor.initialize()
        return extractor

    async def get_sentence_classifier(self) -> SentenceClassifier:
        await self._ensure_providers()
        return self.get("sentence_classifier")

    async def get_evidence_gatherer(self) -> EvidenceGatherer:
        await self._ensure_providers()
        return self.get("evidence_gatherer")

    async def get_verdict_engine(self) -> VerdictEngine:
        await self._ensure_providers()
        return self.get("verdict_engine")

    async def get_pipeline_coordinator(self) -> PipelineCoordinator:
        await self._ensure_providers()
        return self.get("pipeline_coordinator")

    def provider_status(self) -> Dict[str, Any]:
        """Availability of every provider, for the health endpoint."""
        search = self._services.get("search")
        return {
            "initialized": self._providers_ready,
            "llm": {self._openai.provider_name: self._openai.is_available},
            "models": self._openai.capabilities,
            "search": search.available_providers if search is not None else self._search_factory.available_providers,
            "extractor": self._services["article_extractor"].is_available,
        }

    async def shutdown(self) -> None:
        """Close every provider."""
        await self._openai.shutdown()
        await self._search_factory.shutdown_all()
        await self._services["article_extractor"].shutdown()
        self._providers_ready = False


# Global service container instance
@lru_cache()
def get_service_container() -> ServiceContainer:
    """Get global service container instance."""
    return ServiceContainer()


# Convenience functions for FastAPI dependency injection
def get_history() -> AnalysisHistory:
    """FastAPI dependency for the analysis history."""
    return get_service_container().get_history()


def get_trust_analyzer() -> TrustAnalyzer:
    """FastAPI dependency for the heuristic trust analyzer."""
    return get_service_container().get_trust_analyzer()


async def get_article_extractor() -> WebArticleExtractor:
    """FastAPI dependency for the article extractor."""
    return await get_service_container().get_article_extractor()


async def get_evidence_gatherer() -> EvidenceGatherer:
    """FastAPI dependency for the evidence gatherer."""
    return await get_service_container().get_evidence_gatherer()


async def get_verdict_engine() -> VerdictEngine:
    """FastAPI dependency for the verdict engine."""
    return await get_service_container().get_verdict_engine()


async def get_pipeline_coordinator() -> PipelineCoordinator:
    """FastAPI dependency for the pipeline coordinator."""
    return await get_service_container().get_pipeline_coordinator()

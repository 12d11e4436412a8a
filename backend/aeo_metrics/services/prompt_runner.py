"""
Prompt Runner
Asks every plan-enabled engine each active prompt of a brand and stores the scored results
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from aeo_metrics.adapters.engines import EngineClient, EngineQuery, EngineClientError, get_engine_client
from aeo_metrics.adapters.parsing.mention_extractor import EntityRef
from aeo_metrics.config import get_enabled_engines
from aeo_metrics.models import Brand, Competitor, Prompt, PromptResult, User
from aeo_metrics.services.result_processor import ResultProcessor

logger = logging.getLogger(__name__)


@dataclass
class PromptRunSummary:
    prompts_processed: int
    results_created: int
    failures: int = 0


class PromptRunner:
    """
    Runs a brand's prompts against its engines.

    One failing engine does not stop the others; failures are logged and
    counted. Results are committed one at a time so a later failure never
    discards earlier answers.
    """

    def __init__(
        self,
        db: Session,
        client_factory: Callable[[str], EngineClient] = get_engine_client,
        processor: Optional[ResultProcessor] = None,
    ):
        self.db = db
        self.client_factory = client_factory
        self.processor = processor or ResultProcessor()

    def _active_prompts(self, brand_id: UUID, prompt_id: Optional[UUID]) -> List[Prompt]:
        query = self.db.query(Prompt).filter(
            Prompt.brand_id == brand_id,
            Prompt.is_active == True,  # noqa: E712
        )
        if prompt_id is not None:
            query = query.filter(Prompt.id == prompt_id)
        return query.all()

    async def run(self, brand_id: UUID, prompt_id: Optional[UUID] = None) -> PromptRunSummary:
        brand = self.db.get(Brand, brand_id)
        if brand is None:
            raise ValueError(f"Brand not found: {brand_id}")

        owner = self.db.get(User, brand.user_id)
        if owner is None:
            raise ValueError(f"User not found for brand: {brand_id}")

        engines = get_enabled_engines(owner.plan_id)
        logger.info(f"Using engines {engines} for brand {brand_id} (plan {owner.plan_id})")

        prompts = self._active_prompts(brand_id, prompt_id)
        if not prompts:
            logger.info(f"No active prompts found for brand {brand_id}")
            return PromptRunSummary(prompts_processed=0, results_created=0)

        brand_ref = EntityRef(name=brand.name, website_url=brand.website_url)
        competitors = [
            EntityRef(name=c.name, website_url=c.website_url)
            for c in self.db.query(Competitor).filter(Competitor.brand_id == brand_id).all()
        ]

        clients = {}
        summary = PromptRunSummary(prompts_processed=len(prompts), results_created=0)

        for prompt in prompts:
            for engine in engines:
                try:
                    if engine not in clients:
                        clients[engine] = self.client_factory(engine)
                    response = await clients[engine].query(EngineQuery(
                        prompt=prompt.text,
                        brand_name=brand.name,
                        brand_url=brand.website_url,
                    ))
                except EngineClientError as e:
                    summary.failures += 1
                    logger.error(f"Failed to process prompt {prompt.id} with {engine}: {e}")
                    continue

                processed = self.processor.process(response, brand_ref, competitors)
                result: PromptResult = processed.to_prompt_result(prompt.id, brand.id)
                self.db.add(result)
                self.db.commit()
                summary.results_created += 1

                logger.info(
                    f"Processed prompt {prompt.id} with {engine}: "
                    f"score={processed.visibility_score} mentioned={processed.mention.mentioned}"
                )

        return summary

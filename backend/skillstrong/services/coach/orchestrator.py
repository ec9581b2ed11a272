"""Chat orchestration - sequences one coach turn from user message to final answer.

receive -> classify domain -> (reject | continue) -> internal listings -> draft answer
-> web augmentation decision -> (augment | skip) -> featured merge -> follow-ups -> respond

Stages run one after another with no retries. Stage helpers absorb their own
upstream failures; anything that escapes is left for the HTTP handler.
"""

import logging
from dataclasses import asdict, dataclass, field

from sqlalchemy.exc import SQLAlchemyError

from skillstrong.services.coach.answer import generate_answer, seed_overview
from skillstrong.services.coach.domain import REDIRECT_MESSAGE, is_in_domain
from skillstrong.services.coach.featured import find_featured_matching, render_featured
from skillstrong.services.coach.followups import default_followups, generate_followups
from skillstrong.services.coach.heuristics import extract_location, needs_location
from skillstrong.services.coach.internal import query_internal_listings
from skillstrong.services.coach.web import augment_with_web, should_augment
from skillstrong.services.integrations.search import SearchService
from skillstrong.services.integrations.web import PageFetcher
from skillstrong.services.listings import ListingsStore
from skillstrong.services.llm import BaseLLMProvider, Message

logger = logging.getLogger(__name__)

LOCATION_REQUIRED_MESSAGE = "To find local results, please set your location using the button in the header."
FALLBACK_MESSAGE = "Sorry, I couldn't process that. Please try again in a moment."

NEXT_STEPS = """**Next Steps**
You can also search for more opportunities on your own:
* [Search SkillStrong Programs](/programs/all)
* [Search SkillStrong Jobs](/jobs/all)
* [Search US Department of Education for programs](https://collegescorecard.ed.gov/)
* [Search for jobs on Indeed.com](https://www.indeed.com/)"""


@dataclass
class ChatResult:
    answer: str
    followups: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


def fallback_result() -> ChatResult:
    return ChatResult(answer=FALLBACK_MESSAGE, followups=default_followups())


def _join(*parts: str) -> str:
    return "\n\n".join(p for p in parts if p)


def _strip_next_steps(answer: str) -> str:
    marker = answer.lower().find("\n\n**next steps")
    return answer[:marker] if marker != -1 else answer


class Orchestrator:
    def __init__(
        self,
        llm: BaseLLMProvider,
        store: ListingsStore,
        search: SearchService | None = None,
        fetcher: PageFetcher | None = None,
    ):
        self.llm = llm
        self.store = store
        self.search = search or SearchService()
        self.fetcher = fetcher or PageFetcher()

    async def run(self, messages: list[Message], location: str | None = None) -> ChatResult:
        last_user = next((m.content for m in reversed(messages) if m.role == "user"), "").strip()
        if not last_user:
            raise ValueError("conversation has no user message")

        if not await is_in_domain(self.llm, last_user):
            logger.info(f"Out-of-domain message: {last_user[:80]!r}")
            return ChatResult(answer=REDIRECT_MESSAGE, followups=default_followups())

        effective_location = location or extract_location(last_user)
        if needs_location(last_user, effective_location):
            return ChatResult(answer=LOCATION_REQUIRED_MESSAGE, followups=[])

        internal_context = query_internal_listings(self.store, last_user, effective_location)

        history = seed_overview(messages)
        answer = await generate_answer(self.llm, history, internal_context, effective_location)

        if await should_augment(self.llm, last_user, answer, internal_context):
            augmentation = await augment_with_web(
                self.llm, self.search, self.fetcher, last_user, effective_location
            )
            if augmentation is not None:
                answer = augmentation.answer

        # The draft's own Next Steps is replaced by the canned block, below any featured rows
        if internal_context:
            answer = _strip_next_steps(answer)
        answer = self._merge_featured(answer, last_user, effective_location)
        if internal_context:
            answer = _join(answer, NEXT_STEPS)

        followups = await generate_followups(self.llm, last_user, answer, effective_location)
        return ChatResult(answer=answer, followups=followups)

    def _merge_featured(self, answer: str, query: str, location: str | None) -> str:
        try:
            matches = find_featured_matching(self.store, query, location)
        except SQLAlchemyError as e:
            logger.warning(f"Featured lookup failed: {e}")
            return answer
        return _join(answer, render_featured(matches, location))

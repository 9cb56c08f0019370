"""LLM-driven decomposition of text into self-contained propositions."""

import json
import logging
import re

from src.errors import PropositionParseError
from src.llm.client import CompletionClient
from src.llm.prompts import PROPOSITIONS_PROMPT

logger = logging.getLogger(__name__)

# Greedy: first "[" through last "]" in the response
_JSON_ARRAY = re.compile(r"\[.*\]", re.DOTALL)


class PropositionExtractor:
    """Turns a paragraph into a list of decontextualized sentences.

    A malformed model response costs that paragraph's propositions only;
    it is logged and an empty list is returned. Completion failures
    propagate.
    """

    def __init__(self, completion: CompletionClient):
        self._completion = completion

    def extract(self, paragraph: str) -> list[str]:
        response = self._completion.complete(PROPOSITIONS_PROMPT.format(content=paragraph)).strip()
        try:
            return parse_propositions(response)
        except PropositionParseError as e:
            logger.warning("Dropping propositions for paragraph: %s", e)
            return []


def parse_propositions(response: str) -> list[str]:
    """Parse the bracketed JSON array out of a model response.

    Raises:
        PropositionParseError: If there is no bracketed span or it is not
            a JSON array.
    """
    match = _JSON_ARRAY.search(response)
    if not match:
        raise PropositionParseError("no JSON array in response")

    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise PropositionParseError(f"invalid JSON array: {e}") from e

    if not isinstance(parsed, list):
        raise PropositionParseError(f"expected a list, got {type(parsed).__name__}")

    return [p.strip() for p in parsed if isinstance(p, str) and p.strip()]

"""
Tests for the LLM relevance filter.
"""
import pytest

from conftest import FakeGateway, make_article
from metalpulse.core.exceptions import ConfigError
from metalpulse.prompts.news_filter_prompt import (
    ARTICLE_CONTENT_MAX_CHARS,
    NOT_RELEVANT_TOKEN,
    RELEVANT_TOKEN,
    UNDETERMINED_TOKEN,
)
from metalpulse.services.news_filter_service import (
    NewsFilterService,
    RelevanceVerdict,
    build_filter_prompt,
    parse_verdict,
)


class TestParseVerdict:
    """Tests for reply parsing."""

    @pytest.mark.parametrize("reply", ["YES", "yes", " Yes. ", '"YES"'])
    def test_relevant(self, reply):
        assert parse_verdict(reply) == RelevanceVerdict.RELEVANT

    @pytest.mark.parametrize("reply", ["NO", "no\n", "No!"])
    def test_not_relevant(self, reply):
        assert parse_verdict(reply) == RelevanceVerdict.NOT_RELEVANT

    @pytest.mark.parametrize("reply", ["NULL", "", None, "Maybe", "YES, because gold", "NOPE"])
    def test_undetermined(self, reply):
        assert parse_verdict(reply) == RelevanceVerdict.UNDETERMINED


class TestBuildFilterPrompt:
    """Tests for the classification prompt."""

    def test_truncates_content(self):
        article = make_article(1, content="x" * 2000, keywords=("gold", "fed"))
        prompt = build_filter_prompt(article)
        assert "x" * ARTICLE_CONTENT_MAX_CHARS in prompt
        assert "x" * (ARTICLE_CONTENT_MAX_CHARS + 1) not in prompt
        assert "Keywords: gold, fed" in prompt

    def test_missing_fields_render_na(self):
        article = make_article(1, description=None)
        prompt = build_filter_prompt(article)
        assert "Description: N/A" in prompt
        assert "Content: N/A" in prompt
        assert "Keywords: N/A" in prompt

    def test_lists_macro_criteria_and_tokens(self):
        prompt = build_filter_prompt(make_article(1))
        for phrase in ("inflation", "interest rates", "safe haven", '"YES"', '"NO"', '"NULL"'):
            assert phrase in prompt


    def test_reply_tokens_come_from_constants(self):
        prompt = build_filter_prompt(make_article(1))
        assert "{" not in prompt
        for token in (RELEVANT_TOKEN, NOT_RELEVANT_TOKEN, UNDETERMINED_TOKEN):
            assert f'"{token}"' in prompt

    def test_undetermined_token_is_the_one_parsed(self):
        assert parse_verdict(UNDETERMINED_TOKEN) == RelevanceVerdict.UNDETERMINED


class TestClassify:
    """Tests for classify()."""

    @pytest.mark.asyncio
    async def test_one_call_per_article(self):
        gateway = FakeGateway(["YES"])
        service = NewsFilterService(gateway=gateway, model="filter-model")

        verdict = await service.classify(make_article(1, title="Gold jumps"))

        assert verdict == RelevanceVerdict.RELEVANT
        assert len(gateway.requests) == 1
        assert gateway.requests[0].model == "filter-model"
        assert "Title: Gold jumps" in gateway.last_prompt

    @pytest.mark.asyncio
    async def test_oracle_failure_is_undetermined(self):
        gateway = FakeGateway([RuntimeError("rate limited")])
        service = NewsFilterService(gateway=gateway)
        assert await service.classify(make_article(1)) == RelevanceVerdict.UNDETERMINED

    @pytest.mark.asyncio
    async def test_missing_key_is_undetermined(self):
        gateway = FakeGateway([ConfigError("OPENAI_API_KEY environment variable is not set")])
        service = NewsFilterService(gateway=gateway)
        assert await service.classify(make_article(1)) == RelevanceVerdict.UNDETERMINED

    @pytest.mark.asyncio
    async def test_ambiguous_reply_is_undetermined(self):
        service = NewsFilterService(gateway=FakeGateway(["It depends"]))
        assert await service.classify(make_article(1)) == RelevanceVerdict.UNDETERMINED

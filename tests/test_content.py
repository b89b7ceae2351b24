from listings_worker.core.content import ContentEnricher, split_keywords
from listings_worker.models import Municipality

FAIR_LAWN = Municipality(name="Fair Lawn", state="NJ", state_name="New Jersey")


class FakeGenerator:
    def __init__(self, description="A great bakery.", keywords="bakery, fair lawn bakery , bread near me"):
        self.description = description
        self.keywords = keywords
        self.prompts = []

    def generate(self, prompt, max_tokens):
        self.prompts.append((prompt, max_tokens))
        result = self.keywords if prompt.startswith("Generate") else self.description
        if isinstance(result, Exception):
            raise result
        return result


def test_enrich_returns_description_and_keywords():
    generator = FakeGenerator()
    enricher = ContentEnricher(generator, FAIR_LAWN)

    result = enricher.enrich("Joe's Bakery", "bakery", "10 Main St, Fair Lawn, NJ 07410, USA")

    assert result.description == "A great bakery."
    assert result.keywords == ["bakery", "fair lawn bakery", "bread near me"]
    assert len(generator.prompts) == 2


def test_prompts_embed_business_and_town():
    generator = FakeGenerator()
    enricher = ContentEnricher(generator, FAIR_LAWN)

    enricher.enrich("Joe's Bakery", "bakery", "10 Main St")

    description_prompt, description_tokens = generator.prompts[0]
    keywords_prompt, keywords_tokens = generator.prompts[1]
    assert "150-word" in description_prompt
    assert "Joe's Bakery" in description_prompt
    assert "10 Main St" in description_prompt
    assert "Fair Lawn, New Jersey" in description_prompt
    assert description_tokens == 300
    assert "8 SEO keywords" in keywords_prompt
    assert "Fair Lawn, NJ" in keywords_prompt
    assert keywords_tokens == 150


def test_description_failure_does_not_block_keywords(caplog):
    generator = FakeGenerator(description=RuntimeError("overloaded"))
    enricher = ContentEnricher(generator, FAIR_LAWN)

    with caplog.at_level("WARNING"):
        result = enricher.enrich("Joe's Bakery", "bakery", "10 Main St")

    assert result.description is None
    assert result.keywords == ["bakery", "fair lawn bakery", "bread near me"]
    assert "overloaded" in caplog.text


def test_keyword_failure_yields_empty_list():
    generator = FakeGenerator(keywords=RuntimeError("timeout"))
    enricher = ContentEnricher(generator, FAIR_LAWN)

    result = enricher.enrich("Joe's Bakery", "bakery", "10 Main St")

    assert result.description == "A great bakery."
    assert result.keywords == []


def test_blank_description_counts_as_missing():
    enricher = ContentEnricher(FakeGenerator(description="   "), FAIR_LAWN)
    assert enricher.generate_description("Joe's Bakery", "bakery", "10 Main St") is None


def test_split_keywords_trims_and_drops_blanks():
    assert split_keywords(" a, b ,, c ,") == ["a", "b", "c"]
    assert split_keywords("") == []

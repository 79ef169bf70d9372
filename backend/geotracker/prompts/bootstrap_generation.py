"""Prompt for generating unbranded GEO test questions from a site crawl."""

BOOTSTRAP_OUTPUT_SCHEMA = (
    '{"discoveries": string[], "prompts": [{"name": string, "content": string, '
    '"category": string, "best_page_url": string|null}]}'
)

BOOTSTRAP_PROMPT_HEADER = """Generate starter GEO prompts for this website.
Primary goal: evaluate whether this website appears in generic, non-branded searches.
Return JSON only with this schema: {schema}.
Generate exactly {count} prompts.
Categories should be one of: {categories}.
Prompts must be natural user questions, specific, and non-duplicated.
Do not include or mention the website/app/company name in any prompt.
Do not include domain names in any prompt.
Forbidden terms: {forbidden_terms}"""

LOCATION_INSTRUCTION = (
    "Include local intent in many prompts and use these locations when relevant: {locations}"
)

GENERIC_LOCATION_INSTRUCTION = (
    "Include local intent in many prompts and include city/region wording where natural."
)

BEST_PAGE_INSTRUCTION = "If you are unsure about best_page_url, set it to null."

SUGGESTED_TERMS_INSTRUCTION = "Suggested terms: {terms}"

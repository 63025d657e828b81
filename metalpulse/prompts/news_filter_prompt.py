"""Precious-metals relevance prompts.

The filter model answers with exactly one token: YES, NO or NULL.
"""

RELEVANT_TOKEN = "YES"
NOT_RELEVANT_TOKEN = "NO"
UNDETERMINED_TOKEN = "NULL"

# Article content is cut to this many characters before prompting
ARTICLE_CONTENT_MAX_CHARS = 500

NEWS_FILTER_PROMPT = """You are analyzing a news article to determine if it is relevant to precious metals (gold, silver, platinum, palladium) for a precious metals tweet bot.

The article should be relevant if it:
- Directly mentions precious metals (gold, silver, platinum, palladium)
- Discusses topics that affect precious metals markets (inflation, economic uncertainty, market volatility, currency devaluation, safe haven assets, Federal Reserve policy, interest rates, economic indicators)
- Can be meaningfully connected to precious metals investment or market trends

Article to analyze:
Title: {title}
Description: {description}
Content: {content}
Keywords: {keywords}

Respond with ONLY one word: "{relevant_token}" if the article is relevant and can be connected to precious metals, "{not_relevant_token}" if it is not relevant, or "{undetermined_token}" if you cannot determine or the connection would be too forced/artificial."""

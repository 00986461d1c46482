"""Relevance scoring for free-text recipe search.

A query is lower-cased and split into word tokens. Each token scores its
occurrences in the title (x3), the tags (x2) and the description (x1);
a recipe's score is the sum over tokens. Zero-score recipes do not match.
"""
import re
from typing import Iterable

from recipe_hub.models.recipe import Recipe

TOKEN_RE = re.compile(r"\w+", re.UNICODE)

TITLE_WEIGHT = 3
TAG_WEIGHT = 2
DESCRIPTION_WEIGHT = 1


def tokenize(text: str) -> list[str]:
    return TOKEN_RE.findall(text.lower())


def score(recipe: Recipe, tokens: list[str]) -> int:
    title = tokenize(recipe.title)
    description = tokenize(recipe.description)
    tags = [t for tag in (recipe.tags or []) for t in tokenize(tag)]

    total = 0
    for token in tokens:
        total += TITLE_WEIGHT * title.count(token)
        total += TAG_WEIGHT * tags.count(token)
        total += DESCRIPTION_WEIGHT * description.count(token)
    return total


def rank(recipes: Iterable[Recipe], query: str) -> list[Recipe]:
    """Matching recipes, best first; ties keep the incoming (newest-first) order."""
    tokens = tokenize(query)
    if not tokens:
        return []
    scored = [(score(r, tokens), i, r) for i, r in enumerate(recipes)]
    return [r for s, _, r in sorted((x for x in scored if x[0] > 0), key=lambda x: (-x[0], x[1]))]

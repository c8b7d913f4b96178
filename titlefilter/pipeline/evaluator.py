"""Stage 3 – Rule evaluation.

A title passes a rule when it satisfies **every** AND-group; a group is
satisfied when **any** of its terms matches.  All comparisons run over the
three script variants of both the title and the literal terms, so ``繁體``
finds ``繁体`` and vice versa.
"""

from __future__ import annotations

from titlefilter.pipeline.normalizer import VariantNormalizer, VariantSet
from titlefilter.pipeline.rules import AndGroup, PlainTerm, RegexTerm, Rule, Term

VariantCache = dict[str, VariantSet]


class RuleEvaluator:
    """Evaluate parsed rules against titles using an injected normaliser."""

    def __init__(self, normalizer: VariantNormalizer | None = None) -> None:
        self.normalizer = normalizer if normalizer is not None else VariantNormalizer()

    def variants(self, text: str, cache: VariantCache | None = None) -> VariantSet:
        if cache is None:
            return self.normalizer.normalize(text)
        found = cache.get(text)
        if found is None:
            found = cache[text] = self.normalizer.normalize(text)
        return found

    def matches(self, rule: Rule, title: str, cache: VariantCache | None = None) -> bool:
        """Return ``True`` if *title* satisfies *rule*.

        *cache* may be shared across calls of one filtering pass so repeated
        titles and literal terms are converted only once.
        """
        if rule.match_all:
            return True

        title_variants = self.variants(title, cache)
        return all(
            self._matches_group(group, title_variants, cache) for group in rule.groups
        )

    def _matches_group(
        self, group: AndGroup, title_variants: VariantSet, cache: VariantCache | None
    ) -> bool:
        return any(
            self._matches_term(term, title_variants, cache) for term in group.terms
        )

    def _matches_term(
        self, term: Term, title_variants: VariantSet, cache: VariantCache | None
    ) -> bool:
        if isinstance(term, RegexTerm):
            if term.compiled is None:
                return self._matches_literals((term.body,), title_variants, cache)
            return any(term.compiled.search(form) for form in title_variants)
        if isinstance(term, PlainTerm):
            return self._matches_literals(term.alternatives, title_variants, cache)
        raise TypeError(f"Unknown term type: {type(term).__name__}")

    def _matches_literals(
        self,
        alternatives: tuple[str, ...],
        title_variants: VariantSet,
        cache: VariantCache | None,
    ) -> bool:
        for alternative in alternatives:
            for needle in self.variants(alternative, cache):
                if title_variants.contains(needle):
                    return True
        return False

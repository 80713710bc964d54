"""
Suggestions for routine steps the user's selection does not cover.

The assistant's routine text is scanned for step keywords ("cleanser",
"shampoo", "spf", ...). Each keyword points at one or more catalogue
categories; every detected category the selection does not already contain
gets one catalogue product proposed for it.

To keep a skincare routine from receiving a mascara, categories are bucketed
into coarse groups and only candidates from the allowed groups survive:
- the groups of the selected products, when any of them is concrete;
- otherwise the group the text mentions most, plus the runner-up when its
  count is within one of the top;
- otherwise every group.

Everything here is a pure function of (text, selection, catalogue) and
iterates in table / catalogue order, so equal inputs give equal output.
"""

from typing import Dict, Iterable, List, Optional, Sequence, Set

from models import Product, SelectedProduct, Suggestion

# keyword -> target categories, scanned in this order
KEYWORD_CATEGORIES: Dict[str, tuple] = {
    # skincare
    "cleanser": ("cleanser",),
    "face wash": ("cleanser",),
    "micellar": ("cleanser",),
    "moisturizer": ("moisturizer",),
    "moisturize": ("moisturizer",),
    "lotion": ("moisturizer",),
    "cream": ("moisturizer",),
    "serum": ("skincare",),
    "vitamin c": ("skincare",),
    "retinol": ("skincare",),
    "niacinamide": ("skincare",),
    "sunscreen": ("suncare", "skincare"),
    "spf": ("suncare", "skincare"),
    "toner": ("skincare",),
    "exfoliant": ("skincare",),
    "scrub": ("skincare",),
    "peel": ("skincare",),
    "mask": ("skincare",),
    "eye": ("skincare",),
    "eye cream": ("skincare",),
    "treatment": ("skincare", "moisturizer"),
    # haircare
    "shampoo": ("haircare",),
    "conditioner": ("haircare",),
    "hair": ("haircare", "hair styling", "hair color"),
    "scalp": ("haircare",),
    "hairspray": ("hair styling",),
    "styling": ("hair styling",),
    "hair mask": ("haircare",),
    "hair color": ("hair color",),
    # makeup
    "mascara": ("makeup",),
    "foundation": ("makeup",),
    "lipstick": ("makeup",),
    "eyeshadow": ("makeup",),
    "makeup": ("makeup",),
    # other
    "fragrance": ("fragrance",),
    "perfume": ("fragrance",),
    "shave": ("men's grooming", "skincare"),
    "after shave": ("men's grooming",),
}

SKINCARE = "skincare"
HAIRCARE = "haircare"
MAKEUP = "makeup"
FRAGRANCE = "fragrance"
MENS = "mens"
OTHER = "other"

MAKEUP_CATEGORIES = frozenset({"mascara", "foundation"})
FRAGRANCE_CATEGORIES = frozenset({"fragrance", "perfume"})
MENS_CATEGORIES = frozenset({"men's grooming"})
SKINCARE_CATEGORIES = frozenset({
    "cleanser", "moisturizer", "skincare", "suncare", "toner",
    "exfoliant", "mask", "serum", "treatment", "eye",
})


def category_to_group(category: Optional[str]) -> str:
    c = (category or "").lower()
    if not c:
        return OTHER
    if "makeup" in c or c in MAKEUP_CATEGORIES:
        return MAKEUP
    if "hair" in c:
        return HAIRCARE
    if c in FRAGRANCE_CATEGORIES:
        return FRAGRANCE
    if c in MENS_CATEGORIES:
        return MENS
    if c in SKINCARE_CATEGORIES:
        return SKINCARE
    return OTHER


def detect_categories(content: str) -> Dict[str, List[str]]:
    """Map each category implied by `content` to the keywords that implied it."""
    text = (content or "").lower()
    found: Dict[str, List[str]] = {}
    for keyword, categories in KEYWORD_CATEGORIES.items():
        if keyword not in text:
            continue
        for category in categories:
            keywords = found.setdefault(category.lower(), [])
            if keyword not in keywords:
                keywords.append(keyword)
    return found


def allowed_groups(selected: Sequence[SelectedProduct], found: Dict[str, List[str]]) -> Set[str]:
    """Groups suggestions may come from; empty means no restriction."""
    selected_groups = {category_to_group(s.category) for s in selected}
    if selected_groups and selected_groups != {OTHER}:
        return selected_groups

    counts: Dict[str, int] = {}
    for category, keywords in found.items():
        group = category_to_group(category)
        counts[group] = counts.get(group, 0) + (len(keywords) or 1)

    # stable: ties keep detection order
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    groups: Set[str] = set()
    if ranked:
        top_group, top_count = ranked[0]
        groups.add(top_group)
        if len(ranked) > 1 and ranked[1][1] >= max(1, top_count - 1):
            groups.add(ranked[1][0])
    return groups


def _mentions(product: Product, keywords: Iterable[str]) -> bool:
    name = product.name.lower()
    description = product.description.lower()
    return any(k in name or k in description for k in keywords)


def find_best_candidate(products: Sequence[Product], category: str, keywords: Sequence[str]) -> Optional[Product]:
    target = category.lower()

    def same_category(p: Product) -> bool:
        return p.category.lower() == target

    for p in products:
        if same_category(p) and _mentions(p, keywords):
            return p
    for p in products:
        if same_category(p):
            return p
    if "hair" in target:
        for p in products:
            if "hair" in p.category.lower():
                return p
    for keyword in keywords:
        for p in products:
            if _mentions(p, (keyword,)):
                return p
    return None


def suggest_missing_products(
    content: str,
    selected: Sequence[SelectedProduct],
    products: Sequence[Product],
) -> List[Suggestion]:
    selected_categories = {(s.category or "").lower() for s in selected}
    found = detect_categories(content)
    groups = allowed_groups(selected, found)

    suggestions: List[Suggestion] = []
    for category, keywords in found.items():
        if category in selected_categories:
            continue
        candidate = find_best_candidate(products, category, keywords)
        if candidate is None:
            continue
        if not groups or category_to_group(candidate.category) in groups:
            suggestions.append(Suggestion(category=category, product=candidate))
    return suggestions

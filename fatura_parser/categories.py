"""Category taxonomy, display lookups and rule-based detection.

The taxonomy is fixed: twelve labels (Portuguese, as shown to users) with
``outros`` doubling as the catch-all. Icons and colors are pure lookups with
documented defaults for anything outside the taxonomy.

Detection evaluates :data:`CATEGORY_RULES` in order and the first matching
rule wins, so a description such as ``"FARMACIA UBER"`` is health, not
transport. Keep the order when adding keywords.
"""

from __future__ import annotations

import re
from types import MappingProxyType

from .normalizers import strip_accents

# ---------------------------
# Taxonomy
# ---------------------------

HEALTH = "saúde"
SUPERMARKET = "supermercado"
RESTAURANT = "restaurante"
LEISURE = "lazer"
APPAREL = "vestuário"
SERVICES = "serviços"
OTHER = "outros"
TRAVEL = "viagem"
TRANSPORT = "transporte"
EDUCATION = "educação"
HOUSING = "moradia"
SUBSCRIPTION = "assinatura"

CATEGORIES: tuple[str, ...] = (
    RESTAURANT,
    SUPERMARKET,
    HEALTH,
    LEISURE,
    APPAREL,
    SERVICES,
    OTHER,
    TRAVEL,
    TRANSPORT,
    EDUCATION,
    HOUSING,
    SUBSCRIPTION,
)

DEFAULT_ICON = "🏷️"
DEFAULT_COLOR = "#94a3b8"

_ICONS = MappingProxyType(
    {
        RESTAURANT: "🍽️",
        SUPERMARKET: "🛒",
        HEALTH: "💊",
        LEISURE: "🎬",
        APPAREL: "👕",
        SERVICES: "✂️",
        OTHER: "📦",
        TRAVEL: "✈️",
        TRANSPORT: "🚗",
        EDUCATION: "📚",
        HOUSING: "🏠",
        SUBSCRIPTION: "📺",
    }
)

_COLORS = MappingProxyType(
    {
        RESTAURANT: "#f43f5e",
        SUPERMARKET: "#10b981",
        HEALTH: "#3b82f6",
        LEISURE: "#f59e0b",
        APPAREL: "#ec4899",
        SERVICES: "#06b6d4",
        OTHER: "#8b5cf6",
        TRAVEL: "#f97316",
        TRANSPORT: "#6366f1",
        EDUCATION: "#14b8a6",
        HOUSING: "#eab308",
        SUBSCRIPTION: "#a855f7",
    }
)

# Accent-free label → canonical label, for source hints such as "SAUDE".
_BY_FOLDED_NAME = MappingProxyType({strip_accents(c): c for c in CATEGORIES})


def category_icon(category: str) -> str:
    return _ICONS.get(category.lower(), DEFAULT_ICON)


def category_color(category: str) -> str:
    return _COLORS.get(category.lower(), DEFAULT_COLOR)


# ---------------------------
# Detection rules
# ---------------------------


def _rule(pattern: str, category: str) -> tuple[re.Pattern[str], str]:
    return re.compile(pattern, re.IGNORECASE), category


CATEGORY_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    _rule(r"farmacia|drogaria|panvel|raia|droga|saude|medic|clinic|hospital|psiq", HEALTH),
    _rule(r"supermercado|bourbon|zaffari|carrefour|big\b|nacional|atacadao", SUPERMARKET),
    _rule(r"market4u|market 4u", SUPERMARKET),
    _rule(
        r"restaurante|cafe|bistro|pizza|burger|mcdonald|lanchon|padaria|confeitaria"
        r"|fazenda|marber|quiero|amuitoprazer|lohmann|barber",
        RESTAURANT,
    ),
    _rule(
        r"cinema|cinemark|netflix|spotify|prime.*canal|paramount|teatro|show|ingresso"
        r"|ipanema.*sport",
        LEISURE,
    ),
    _rule(r"uber|99|taxi|cabify|posto|combusti|estaciona|shell|ipiranga", TRANSPORT),
    _rule(r"roupa|vestuario|zara|renner|cea|riachuelo|hering|alpina.*presente", APPAREL),
    _rule(r"amazon.*prime|prime.*aluguel|melimais|assinatura", SUBSCRIPTION),
    # Generic marketplaces.
    _rule(r"amazon|mercado.*livre|shopee|aliexpress|magalu|casas.*bahia|prata.*fina", OTHER),
    _rule(r"aluguel|condominio|energia|agua|luz|ceee|corsan", HOUSING),
    _rule(r"escola|faculdade|curso|livro|udemy", EDUCATION),
    _rule(r"viagem|hotel|airbnb|booking|aviao|gol\b|latam|azul\b", TRAVEL),
)


def detect_category(description: str) -> str:
    """Return the category of the first rule matching ``description``."""

    desc = description.lower()
    for pattern, category in CATEGORY_RULES:
        if pattern.search(desc):
            return category
    return OTHER


def infer_category(hint: str, description: str) -> str:
    """Trust a source-provided category hint, else fall back to detection.

    The hint wins only when it names a taxonomy member other than the
    catch-all. Matching ignores case and accents (``"SAUDE"`` → ``"saúde"``).
    """

    folded = strip_accents(hint.strip().lower())
    category = _BY_FOLDED_NAME.get(folded)
    if category and category != OTHER:
        return category
    return detect_category(description)


__all__ = [
    "CATEGORIES",
    "CATEGORY_RULES",
    "DEFAULT_COLOR",
    "DEFAULT_ICON",
    "OTHER",
    "category_color",
    "category_icon",
    "detect_category",
    "infer_category",
]

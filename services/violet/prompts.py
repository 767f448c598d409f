"""Prompt helpers for Violet's customer and admin conversations."""

from __future__ import annotations

from models.session_models import ADMIN_MODE
from services.violet.context_assembler import BusinessContext

NO_PRODUCTS_TEXT = "Product catalog is being loaded."
DEFAULT_CATEGORIES_TEXT = "Categories: makeup, beauty-tools, mother-care, pet-care"
NO_FLASH_SALE_TEXT = "No active flash sale currently."
NO_STATS_TEXT = "Website statistics are being loaded."


def products_block(context: BusinessContext) -> str:
    if not context.products:
        return NO_PRODUCTS_TEXT
    entries = ", ".join(
        f"{p.name} (${p.price:.2f}) - {p.description[:50]}" for p in context.products
    )
    return f"Available products ({len(context.products)} total): {entries}"


def categories_block(context: BusinessContext) -> str:
    if not context.categories:
        return DEFAULT_CATEGORIES_TEXT
    return "Categories: " + ", ".join(c.name for c in context.categories)


def partners_block(context: BusinessContext) -> str:
    if not context.partners:
        return "Partner roster is being loaded."
    return "Featured partners: " + ", ".join(p.name for p in context.partners)


def flash_sale_block(context: BusinessContext) -> str:
    sale = context.flash_sale
    if sale is None:
        return NO_FLASH_SALE_TEXT
    return f"Current flash sale: {sale.name} with {sale.discount_percentage}% discount"


def stats_block(context: BusinessContext) -> str:
    stats = context.stats
    if stats is None:
        return NO_STATS_TEXT
    return (
        f"Current stats: {stats.total_products} products, {stats.total_partners} partners, "
        f"{stats.active_flash_sales} active flash sales"
    )


def customer_system_prompt(context: BusinessContext) -> str:
    """Return the shopping-guide prompt grounded in the catalog and current promotion."""
    return (
        "You are Violet, the friendly shopping assistant for Shop&Glow, a premium curated marketplace "
        "for beauty, mother care and pet grooming products.\n\n"
        "Help customers find the right products, explain product details, guide them through checkout "
        "and answer questions about shipping, returns and store policies.\n\n"
        "What Shop&Glow currently offers:\n"
        f"{products_block(context)}\n\n"
        f"{categories_block(context)}\n\n"
        f"{partners_block(context)}\n\n"
        f"{flash_sale_block(context)}\n\n"
        "About the store: every category carries at most two hand-picked partners, flash sales run "
        "regularly, and newsletter subscribers receive exclusive offers.\n\n"
        "Guidelines: recommend products from the catalog above, mention the current promotion when it "
        "is relevant, nudge customers who seem ready to buy towards checkout, offer to connect them with "
        "support for technical issues, and keep answers concise, warm and conversational. "
        "Emphasise quality and curation."
    )


def admin_system_prompt(context: BusinessContext) -> str:
    """Return the analytical operations prompt grounded in the assembled stats."""
    return (
        "You are Violet in ADMIN MODE for the Shop&Glow marketplace. You now assist the store owner "
        "with business intelligence, technical support and management insight.\n\n"
        "Your areas: analytics and customer behaviour, product and inventory review, partner performance "
        "and commission tracking, error detection and troubleshooting, and growth strategy.\n\n"
        "Current Shop&Glow status:\n"
        f"{stats_block(context)}\n\n"
        "Business model: multi-vendor marketplace, at most two curated partners per category, "
        "commissions of 8-15% depending on category and performance, realtime websocket chat.\n\n"
        "Be professional and data driven. Give specific, actionable recommendations, cite the metrics "
        "above when they are relevant, separate quick fixes from long-term improvements and weigh the "
        "business impact of each suggestion."
    )


def build_system_prompt(mode: str, context: BusinessContext) -> str:
    """Select the system prompt template for the session mode."""
    if mode == ADMIN_MODE:
        return admin_system_prompt(context)
    return customer_system_prompt(context)


def intent_system_prompt() -> str:
    """Return the instructions for classifying a customer message."""
    return (
        "Analyze the customer's message for the Shop&Glow store and identify their intent.\n"
        "- product_search: looking for specific products or browsing\n"
        "- support: needs help with orders, account or technical issues\n"
        "- purchase_help: ready to buy but needs guidance through the process\n"
        "- general_inquiry: general questions about the store, policies and so on\n"
        "Extract the keywords or product names mentioned as entities and report a confidence "
        "between 0 and 1."
    )

"""
Drafting service: short customer-facing text from the LLM.

Reminder emails, invoice notes, product blurbs and dashboard insights.
Every method returns a usable string: with no LLM client configured, or when
the call fails, a fixed template is returned instead.
"""

import logging
from decimal import Decimal

from clients.llm_client import LLMClient
from core.config import BillingConfig

logger = logging.getLogger(__name__)


class DraftingService:
    """Generate business text, falling back to templates."""

    SYSTEM_PROMPT = """You write short business correspondence for {company}, a glass and mirror company in Ireland.

Write plain text only: no markdown, no subject line, no placeholders such as [Your Name]. Keep to the requested length."""

    def __init__(self, llm: LLMClient | None = None, config: BillingConfig | None = None):
        self.llm = llm
        self.config = config or BillingConfig()

    @property
    def enabled(self) -> bool:
        return self.llm is not None

    def _money(self, amount: Decimal) -> str:
        return f"{self.config.currency_symbol}{Decimal(amount):.2f}"

    def _generate(self, prompt: str, fallback: str, error_fallback: str | None = None,
                  max_tokens: int = 300) -> str:
        """
        Run one prompt, returning `fallback` when no LLM is configured and
        `error_fallback` (or `fallback`) when the call fails.
        """
        if self.llm is None:
            return fallback

        try:
            response = self.llm.generate(
                messages=[
                    {"role": "system", "content": self.SYSTEM_PROMPT.format(company=self.config.company_name)},
                    {"role": "user", "content": prompt},
                ],
                max_tokens=max_tokens,
                model=self.config.llm_model,
            )
        except Exception as e:
            logger.warning(f"Drafting failed, using template: {e}")
            return error_fallback if error_fallback is not None else fallback

        return response.content.strip()

    def reminder_context(self, days_until_due: int) -> str:
        """Tone instruction for how far the due date is from today."""
        if days_until_due < 0:
            return f"is OVERDUE by {abs(days_until_due)} days. Be firm but professional."
        if days_until_due == 0:
            return "is DUE TODAY. Be polite and remind them of the deadline."
        return f"is UPCOMING in {days_until_due} days. This is a proactive friendly reminder."

    def draft_reminder_text(
        self,
        customer_name: str,
        invoice_number: str,
        balance: Decimal,
        days_until_due: int,
    ) -> str:
        """
        Payment reminder body.

        Args:
            customer_name: Customer as printed on the invoice
            invoice_number: e.g. INV-482913
            balance: Outstanding amount
            days_until_due: Negative when overdue, 0 when due today
        """
        prompt = (
            f"Draft a payment reminder email for {self.config.company_name}.\n"
            f"Customer: {customer_name}.\n"
            f"Invoice: {invoice_number}.\n"
            f"Balance Due: {self._money(balance)}.\n"
            f"Status: The payment {self.reminder_context(days_until_due)}\n"
            f"Include a request for settlement. Max 3 sentences."
        )
        return self._generate(
            prompt,
            fallback=(
                f"This is a reminder that a balance remains on Invoice {invoice_number}. "
                f"Please settle this at your earliest convenience."
            ),
            error_fallback=(
                f"Reminder for Invoice {invoice_number}: Outstanding balance of "
                f"{self._money(balance)} needs attention."
            ),
        )

    def draft_invoice_notes(self, customer_name: str, items_description: str) -> str:
        """Two-sentence thank-you note for the foot of an invoice."""
        prompt = (
            f"Write a professional, polite, and short invoice note for a glass and mirror company invoice.\n"
            f"Customer: {customer_name}.\n"
            f"Key items: {items_description}.\n"
            f"Tone: Professional and grateful.\n"
            f"Max length: 2 sentences."
        )
        return self._generate(
            prompt,
            fallback=f"Thank you for choosing {self.config.company_name}.",
            error_fallback="Thank you for your business!",
        )

    def draft_product_description(self, product_name: str) -> str:
        """Catalogue blurb of at most twenty words; empty when unavailable."""
        prompt = (
            f"Write a short, attractive product description (max 20 words) "
            f'for a glass/mirror product named "{product_name}".'
        )
        return self._generate(prompt, fallback="", max_tokens=100)

    def analyze_trends(self, summary: str) -> str:
        """Three bullet points on sales and outstanding payments."""
        prompt = (
            "Analyze this invoice summary data and give 3 bullet points on sales "
            f"performance and outstanding payments. Keep it brief. Data: {summary}"
        )
        return self._generate(prompt, fallback="No insights available.")

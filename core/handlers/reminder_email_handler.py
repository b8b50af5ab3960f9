"""
Handler for ReminderSent events.

Emails the drafted reminder text to the customer when the invoice carries an
email address. Invoices without one are skipped: the reminder has still been
recorded, it just reaches the customer by other means.
"""

import logging
from typing import Callable

from core.events import ReminderSent

logger = logging.getLogger(__name__)


def handle_reminder_sent(email_client, company_name: str) -> Callable:
    """
    Factory that returns a ReminderSent handler.

    Args:
        email_client: EmailGatewayClient instance
        company_name: Trading name for the subject line

    Returns:
        Handler callable that emails the reminder
    """

    def handler(event: ReminderSent):
        invoice = event.invoice
        if not invoice.customer_email:
            logger.debug(f"No email on {invoice.invoice_number}, reminder not emailed")
            return

        email_client.send_email(
            to=invoice.customer_email,
            subject=f"Payment reminder: Invoice {invoice.invoice_number} ({company_name})",
            body=event.message,
        )

    return handler

"""wa.me link builders for client contact."""

import re
from datetime import datetime
from urllib.parse import quote

from src.core.config import settings

_NON_DIGITS = re.compile(r"\D")


def contact_url(phone: str | None) -> str | None:
    """Plain chat link for a phone number, or None without digits."""
    digits = _NON_DIGITS.sub("", phone or "")
    if not digits:
        return None
    return f"https://wa.me/{settings.whatsapp_country_code}{digits}"


def confirmation_message(client_name: str, service_date: datetime) -> str:
    """pt-BR message asking the client to confirm tomorrow's cleaning."""
    return (
        f"Olá {client_name}! Gostaria de confirmar nosso serviço de limpeza "
        f"agendado para amanhã, dia {service_date:%d/%m}, às {service_date:%H:%M}. "
        "Podemos confirmar?"
    )


def confirmation_url(
    phone: str | None, client_name: str, service_date: datetime
) -> str | None:
    """Chat link prefilled with the appointment confirmation message."""
    base = contact_url(phone)
    if base is None:
        return None
    message = confirmation_message(client_name, service_date)
    return f"{base}?text={quote(message, safe='')}"

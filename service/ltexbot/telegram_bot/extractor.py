"""
Formula extraction.

Private chats: the whole message is the formula.
Group chats: only code/pre spans wrapped in $ signs, e.g. `$x^2$`.
Inline mode: the query text.
"""

from typing import Optional

from telegram import Message, MessageEntity

from .deeplink import decode_formula
from .events import (
    InboundEvent, StartCommand, InlineQuery, PrivateTextMessage, GroupTextMessage
)

DELIMITER = "$"
SPAN_TYPES = [MessageEntity.CODE, MessageEntity.PRE]


def extract_spans(message: Message) -> tuple[str, ...]:
    """Texts of all code/pre spans in a message, in order of appearance."""
    entities = message.parse_entities(SPAN_TYPES)
    ordered = sorted(entities.items(), key=lambda item: item[0].offset)
    return tuple(text for _, text in ordered)


def formula_from_span(span: str) -> Optional[str]:
    """Strip $...$ delimiters. None if the span is not a delimited formula."""
    if len(span) < 2 or not (span.startswith(DELIMITER) and span.endswith(DELIMITER)):
        return None
    formula = span[1:-1]
    if not formula.strip():
        return None
    return formula


def extract_formulas(event: InboundEvent) -> list[str]:
    """Formulas to render for an event, in order."""
    if isinstance(event, PrivateTextMessage):
        return [event.text] if event.text else []

    if isinstance(event, GroupTextMessage):
        formulas = []
        for span in event.spans:
            formula = formula_from_span(span)
            if formula is not None:
                formulas.append(formula)
        return formulas

    if isinstance(event, InlineQuery):
        return [event.query] if event.query else []

    # Commands never render anything
    return []


def formula_from_start(event: StartCommand) -> Optional[str]:
    """Formula carried by a /start deep-link, for echo-back."""
    if not event.payload:
        return None
    return decode_formula(event.payload)

"""
OCR service for receipt scanning.
Text is extracted by OCR.space, then scraped with regexes into a preview the
user confirms before submitting an expense.
"""
import logging
import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Optional
import httpx
from app.core.config import settings
from app.schemas.expense import OCRReceiptPreview

logger = logging.getLogger(__name__)

SYMBOL_CURRENCIES = {
    "₹": "INR",
    "€": "EUR",
    "£": "GBP",
    "$": "USD",
}

_AMOUNT_AFTER_CURRENCY = re.compile(
    r"(?:USD|EUR|INR|GBP|Rs\.?|\$|€|£|₹)\s*(\d[\d,]*(?:\.\d{1,2})?)", re.IGNORECASE
)
_AMOUNT_AFTER_LABEL = re.compile(
    r"\b(?:grand total|total|amount|sum)[:\s]*(?:USD|EUR|INR|GBP|Rs\.?|\$|€|£|₹)?\s*(\d[\d,]*(?:\.\d{1,2})?)",
    re.IGNORECASE,
)
_CURRENCY_CODE = re.compile(r"\b(USD|EUR|INR|GBP|CAD|AUD)\b", re.IGNORECASE)
_RUPEE_MARKER = re.compile(r"₹|\bRs\.?", re.IGNORECASE)
_ISO_DATE = re.compile(r"\b(\d{4})[-/](\d{1,2})[-/](\d{1,2})\b")
_DMY_DATE = re.compile(r"\b(\d{1,2})[-/](\d{1,2})[-/](\d{2,4})\b")


def _to_decimal(raw: str) -> Optional[Decimal]:
    try:
        return Decimal(raw.replace(",", ""))
    except InvalidOperation:
        return None


def _parse_amount(text: str) -> Optional[Decimal]:
    # A labelled total wins over the first price on the receipt
    for pattern in (_AMOUNT_AFTER_LABEL, _AMOUNT_AFTER_CURRENCY):
        match = pattern.search(text)
        if match:
            amount = _to_decimal(match.group(1))
            if amount is not None and amount > 0:
                return amount
    return None


def _parse_currency(text: str) -> Optional[str]:
    match = _CURRENCY_CODE.search(text)
    if match:
        return match.group(1).upper()
    if _RUPEE_MARKER.search(text):
        return "INR"
    for symbol, code in SYMBOL_CURRENCIES.items():
        if symbol in text:
            return code
    return None


def _parse_date(text: str) -> Optional[date]:
    match = _ISO_DATE.search(text)
    if match:
        year, month, day = (int(g) for g in match.groups())
    else:
        match = _DMY_DATE.search(text)
        if not match:
            return None
        day, month, year = (int(g) for g in match.groups())
        if year < 100:
            year += 2000
        if month > 12 and day <= 12:
            day, month = month, day
    try:
        return date(year, month, day)
    except ValueError as e:
        logger.debug(f"Ignoring unparseable receipt date '{match.group(0)}': {e}")
        return None


def _parse_description(text: str) -> Optional[str]:
    for line in text.splitlines():
        line = line.strip()
        if len(line) >= 3 and re.search(r"[A-Za-z]", line):
            return line[:120]
    return None


def parse_receipt_text(text: str) -> OCRReceiptPreview:
    """Best-effort extraction of amount, currency, date and merchant line."""
    if not text or not text.strip():
        return OCRReceiptPreview()

    return OCRReceiptPreview(
        amount=_parse_amount(text),
        currency=_parse_currency(text),
        spend_date=_parse_date(text),
        description=_parse_description(text),
    )


async def _ocr_ocrspace(file_content: bytes, filename: str) -> str:
    """
    Use OCR.space API (free tier: 25,000 requests/month).
    Get API key: https://ocr.space/ocrapi/freekey
    """
    api_key = settings.OCR_API_KEY or "helloworld"  # Public demo key
    files = {"file": (filename, file_content)}
    data = {
        "apikey": api_key,
        "language": "eng",
        "isOverlayRequired": False,
        "detectOrientation": True,
    }

    async with httpx.AsyncClient() as client:
        response = await client.post(settings.OCR_SPACE_URL, files=files, data=data, timeout=30.0)
        response.raise_for_status()
        result = response.json()

    if result.get("OCRExitCode") == 1:
        parsed_results = result.get("ParsedResults") or []
        if parsed_results:
            return parsed_results[0].get("ParsedText", "")

    error_message = result.get("ErrorMessage") or ["Unknown error"]
    if isinstance(error_message, list):
        error_message = error_message[0]
    raise ValueError(f"OCR.space error: {error_message}")


async def extract_text(file_content: bytes, filename: str) -> str:
    """Run the configured OCR provider and return the raw text."""
    provider = settings.OCR_PROVIDER
    if provider != "ocrspace":
        logger.warning(f"Unknown OCR_PROVIDER '{provider}', falling back to OCR.space")
    return await _ocr_ocrspace(file_content, filename)


async def scan_receipt(file_content: bytes, filename: str) -> OCRReceiptPreview:
    """
    Extract and parse a receipt image.
    Provider failures are logged and yield an empty preview.
    """
    started = datetime.now()
    try:
        text = await extract_text(file_content, filename)
    except (httpx.HTTPError, ValueError) as e:
        logger.error(f"OCR extraction failed for {filename}: {e}")
        return OCRReceiptPreview()

    preview = parse_receipt_text(text)
    logger.debug(
        f"OCR parsed {filename} in {(datetime.now() - started).total_seconds():.2f}s: {preview}"
    )
    return preview

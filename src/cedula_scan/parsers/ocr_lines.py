"""
Recovery of TD1 MRZ lines from a free-form OCR text block.

Each line is cleaned to the MRZ alphabet and scored on how MRZ-like it looks.
The three best full-length candidates are then placed into line 1/2/3 slots by
their signatures. When a slot cannot be filled the candidates come back in
score order with ``ordered=False``.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence
from typing import Optional

from cedula_scan.errors import FormatError, FormatErrorCode
from cedula_scan.models.mrz import RecoveredLines
from cedula_scan.utils.text import MRZ_FILLER, clean_mrz_line

logger = logging.getLogger(__name__)

TD1_LINE_LENGTH = 30
TD1_LINE_COUNT = 3
MIN_LINE_LENGTH = TD1_LINE_LENGTH - 2
MIN_SCORABLE_LENGTH = 20

LINE1_SIGNATURE = re.compile(r"^I[<C]COL|^IDCOL")
LINE2_SIGNATURE = re.compile(r"^\d{6}\d[MF<]\d{6}", re.ASCII)
LINE3_SIGNATURES = (re.compile(r"^[A-Z]+<<[A-Z]+"), re.compile(r"[A-Z]+<[A-Z]+<<"))

_LEADING_DATE = re.compile(r"^\d{6}", re.ASCII)
_MRZ_CHAR = re.compile(r"[A-Z0-9<]")

# OCR-tolerant signatures for lines already known to be MRZ
_DOC_LINE = re.compile(r"^[I1L](?:[<C]|[<C][A-Z0-9<])COL|^[I1L][DC]COL")
_DATE_LINE = re.compile(r"^\d{6}[0-9<][MF<]\d{6}", re.ASCII)
_DATE_OCR_DIGITS = str.maketrans("OQ", "00")
_NAME_FILLERS = re.compile(r"<<+")
_LETTER_PAIR = re.compile(r"[A-Z]{2,}")
_LETTER = re.compile(r"[A-Z]")


def score_line(line: str) -> int:
    """
    Score how likely a cleaned line is to be a TD1 MRZ line.

    Lines shorter than 20 characters score 0. Otherwise points are awarded for
    length close to 30, ``<`` fillers, MRZ alphabet ratio and each of the three
    line signatures.
    """
    if len(line) < MIN_SCORABLE_LENGTH:
        return 0

    score = 0

    length_diff = abs(len(line) - TD1_LINE_LENGTH)
    if length_diff <= 2:
        score += 30
    elif length_diff <= 5:
        score += 15

    filler_count = line.count(MRZ_FILLER)
    if filler_count >= 1:
        score += 20
    if filler_count >= 3:
        score += 10

    valid_ratio = len(_MRZ_CHAR.findall(line)) / len(line)
    if valid_ratio >= 0.95:
        score += 25
    elif valid_ratio >= 0.90:
        score += 15

    if LINE1_SIGNATURE.search(line):
        score += 50
    if LINE2_SIGNATURE.search(line):
        score += 40
    if any(signature.search(line) for signature in LINE3_SIGNATURES):
        score += 40

    return score


def order_lines(lines: list[str]) -> tuple[list[str], bool]:
    """
    Place candidates into line 1/2/3 slots.

    A line takes the first free slot whose signature it matches, checked in
    line 1, line 2, line 3 order.

    Returns:
        (lines, ordered); the input order with ordered=False when a slot is left empty
    """
    slots = [""] * TD1_LINE_COUNT

    for line in lines:
        starts_with_date = bool(_LEADING_DATE.match(line))
        if LINE1_SIGNATURE.search(line) and not slots[0]:
            slots[0] = line
        elif starts_with_date and not slots[1]:
            slots[1] = line
        elif "<<" in line and not starts_with_date and not slots[2]:
            slots[2] = line

    if not all(slots):
        return list(lines), False
    return slots, True


def looks_like_doc_line(line: str) -> bool:
    return bool(_DOC_LINE.match(line[:12]))


def looks_like_date_line(line: str) -> bool:
    return bool(_DATE_LINE.match(line.translate(_DATE_OCR_DIGITS)))


def looks_like_name_line(line: str) -> bool:
    if _NAME_FILLERS.search(line) and _LETTER_PAIR.search(line):
        return True
    return (
        len(_LETTER.findall(line)) >= 10
        and MRZ_FILLER in line
        and not looks_like_doc_line(line)
        and not looks_like_date_line(line)
    )


def reorder_td1_lines(lines: Sequence[str]) -> list[str]:
    """
    Put three cleaned MRZ lines into line 1, 2, 3 order.

    Each slot takes the first remaining line that matches its signature; a slot
    without a match takes the next unclaimed line. Signatures tolerate common
    OCR slips (``1``/``L`` for the ``I`` document code, ``O``/``Q`` for zero in
    the dates).

    Returns:
        The reordered lines, or the input order when a slot stays empty
    """
    remaining = list(lines)

    def take_first(predicate: Callable[[str], bool]) -> Optional[str]:
        for index, line in enumerate(remaining):
            if predicate(line):
                return remaining.pop(index)
        return None

    picked = [
        take_first(predicate)
        for predicate in (looks_like_doc_line, looks_like_date_line, looks_like_name_line)
    ]
    ordered = [
        line if line is not None else (remaining.pop(0) if remaining else "") for line in picked
    ]
    if not all(ordered):
        return list(lines)
    return ordered


def recover_mrz_lines(ocr_text: str) -> RecoveredLines:
    """
    Find the three TD1 MRZ lines in an OCR text block.

    Args:
        ocr_text: Raw OCR output, in any line order and possibly with noise lines

    Returns:
        RecoveredLines with the cleaned lines and whether they could be ordered

    Raises:
        FormatError: If fewer than three full-length candidates are found
    """
    candidates = []
    for raw_line in (ocr_text or "").splitlines():
        cleaned = clean_mrz_line(raw_line)
        score = score_line(cleaned)
        if score > 0:
            candidates.append((score, cleaned))

    # sorted() is stable, so equal scores keep their input order
    candidates = sorted(candidates, key=lambda candidate: candidate[0], reverse=True)
    best = [line for _, line in candidates if len(line) >= MIN_LINE_LENGTH][:TD1_LINE_COUNT]

    if len(best) < TD1_LINE_COUNT:
        raise FormatError(
            f"insufficient mrz lines: found {len(best)}, need {TD1_LINE_COUNT}",
            FormatErrorCode.INSUFFICIENT_MRZ_LINES,
        )

    lines, ordered = order_lines(best)
    if not ordered:
        logger.warning("MRZ lines could not be matched to TD1 slots; using score order")
    return RecoveredLines(lines=tuple(lines), ordered=ordered)

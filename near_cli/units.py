"""NEAR token and gas amount parsing helpers."""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation, localcontext

from .prompts import UserInputError

YOCTO_PER_NEAR = 10**24
GAS_PER_TGAS = 10**12
MAX_GAS = 300 * GAS_PER_TGAS

_NEAR_UNITS = {
    "near": YOCTO_PER_NEAR,
    "millinear": 10**21,
    "yoctonear": 1,
}
_GAS_UNITS = {
    "tgas": GAS_PER_TGAS,
    "teragas": GAS_PER_TGAS,
    "ggas": 10**9,
    "gigagas": 10**9,
    "gas": 1,
}
_AMOUNT_RE = re.compile(r"^\s*(?P<number>[0-9]+(?:\.[0-9]+)?)\s*(?P<unit>[A-Za-z]+)\s*$")


def _scale(raw: str, units: dict[str, int], kind: str, example: str) -> int:
    match = _AMOUNT_RE.match(raw)
    if match is None:
        raise UserInputError(f"invalid {kind} '{raw}' (expected e.g. '{example}')")
    unit = match.group("unit").lower()
    if unit not in units:
        choices = ", ".join(sorted(units))
        raise UserInputError(f"unknown {kind} unit '{match.group('unit')}' (use one of: {choices})")
    with localcontext() as ctx:
        ctx.prec = 80
        try:
            scaled = Decimal(match.group("number")) * units[unit]
        except InvalidOperation as exc:  # pragma: no cover - regex guards the format
            raise UserInputError(f"invalid {kind} '{raw}'") from exc
        if scaled != scaled.to_integral_value():
            raise UserInputError(f"{kind} '{raw}' is more precise than the smallest unit")
        return int(scaled)


def parse_near_amount(raw: str) -> int:
    """Return *raw* (``"1.5 NEAR"``, ``"10 yoctoNEAR"``) in yoctoNEAR."""

    return _scale(raw, _NEAR_UNITS, "NEAR amount", "1.5 NEAR")


def parse_gas(raw: str) -> int:
    """Return *raw* (``"30 Tgas"``, ``"100 TeraGas"``) in gas units."""

    gas = _scale(raw, _GAS_UNITS, "gas amount", "30 Tgas")
    if gas > MAX_GAS:
        raise UserInputError(f"gas amount '{raw}' exceeds the 300 Tgas limit")
    return gas


def _trim(value: Decimal) -> str:
    text = f"{value:f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_near_amount(yocto: int) -> str:
    with localcontext() as ctx:
        ctx.prec = 80
        return f"{_trim(Decimal(yocto) / YOCTO_PER_NEAR)} NEAR"


def format_gas(gas: int) -> str:
    with localcontext() as ctx:
        ctx.prec = 80
        return f"{_trim(Decimal(gas) / GAS_PER_TGAS)} Tgas"

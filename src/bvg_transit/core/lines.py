"""Line label normalization.

Raw labels such as ``"ICE 123"``, ``"S 41"`` or ``"BusF/526"`` become canonical
identifiers whose first character is the product category:

    I  long-distance      R  regional       S  suburban (S-Bahn)
    U  underground        T  tram           B  bus
    F  ferry              ?  unknown
"""

import re

from .exceptions import ClassificationError

_REGIONAL_PREFIXES = ("RE", "RB", "NE", "OE", "MR", "PE")

_LINE = re.compile(r"([A-Za-zÄÖÜäöüßáàâéèêíìîóòôúùû]+)[\s-]*(.*)", re.DOTALL)
_SPECIAL_NUMBER = re.compile(r"\d{4,}")
_SPECIAL_BUS = re.compile(r"Bus[A-Z]")

# type token -> canonical prefix, number appended
_TYPE_PREFIXES = {
    "ICE": "IICE",  # InterCityExpress
    "IC": "IIC",  # InterCity
    "EC": "IEC",  # EuroCity
    "EN": "IEN",  # EuroNight
    "CNL": "ICNL",  # CityNightLine
    "IR": "R",
    "Zug": "R",
    "ZUG": "R",
    "D": "RD",
    "KBS": "RKBS",  # Kursbuchstrecke
    "BKB": "RBKB",  # Buckower Kleinbahn
    "Ausfl": "RAusfl",
    "PKP": "RPKP",  # Poland
    "S": "SS",
    "U": "UU",
    "Tra": "T",
    "Tram": "T",
    "Bus": "B",
    "Fäh": "F",
    "F": "FF",
}


def normalize_line(line: str | None) -> str | None:
    """Canonicalize a raw line label.

    Must be applied once to the raw label; canonical identifiers are not
    valid input.

    Returns:
        Canonical identifier, or None for a missing or empty label

    Raises:
        ClassificationError: If the type token is not a known product
    """
    if not line:
        return None

    if line.startswith(_REGIONAL_PREFIXES):
        return "R" + line
    if line == "11":
        # tram and bus share this number upstream
        return "?11"
    if _SPECIAL_NUMBER.fullmatch(line):
        return "R" + line

    match = _LINE.fullmatch(line)
    if not match:
        raise ClassificationError(f"cannot normalize line '{line}'")

    type_ = match.group(1)
    number = match.group(2).replace(" ", "")

    if type_ == "DNZ":
        return "RDNZ" + ("" if number == "DNZ" else number)
    if type_ in _TYPE_PREFIXES:
        return _TYPE_PREFIXES[type_] + number
    if _SPECIAL_BUS.fullmatch(type_):
        # scheme like BusF/526
        return "B" + line[3:]

    raise ClassificationError(
        f"cannot normalize type '{type_}' number '{number}' line '{line}'"
    )


def line_product(line: str) -> str:
    """Return the product category letter of a canonical identifier."""
    return line[0] if line else "?"

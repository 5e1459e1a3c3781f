"""Line colors for canonical line identifiers."""

from types import MappingProxyType

from .lines import line_product
from .models import LineColors

WHITE = "#ffffff"
BLACK = "#000000"
BLUE = "#0000ff"


def rgb(red: int, green: int, blue: int) -> str:
    return f"#{red:02x}{green:02x}{blue:02x}"


# (line, background, foreground). Later entries override earlier ones with
# the same key; RRE11 and RRB13 are listed twice.
_LINE_COLOR_ENTRIES: list[tuple[str, str, str]] = [
    ("SS1", rgb(221, 77, 174), WHITE),
    ("SS2", rgb(16, 132, 73), WHITE),
    ("SS25", rgb(16, 132, 73), WHITE),
    ("SS3", rgb(22, 106, 184), WHITE),
    ("SS41", rgb(162, 63, 48), WHITE),
    ("SS42", rgb(191, 90, 42), WHITE),
    ("SS45", rgb(191, 128, 55), WHITE),
    ("SS46", rgb(191, 128, 55), WHITE),
    ("SS47", rgb(191, 128, 55), WHITE),
    ("SS5", rgb(243, 103, 23), WHITE),
    ("SS7", rgb(119, 96, 176), WHITE),
    ("SS75", rgb(119, 96, 176), WHITE),
    ("SS8", rgb(85, 184, 49), WHITE),
    ("SS85", rgb(85, 184, 49), WHITE),
    ("SS9", rgb(148, 36, 64), WHITE),
    ("UU1", rgb(84, 131, 47), WHITE),
    ("UU2", rgb(215, 25, 16), WHITE),
    ("UU3", rgb(47, 152, 154), WHITE),
    ("UU4", rgb(255, 233, 42), BLACK),
    ("UU5", rgb(91, 31, 16), WHITE),
    ("UU55", rgb(91, 31, 16), WHITE),
    ("UU6", rgb(127, 57, 115), WHITE),
    ("UU7", rgb(0, 153, 204), WHITE),
    ("UU8", rgb(24, 25, 83), WHITE),
    ("UU9", rgb(255, 90, 34), WHITE),
    ("TM1", rgb(204, 51, 0), WHITE),
    ("TM2", rgb(116, 192, 67), WHITE),
    ("TM4", rgb(208, 28, 34), WHITE),
    ("TM5", rgb(204, 153, 51), WHITE),
    ("TM6", rgb(0, 0, 255), WHITE),
    ("TM8", rgb(255, 102, 0), WHITE),
    ("TM10", rgb(0, 153, 51), WHITE),
    ("TM13", rgb(51, 153, 102), WHITE),
    ("TM17", rgb(153, 102, 51), WHITE),
    ("B12", rgb(153, 102, 255), WHITE),
    ("B16", rgb(0, 0, 255), WHITE),
    ("B18", rgb(255, 102, 0), WHITE),
    ("B21", rgb(153, 102, 255), WHITE),
    ("B27", rgb(153, 102, 51), WHITE),
    ("B37", rgb(153, 102, 51), WHITE),
    ("B50", rgb(51, 153, 102), WHITE),
    ("B60", rgb(0, 153, 51), WHITE),
    ("B61", rgb(0, 153, 51), WHITE),
    ("B62", rgb(0, 102, 51), WHITE),
    ("B63", rgb(51, 153, 102), WHITE),
    ("B67", rgb(0, 102, 51), WHITE),
    ("B68", rgb(0, 153, 51), WHITE),
    ("FF1", BLUE, WHITE),  # Potsdam
    ("FF10", BLUE, WHITE),
    ("FF11", BLUE, WHITE),
    ("FF12", BLUE, WHITE),
    ("FF21", BLUE, WHITE),
    ("FF23", BLUE, WHITE),
    ("FF24", BLUE, WHITE),
    # Regional lines Brandenburg
    ("RRE1", "#ee1c23", WHITE),
    ("RRE2", "#ffd403", BLACK),
    ("RRE3", "#f57921", WHITE),
    ("RRE4", "#952d4f", WHITE),
    ("RRE5", "#0072bc", WHITE),
    ("RRE6", "#db6eab", WHITE),
    ("RRE7", "#00854a", WHITE),
    ("RRE10", "#a7653f", WHITE),
    ("RRE11", "#059edb", WHITE),
    ("RRE11", "#ee1c23", WHITE),
    ("RRE15", "#ffd403", BLACK),
    ("RRE18", "#00a65e", WHITE),
    ("RRB10", "#60bb46", WHITE),
    ("RRB12", "#a3238e", WHITE),
    ("RRB13", "#f68b1f", WHITE),
    ("RRB13", "#00a65e", WHITE),
    ("RRB14", "#a3238e", WHITE),
    ("RRB20", "#00854a", WHITE),
    ("RRB21", "#5e6db3", WHITE),
    ("RRB22", "#0087cb", WHITE),
    ("ROE25", "#0087cb", WHITE),
    ("RNE26", "#00a896", WHITE),
    ("RNE27", "#ee1c23", WHITE),
    ("RRB30", "#00a65e", WHITE),
    ("RRB31", "#60bb46", WHITE),
    ("RMR33", "#ee1c23", WHITE),
    ("ROE35", "#5e6db3", WHITE),
    ("ROE36", "#a7653f", WHITE),
    ("RRB43", "#5e6db3", WHITE),
    ("RRB45", "#ffd403", BLACK),
    ("ROE46", "#db6eab", WHITE),
    ("RMR51", "#db6eab", WHITE),
    ("RRB51", "#db6eab", WHITE),
    ("RRB54", "#ffd403", "#333333"),
    ("RRB55", "#f57921", WHITE),
    ("ROE60", "#60bb46", WHITE),
    ("ROE63", "#ffd403", BLACK),
    ("ROE65", "#0072bc", WHITE),
    ("RRB66", "#60bb46", WHITE),
    ("RPE70", "#ffd403", BLACK),
    ("RPE73", "#00a896", WHITE),
    ("RPE74", "#0072bc", WHITE),
    ("T89", "#ee1c23", WHITE),
    ("RRB91", "#a7653f", WHITE),
    ("RRB93", "#a7653f", WHITE),
]

LINE_COLORS = MappingProxyType(
    {
        line: LineColors(background=background, foreground=foreground)
        for line, background, foreground in _LINE_COLOR_ENTRIES
    }
)

PRODUCT_COLORS = MappingProxyType(
    {
        "I": LineColors(background=WHITE, foreground="#ff0000"),
        "R": LineColors(background="#888888", foreground=WHITE),
        "S": LineColors(background="#006e34", foreground=WHITE),
        "U": LineColors(background="#003090", foreground=WHITE),
        "T": LineColors(background="#cc0000", foreground=WHITE),
        "B": LineColors(background="#993399", foreground=WHITE),
        "F": LineColors(background=BLUE, foreground=WHITE),
        "?": LineColors(background="#444444", foreground=WHITE),
    }
)


def colors_for(line: str) -> LineColors:
    """Colors of a canonical line, falling back to its product category."""
    colors = LINE_COLORS.get(line)
    if colors is not None:
        return colors
    return PRODUCT_COLORS.get(line_product(line), PRODUCT_COLORS["?"])

"""Line patterns recognized by the screenplay parser."""

import re

# Optional "12." label, then INT./EXT. or a compound of both. A setting token
# without a trailing dot must be followed by whitespace or end of line.
HEADING_PATTERN = re.compile(
    r"^\s*(?:(?P<number>\d+)\.?\s*)?"
    r"(?P<setting>INT\.?\s*/\s*EXT\.?|EXT\.?\s*/\s*INT\.?|I\s*/\s*E\.?|INT\.|EXT\.)"
    r"(?:(?<=\.)|(?=\s|$))"
    r"\s*(?P<rest>.*)$",
    re.IGNORECASE,
)

# Speaker cue: a letter, then letters, digits, apostrophes, parentheses,
# periods, hyphens and spaces
CUE_PATTERN = re.compile(r"^[^\W\d_](?:[^\W_]|[\s'().\-])+$")

CUT_TO_PATTERN = re.compile(r"CUT TO(?:\s|:|$)", re.IGNORECASE)

# Column artifact from PDF extraction: "OFFICE - DAY 14"
TRAILING_NUMERAL_PATTERN = re.compile(r"\s+\d+\s*$")

SENTENCE_END = ".,;:!?"
TOKEN_EDGE_PUNCTUATION = "\"“”«»‘’[]{}*_…" + SENTENCE_END

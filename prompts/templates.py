"""System instructions sent with every medicine image."""

from __future__ import annotations

DEFAULT_LOCALE = "he"

# --- Medicine identification + interaction check ---

MEDICINES_INSTRUCTION_HE = (
    "בתמונה שהמשתמש מעלה אמורות להופיע תרופות. "
    "אתה צריך לתת תשובה בשני חלקים. "
    "אלף: רשימה של התרופות וחלק שני: קונפליקטים אפשריים בין תרופות ברשימה."
)

MEDICINES_INSTRUCTION_EN = (
    "The image uploaded by the user should show medicines. "
    "Answer in two parts. "
    "Part A: a list of the medicines. "
    "Part B: possible conflicts between the medicines in the list."
)

SYSTEM_INSTRUCTIONS: dict[str, str] = {
    "he": MEDICINES_INSTRUCTION_HE,
    "en": MEDICINES_INSTRUCTION_EN,
}

"""User-facing uploader messages, keyed by locale."""

from __future__ import annotations

MESSAGES: dict[str, dict[str, str]] = {
    "he": {
        "invalid_type": "אנא בחר קובץ תמונה תקין.",
        "too_large": "הקובץ גדול מדי. גודל מקסימלי: {max_mb:.0f}MB. גודל נוכחי: {size_mb:.2f}MB",
        "processing_failed": "שגיאה בעיבוד התמונה. אנא נסה שוב.",
        "no_image": "אנא בחר תמונה תחילה.",
        "analysis_failed": "נכשל בניתוח התמונה: {message}",
        "http_error": "שגיאת HTTP! סטטוס: {status}",
        "status_400": "שגיאה בבקשה. אנא בדוק את התמונה ונסה שוב.",
        "status_405": "שגיאת שיטת בקשה. אנא נסה שוב.",
        "status_413": "התמונה גדולה מדי. אנא השתמש בתמונה קטנה יותר או דחוס יותר.",
        "status_429": "יותר מדי בקשות. אנא המתן מעט ונסה שוב.",
        "status_500": "שגיאת שרת. אנא נסה שוב מאוחר יותר.",
        "network_error": "לא ניתן להתחבר לשרת הניתוח.",
        "analyze": "נתח תמונה",
        "analyzing": "מנתח...",
        "result_heading": "תוצאת הניתוח:",
        "error_heading": "שגיאה:",
    },
    "en": {
        "invalid_type": "Please choose a valid image file.",
        "too_large": "File is too large. Maximum size: {max_mb:.0f}MB. Current size: {size_mb:.2f}MB",
        "processing_failed": "Failed to process the image. Please try again.",
        "no_image": "Please choose an image first.",
        "analysis_failed": "Failed to analyze the image: {message}",
        "http_error": "HTTP error! status: {status}",
        "status_400": "Bad request. Please check the image and try again.",
        "status_405": "Request method error. Please try again.",
        "status_413": "The image is too large. Please use a smaller or more compressed image.",
        "status_429": "Too many requests. Please wait a moment and try again.",
        "status_500": "Server error. Please try again later.",
        "network_error": "Could not reach the analysis server.",
        "analyze": "Analyze image",
        "analyzing": "Analyzing...",
        "result_heading": "Analysis result:",
        "error_heading": "Error:",
    },
}


def get_message(key: str, locale: str = "he", **fmt) -> str:
    table = MESSAGES.get(locale) or MESSAGES["en"]
    template = table.get(key) or MESSAGES["en"][key]
    return template.format(**fmt) if fmt else template

"""Shared constants for tagweave.

Fixed header values and the text of the warning fragments substituted for
cross-context misuse.
"""

from __future__ import annotations

HTML_CONTENT_TYPE = "text/html; charset=utf-8"
JSON_CONTENT_TYPE = "application/json; charset=utf-8"

DEFAULT_TITLE = "tagweave"

JSON_IN_HTML_TEXT = (
    "Please use dangerjson to include json in html. Untrusted input needs "
    "to pass through a html template function to get escaped. You can do "
    "html -> dangerjson -> html if you want!"
)

DANGERJSON_ROOT_TEXT = (
    "Use json and not dangerjson. The purpose of dangerjson is to be explicit "
    "when you embed unescaped json elements in an html document."
)

POST_ONLY_TEXT = (
    "This method is only accessible through the POST method. Remember to make "
    "all mutations (insert / update data in the database) only accessible via "
    "POST. This is necessary to prevent CSRF issues."
)

NO_MATCHING_URL_TEXT = "No matching url found"

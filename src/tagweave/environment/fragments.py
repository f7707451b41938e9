"""Stock HTML fragments.

All fragments are ``BasedHtml``: context-free, resolved, and safe to share
across requests.

Warning fragments:
    Substituted, never raised, when content crosses contexts unsafely. A
    misuse is then obvious in the rendered page but cannot crash the server.

Head fragments:
    ``COMMON_HEAD`` and ``CSS_RESET`` make up the initial process-wide
    default head together with a ``<title>``.
"""

from __future__ import annotations

from tagweave.template.core import BasedHtml
from tagweave.utils.constants import (
    DANGERJSON_ROOT_TEXT,
    DEFAULT_TITLE,
    JSON_IN_HTML_TEXT,
    POST_ONLY_TEXT,
)
from tagweave.utils.html import html_escape, json_escape

JSON_IN_HTML_WARNING = BasedHtml(
    f'<div style="color:red;">{html_escape(JSON_IN_HTML_TEXT)}</div>'
)

DANGERJSON_ROOT_WARNING = BasedHtml(
    f'<div style="color:red;">{html_escape(DANGERJSON_ROOT_TEXT)}</div>'
)

# JSON context: the warning is a JSON string value so the document stays valid.
DANGERJSON_IN_JSON_WARNING = json_escape(DANGERJSON_ROOT_TEXT)

POST_ONLY_WARNING = BasedHtml(
    f'<div style="color:red;">{html_escape(POST_ONLY_TEXT)}</div>'
)

COMMON_HEAD = BasedHtml(
    """<meta name="viewport" content="width=device-width, initial-scale=1.0" />
  <script>
    /* prevent form resubmission */
    if (window.history.replaceState) {
      window.history.replaceState(null, null, window.location.href);
    }
  </script>"""
)

CSS_RESET = BasedHtml(
    """<style>
  * {
    margin: 0;
    padding: 0;
    box-sizing: border-box;
  }
  html,
  body {
    background-color: #000;
    color: #fff;
  }
</style>"""
)

STANDARD_DEV_RELOADER = BasedHtml(
    """<script>
  function reloader() {
    let socket = null;

    function connectWebSocket() {
      if (socket) {
        return;
      }
      socket = new WebSocket("ws://localhost:3001/reload");
      socket.addEventListener("message", () => window.location.reload());
      socket.addEventListener("close", () => { socket = null; });
      socket.addEventListener("error", () => { socket = null; });
    }
    connectWebSocket();
    setInterval(connectWebSocket, 1000);
  }
  reloader();
</script>"""
)

INITIAL_HEAD = BasedHtml(
    f"<title>{html_escape(DEFAULT_TITLE)}</title>\n  {COMMON_HEAD} {CSS_RESET}"
)

"""
Guestbook Web — Page State and Rendering
=========================================

What:  GuestbookPage holds everything the single page shows: the message
       list, the form fields, the in-flight flag and the error banner. It
       loads, submits and renders itself to HTML.
How:   load() and submit() call GuestbookClient and turn ClientError into the
       banner text. render() builds the page with every piece of user text
       HTML-escaped; message bodies keep their line breaks via
       `white-space: pre-wrap`. Timestamps are rendered in the configured
       zone and rewritten to the viewer's own zone by a small inline script.

State transitions on submit:
    idle ──submit()──▶ loading ──ok──▶ form cleared, list re-fetched ──▶ idle
                              └─fail─▶ error shown, form kept ─────────▶ idle
"""

import logging
from datetime import datetime, timezone, tzinfo
from html import escape
from typing import Dict, List, Optional

from guestbook_web.api_client import ClientError, GuestbookClient, MessageView

logger = logging.getLogger(__name__)

FORM_FIELDS = ("name", "message")
EMPTY_STATE = "No messages yet. Be the first to leave one!"


def format_timestamp(value: datetime, tz: Optional[tzinfo] = None) -> str:
    """
    Format a timestamp for display, e.g. "Jan 15, 2024, 09:30 AM".

    Naive values are taken as UTC. `tz` defaults to the server's local zone.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    local = value.astimezone(tz)
    return f"{local:%b} {local.day}, {local.year}, {local:%I:%M %p}"


class GuestbookPage:
    """
    State of one guestbook page.

    Args:
        client: API client used for loading and submitting.
        tz:     Zone used to display timestamps (None → local zone).
    """

    def __init__(self, client: GuestbookClient, tz: Optional[tzinfo] = None):
        self.client = client
        self.tz = tz
        self.messages: List[MessageView] = []
        self.form: Dict[str, str] = {field: "" for field in FORM_FIELDS}
        self.loading = False
        self.error = ""

    async def load(self) -> None:
        """Fetch the message list; on failure show the error and an empty list."""
        try:
            self.messages = await self.client.list_messages()
        except ClientError as e:
            self.messages = []
            self.error = e.message

    def set_field(self, field: str, value: str) -> None:
        if field not in self.form:
            raise KeyError(f"Unknown form field '{field}'")
        self.form[field] = value

    async def submit(self) -> bool:
        """
        Send the form to the API.

        Returns:
            True when the message was stored. False when the API refused it,
            the request failed, or another submit was still in flight.
        """
        if self.loading:
            return False

        self.loading = True
        self.error = ""
        try:
            created = await self.client.create_message(self.form["name"], self.form["message"])
        except ClientError as e:
            self.error = e.message
            return False
        else:
            logger.info("Submitted message %s", created.id)
            self.form = {field: "" for field in FORM_FIELDS}
            await self.load()
            return True
        finally:
            self.loading = False

    # ── Rendering ─────────────────────────────────────────────────────────

    def render(self) -> str:
        return PAGE_TEMPLATE.format(
            error=self._render_error(),
            name=escape(self.form["name"]),
            message=escape(self.form["message"]),
            disabled=" disabled" if self.loading else "",
            button="Submitting..." if self.loading else "Submit Message",
            count=len(self.messages),
            entries=self._render_entries(),
        )

    def _render_error(self) -> str:
        if not self.error:
            return ""
        return f'<div class="error" role="alert">{escape(self.error)}</div>'

    def _render_entries(self) -> str:
        if not self.messages:
            return f'<p class="empty">{EMPTY_STATE}</p>'
        return "\n".join(
            '<article class="entry">'
            f"<header><h3>{escape(msg.name)}</h3>"
            f'<time datetime="{msg.created_at.isoformat()}">'
            f"{format_timestamp(msg.created_at, self.tz)}</time></header>"
            f'<p class="body">{escape(msg.message)}</p>'
            "</article>"
            for msg in self.messages
        )


PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>Mini Guestbook</title>
<style>
body {{ font-family: sans-serif; background: #f9fafb; margin: 0; padding: 2rem 1rem; }}
main {{ max-width: 42rem; margin: 0 auto; }}
section {{ background: #fff; border-radius: .5rem; padding: 1.5rem; margin-bottom: 2rem; }}
.error {{ background: #fee2e2; color: #b91c1c; padding: .75rem 1rem; margin-bottom: 1rem; }}
.entry {{ border-bottom: 1px solid #e5e7eb; padding-bottom: 1rem; margin-bottom: 1rem; }}
.entry header {{ display: flex; justify-content: space-between; }}
.body {{ white-space: pre-wrap; }}
.empty {{ color: #6b7280; text-align: center; }}
</style>
</head>
<body>
<main>
<h1>Mini Guestbook</h1>
<p>Leave a message for everyone to see!</p>
<section>
<h2>Add Your Message</h2>
{error}
<form method="post" action="/" onsubmit="this.querySelector('button').disabled = true;">
<label for="name">Your Name</label>
<input type="text" id="name" name="name" value="{name}" required maxlength="100" placeholder="Enter your name">
<label for="message">Your Message</label>
<textarea id="message" name="message" required maxlength="1000" rows="4" placeholder="Share your thoughts...">{message}</textarea>
<button type="submit"{disabled}>{button}</button>
</form>
</section>
<section>
<h2>Recent Messages ({count})</h2>
{entries}
</section>
</main>
<script>
document.querySelectorAll("time[datetime]").forEach(function (el) {{
  el.textContent = new Date(el.getAttribute("datetime")).toLocaleDateString("en-US", {{
    year: "numeric", month: "short", day: "numeric", hour: "2-digit", minute: "2-digit"
  }});
}});
</script>
</body>
</html>
"""

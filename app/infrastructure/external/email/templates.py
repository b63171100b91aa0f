"""Email templates: template key -> subject/text/html (Jinja)."""

from __future__ import annotations

from typing import Any

from jinja2 import Environment, StrictUndefined, Template

from app.application.dtos.email import RenderedEmail
from app.shared.utils.datetime import utc_now

_STORY_STORED_SUBJECT = 'We just stored your story: "{{ story_title }}" on our servers'

_STORY_STORED_TEXT = """\
{% if name %}Hi {{ name }}{% else %}Hi there{% endif %},

Great news! Your story "{{ story_title }}" has been fully stored on our servers as of {{ current_date }}.

Story ID: {{ story_id }}

We have attached a JSON file to this email containing the details of all files associated with your story. This file is for your records and you don't need to do anything with it.

Your story is now safely preserved in our system. {% if is_public -%}
Since you've marked it as public, we encourage you to share it with others who might appreciate your story. View your story at: https://{{ site_domain }}/stories/{{ story_id }}
{%- else -%}
If you find our service valuable, please tell others about {{ site_domain }} so they can preserve their own stories too.
{%- endif %}

If you enjoy using {{ site_domain }}, please consider supporting us through a donation to help us maintain and improve our services.

Thank you for trusting us with your precious memories.

Warm regards,
The {{ site_domain }} Team
"""

_STORY_STORED_HTML = """\
<div style="max-width: 600px; margin: 0 auto; font-family: 'Segoe UI', Roboto, Helvetica, Arial, sans-serif; color: #333; background-color: #ffffff;">
  <div style="background-color: #4a6cf7; padding: 30px 40px; text-align: center; border-radius: 8px 8px 0 0;">
    <h1 style="color: white; margin: 0; font-weight: 600; font-size: 24px;">{{ site_domain }}</h1>
  </div>
  <div style="padding: 40px; border-left: 1px solid #eaeaea; border-right: 1px solid #eaeaea;">
    <h2 style="margin-top: 0; font-size: 20px;">{% if name %}Hi {{ name }}{% else %}Hi there{% endif %}</h2>
    <p style="line-height: 1.6; color: #555;">
      <span style="font-weight: 600; color: #4a6cf7;">Great news!</span>
      Your story "<strong>{{ story_title }}</strong>" has been fully stored on our servers as of {{ current_date }}.
    </p>
    <div style="background-color: #f9f9fb; border-radius: 12px; padding: 24px; margin-bottom: 24px; border: 1px solid #eaeaea;">
      <p style="margin: 0; color: #555;">
        <strong>Story ID:</strong>
        {% if is_public %}<a href="https://{{ site_domain }}/stories/{{ story_id }}" style="color: #4a6cf7;">{{ story_id }}</a>{% else %}{{ story_id }}{% endif %}
      </p>
    </div>
    <div style="background-color: #f9f9fb; border-radius: 12px; padding: 24px; margin-bottom: 24px; border: 1px solid #eaeaea;">
      <h3 style="margin-top: 0; font-size: 18px;">Attachment Information</h3>
      <p style="margin-bottom: 0; line-height: 1.6; color: #555;">
        We have attached a JSON file to this email containing the details of all files associated with your story.
        This file is for your records and you don't need to do anything with it.
      </p>
    </div>
    <p style="line-height: 1.6; color: #555;">
      Your story is now safely preserved in our system.
      {% if is_public %}Since you've marked it as public, we encourage you to share it with others who might appreciate your story.
      <a href="https://{{ site_domain }}/stories/{{ story_id }}" style="color: #4a6cf7;">View your story</a>.
      {% else %}If you find our service valuable, please tell others about {{ site_domain }} so they can preserve their own stories too.{% endif %}
    </p>
    <p style="line-height: 1.6; color: #555;">
      If you enjoy using {{ site_domain }}, please consider
      <a href="https://{{ site_domain }}/support" style="color: #4a6cf7;">supporting us</a>
      to help us maintain and improve our services.
    </p>
    <p style="line-height: 1.6; color: #555;">Thank you for trusting us with your precious memories.</p>
    <p style="line-height: 1.6; color: #555;">Warm regards,<br>The {{ site_domain }} Team</p>
  </div>
  <div style="padding: 24px 40px; text-align: center; background-color: #f9f9fb; border-radius: 0 0 8px 8px; border: 1px solid #eaeaea; border-top: none;">
    <p style="color: #666; font-size: 13px; margin: 0;">&copy; {{ year }} {{ site_domain }}. All rights reserved.</p>
  </div>
</div>
"""

# key -> (subject, text, html)
_DEFAULT_TEMPLATES: dict[str, tuple[str, str, str]] = {
    "story_stored": (_STORY_STORED_SUBJECT, _STORY_STORED_TEXT, _STORY_STORED_HTML),
}


class EmailTemplateRenderer:
    """Renders subject, plain text and HTML for an email template key.

    Subject and text are rendered without escaping; HTML autoescapes
    values such as story titles.
    """

    def __init__(
        self,
        templates: dict[str, tuple[str, str, str]] | None = None,
    ) -> None:
        """Initialize with optional template dict; falls back to _DEFAULT_TEMPLATES."""
        self._templates = templates or _DEFAULT_TEMPLATES
        text_env = Environment(autoescape=False, undefined=StrictUndefined, keep_trailing_newline=True)
        html_env = Environment(autoescape=True, undefined=StrictUndefined)
        self._compiled: dict[str, tuple[Template, Template, Template]] = {
            key: (
                text_env.from_string(subject),
                text_env.from_string(text),
                html_env.from_string(html),
            )
            for key, (subject, text, html) in self._templates.items()
        }

    def render(self, template_key: str, context: dict[str, Any]) -> RenderedEmail:
        """Render the template. Raises KeyError if the key is unknown."""
        if template_key not in self._compiled:
            raise KeyError(f"Unknown email template: {template_key}")
        ctx = {"year": utc_now().year, **context}
        subject_tpl, text_tpl, html_tpl = self._compiled[template_key]
        return RenderedEmail(
            subject=subject_tpl.render(**ctx).strip(),
            text=text_tpl.render(**ctx),
            html=html_tpl.render(**ctx),
        )

"""
Shared branded email layout for ICF Log.

Every outgoing email goes through `wrap_html()` so headers, footers and
typography stay consistent. Small helpers render the recurring blocks
(status boxes, call-to-action buttons, tips).

Usage:
    from services.communications_service.templates.base import wrap_html, cta_button

    html = wrap_html(
        title="Hi Jo,",
        body_html="<p>...</p>" + cta_button("Update Your Log Now", url),
    )
"""

from libs.common.config import get_settings
from libs.common.datetime_utils import utc_now

# ─── Color presets ────────────────────────────────────────────────────
GRADIENT_BRAND = "linear-gradient(135deg, #10b981 0%, #3b82f6 100%)"
GRADIENT_AMBER = "linear-gradient(135deg, #f59e0b 0%, #d97706 100%)"
ACCENT_BLUE = "#3b82f6"


def wrap_html(
    title: str,
    body_html: str,
    subtitle: str = "Professional Coaching Log & CPD Tracker",
    header_gradient: str = GRADIENT_BRAND,
    preheader: str = "",
) -> str:
    """Wrap inner content in the branded ICF Log layout.

    Args:
        title: Heading shown in the body, above the content.
        body_html: The main email content (already-formatted HTML).
        subtitle: Tagline under the logo in the header banner.
        header_gradient: CSS gradient for the header background.
        preheader: Hidden preview text shown in inbox list view.
    """
    settings = get_settings()
    preheader_html = (
        f'<span style="display:none;max-height:0;overflow:hidden;opacity:0;">{preheader}</span>'
        if preheader
        else ""
    )
    title_html = (
        f'<h2 style="color: #1f2937; margin-top: 0;">{title}</h2>' if title else ""
    )

    return f"""\
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1.0" />
    <title>ICF Log</title>
</head>
<body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;">
    {preheader_html}
    <div style="background: {header_gradient}; padding: 30px; text-align: center; border-radius: 10px 10px 0 0;">
        <h1 style="color: white; margin: 0; font-size: 28px;">ICF Log</h1>
        <p style="color: rgba(255,255,255,0.9); margin: 5px 0 0 0;">{subtitle}</p>
    </div>

    <div style="background: #ffffff; padding: 30px; border: 1px solid #e5e7eb; border-top: none; border-radius: 0 0 10px 10px;">
        {title_html}
        {body_html}
        <p style="font-size: 12px; color: #9ca3af; margin-top: 30px; padding-top: 20px; border-top: 1px solid #e5e7eb;">
            <a href="{settings.APP_URL}/dashboard" style="color: #6b7280;">Manage your email preferences</a><br>
            &copy; {utc_now().year} ICF Log. All rights reserved.
        </p>
    </div>
</body>
</html>"""


# ─── Helper functions ─────────────────────────────────────────────────


def detail_box(items: dict[str, str], heading: str = "", accent_color: str = ACCENT_BLUE) -> str:
    """Render a bulleted label/value box, skipping empty values."""
    rows = "".join(
        f"<li><strong>{label}:</strong> {value}</li>"
        for label, value in items.items()
        if value not in (None, "")
    )
    heading_html = (
        f'<h3 style="margin-top: 0; color: #1f2937;">{heading}</h3>' if heading else ""
    )
    return (
        f'<div style="background: #f9fafb; border-left: 4px solid {accent_color}; '
        f'padding: 20px; margin: 25px 0; border-radius: 4px;">'
        f'{heading_html}<ul style="margin: 10px 0; padding-left: 20px;">{rows}</ul></div>'
    )


def cta_button(label: str, url: str, background: str = GRADIENT_BRAND) -> str:
    return (
        f'<div style="text-align: center; margin: 30px 0;">'
        f'<a href="{url}" style="background: {background}; color: white; padding: 15px 30px; '
        f'text-decoration: none; border-radius: 6px; font-weight: bold; display: inline-block; '
        f'font-size: 16px;">{label}</a></div>'
    )


def info_box(content: str, title: str = "") -> str:
    """Muted footnote paragraph, e.g. a logging tip."""
    title_html = f"<strong>{title}</strong> " if title else ""
    return (
        f'<p style="font-size: 14px; color: #6b7280; margin-top: 30px; '
        f'border-top: 1px solid #e5e7eb; padding-top: 20px;">{title_html}{content}</p>'
    )

"""
Transactional email templates.

Every template shares one layout: preview line, heading, intro, details, an
optional table of labelled values, an optional hint, a call to action and the
footer. Copy comes from the ``email`` catalogue; each template only declares
which labelled values it shows and the sample values used for previews.
"""

from dataclasses import dataclass, field
from html import escape
from typing import Any, Dict, List, Optional, Tuple

from .i18n import EMAIL_NAMESPACE, Translator

DEFAULT_TEMPLATE = "welcome"


@dataclass(frozen=True)
class EmailTemplate:
    name: str
    # (label key under ``labels.``, param name) pairs, rendered in order
    fields: Tuple[Tuple[str, str], ...] = ()
    sample: Dict[str, str] = field(default_factory=dict)


@dataclass
class RenderedEmail:
    template: str
    language: str
    subject: str
    html: str
    text: str


_NOW = "2025-01-15 10:32 UTC"
_CARD = "4821"
_AMOUNT = "1000$"

TEMPLATES: Dict[str, EmailTemplate] = {
    template.name: template
    for template in (
        EmailTemplate("welcome"),
        EmailTemplate("loginVerification", (("code", "code"),), {"code": "482913", "minutes": "5"}),
        EmailTemplate("passwordChanged", (("dateTime", "dateTime"),), {"dateTime": _NOW}),
        EmailTemplate(
            "newDeviceDetected",
            (("device", "device"), ("location", "location"), ("dateTime", "dateTime")),
            {"device": "iPhone 15, Safari", "location": "Lisbon, Portugal", "dateTime": _NOW},
        ),
        EmailTemplate("newPhoneAdded", (("phone", "phone"),), {"phone": "+351 912 *** 678"}),
        EmailTemplate("phoneRemoved", (("phone", "phone"),), {"phone": "+351 912 *** 678"}),
        EmailTemplate("twoFactorDisabled", (("dateTime", "dateTime"),), {"dateTime": _NOW}),
        EmailTemplate("twoFactorEnabled", (("dateTime", "dateTime"),), {"dateTime": _NOW}),
        EmailTemplate(
            "activityDetected",
            (("activity", "activity"), ("dateTime", "dateTime"), ("location", "location")),
            {"activity": "Password reset requested", "dateTime": _NOW, "location": "Madrid, Spain"},
        ),
        EmailTemplate(
            "paymentReceived",
            (("amount", "amount"), ("source", "source")),
            {"amount": _AMOUNT, "source": "Dany Cova"},
        ),
        EmailTemplate(
            "paymentSent",
            (("amount", "amount"), ("destination", "destination")),
            {"amount": _AMOUNT, "destination": "Dany Cova"},
        ),
        EmailTemplate(
            "depositSuccessful",
            (("amount", "amount"), ("source", "source")),
            {"amount": _AMOUNT, "source": "Bank transfer"},
        ),
        EmailTemplate("depositFailed", (("amount", "amount"),), {"amount": _AMOUNT}),
        EmailTemplate(
            "withdrawalFailed",
            (("amount", "amount"), ("destination", "destination")),
            {"amount": _AMOUNT, "destination": "0x3f5C...a1B2"},
        ),
        EmailTemplate(
            "withdrawalSuccessful",
            (("amount", "amount"), ("destination", "destination")),
            {"amount": _AMOUNT, "destination": "0x3f5C...a1B2"},
        ),
        EmailTemplate("cardBlocked", (("card", "lastFourDigits"),), {"lastFourDigits": _CARD}),
        EmailTemplate("cardCreated", (("card", "lastFourDigits"),), {"lastFourDigits": _CARD}),
        EmailTemplate(
            "cardPhysicalShipped",
            (("card", "lastFourDigits"), ("tracking", "trackingNumber")),
            {"lastFourDigits": _CARD, "trackingNumber": "RR123456785PT"},
        ),
        EmailTemplate("cardPhysicalDeleted", (("card", "lastFourDigits"),), {"lastFourDigits": _CARD}),
        EmailTemplate("cardActivated", (("card", "lastFourDigits"),), {"lastFourDigits": _CARD}),
        EmailTemplate("cardFrozenByUser", (("card", "lastFourDigits"),), {"lastFourDigits": _CARD}),
        EmailTemplate(
            "cardFrozenBySystem",
            (("card", "lastFourDigits"), ("dateTime", "dateTime")),
            {"lastFourDigits": _CARD, "dateTime": _NOW},
        ),
        EmailTemplate("cardDeleted", (("card", "lastFourDigits"),), {"lastFourDigits": _CARD}),
        EmailTemplate("cardExpired", (("card", "lastFourDigits"),), {"lastFourDigits": _CARD}),
        EmailTemplate("invitationReceived", (("inviter", "inviter"),), {"inviter": "Dany Cova"}),
        EmailTemplate("verifyIdentity"),
        EmailTemplate("kycCompleted"),
        EmailTemplate("kycNotCompleted"),
        EmailTemplate("preventiveAccountLock", (("dateTime", "dateTime"),), {"dateTime": _NOW}),
        EmailTemplate("referralJoined", (("referral", "referral"),), {"referral": "Dany Cova"}),
        EmailTemplate(
            "referralReward",
            (("amount", "amount"), ("referral", "referral")),
            {"amount": "25$", "referral": "Dany Cova"},
        ),
        EmailTemplate(
            "transactionDeclined",
            (("amount", "amount"), ("merchant", "merchant"), ("card", "lastFourDigits")),
            {"amount": "42.90$", "merchant": "Coffee Corner", "lastFourDigits": _CARD},
        ),
    )
}


def get_template(name: Optional[str]) -> Optional[EmailTemplate]:
    if not name:
        return None
    return TEMPLATES.get(name)


def template_names() -> List[str]:
    return list(TEMPLATES)


def render_email(
    template: EmailTemplate,
    name: str,
    language: Optional[str] = None,
    params: Optional[Dict[str, Any]] = None,
    cta_url: str = "https://portalfi.com",
    use_sample: bool = False,
) -> RenderedEmail:
    """Render ``template`` in the resolved language.

    With ``use_sample`` the template's sample values fill any param the caller
    left out, which is what previews rely on. Otherwise rows whose param is
    missing are skipped.
    """
    translator = Translator(EMAIL_NAMESPACE, language)
    values: Dict[str, Any] = dict(template.sample) if use_sample else {}
    values.update({key: value for key, value in (params or {}).items() if value is not None})
    values["name"] = name

    key = template.name
    subject = translator.t(f"{key}.subject", **values)
    preview = translator.t(f"{key}.preview", **values)
    heading = translator.t(f"{key}.heading", **values)
    intro = translator.t(f"{key}.body.intro", **values)
    details = translator.t(f"{key}.body.details", **values)
    cta_label = translator.t(f"{key}.cta.label", **values)
    subtitle = translator.t(f"{key}.cta.subtitle", **values) if translator.has(f"{key}.cta.subtitle") else None
    hint = translator.t(f"{key}.meta.hint", **values) if translator.has(f"{key}.meta.hint") else None
    footer = translator.t("footer.rights")

    rows = [
        (translator.t(f"labels.{label}"), str(values[param]))
        for label, param in template.fields
        if values.get(param) not in (None, "")
    ]

    html = _render_html(preview, heading, intro, details, rows, hint, cta_label, cta_url, subtitle, footer)
    text = _render_text(heading, intro, details, rows, hint, cta_label, cta_url, footer)

    return RenderedEmail(
        template=key,
        language=translator.language,
        subject=subject,
        html=html,
        text=text,
    )


def _render_html(
    preview: str,
    heading: str,
    intro: str,
    details: str,
    rows: List[Tuple[str, str]],
    hint: Optional[str],
    cta_label: str,
    cta_url: str,
    subtitle: Optional[str],
    footer: str,
) -> str:
    rows_html = "".join(
        f'<tr><td style="padding:8px 0;color:#6b7280;">{escape(label)}</td>'
        f'<td style="padding:8px 0;text-align:right;font-weight:600;">{escape(value)}</td></tr>'
        for label, value in rows
    )
    table_html = (
        f'<table width="100%" cellpadding="0" cellspacing="0" style="margin:16px 0;">{rows_html}</table>'
        if rows else ""
    )
    hint_html = f'<p style="color:#6b7280;font-size:13px;">{escape(hint)}</p>' if hint else ""
    subtitle_html = f'<p style="color:#6b7280;font-size:13px;">{escape(subtitle)}</p>' if subtitle else ""

    return f"""<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><meta name="viewport" content="width=device-width, initial-scale=1"></head>
<body style="margin:0;background:#f4f4f5;font-family:Helvetica,Arial,sans-serif;color:#111827;">
<div style="display:none;max-height:0;overflow:hidden;">{escape(preview)}</div>
<table width="100%" cellpadding="0" cellspacing="0"><tr><td align="center" style="padding:32px 16px;">
<table width="560" cellpadding="0" cellspacing="0" style="background:#ffffff;border-radius:12px;padding:32px;">
<tr><td>
<h1 style="font-size:24px;margin:0 0 16px;">{escape(heading)}</h1>
<p>{escape(intro)}</p>
<p>{escape(details)}</p>
{table_html}
{hint_html}
<p style="margin:24px 0 8px;"><a href="{escape(cta_url, quote=True)}" style="background:#111827;color:#ffffff;padding:12px 20px;border-radius:8px;text-decoration:none;">{escape(cta_label)}</a></p>
{subtitle_html}
</td></tr>
</table>
<p style="color:#9ca3af;font-size:12px;">{escape(footer)}</p>
</td></tr></table>
</body>
</html>
"""


def _render_text(
    heading: str,
    intro: str,
    details: str,
    rows: List[Tuple[str, str]],
    hint: Optional[str],
    cta_label: str,
    cta_url: str,
    footer: str,
) -> str:
    lines = [heading, "", intro, "", details, ""]
    lines.extend(f"{label}: {value}" for label, value in rows)
    if rows:
        lines.append("")
    if hint:
        lines.extend([hint, ""])
    lines.extend([f"{cta_label}: {cta_url}", "", footer])
    return "\n".join(lines)

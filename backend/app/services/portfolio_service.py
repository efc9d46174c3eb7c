"""
Profile & Portfolio

Profile edits, the resume section, and the printable portfolio built from a
student's profile, certificates and activities.
"""

import html
import io
import re
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Union

from pydantic import ValidationError as PydanticValidationError

from app.core.exceptions import ValidationError
from app.core.logging_config import logger
from app.gateway.base import RecordStore
from app.models.enums import ActivityStatus, CertificateStatus, Entity
from app.schemas.records import CustomLink, ProfileUpdate, ResumeUpdate
from app.services import analytics

SCHEME_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*://")

PLATFORM_LINKS = (
    ("github_url", "GitHub"),
    ("linkedin_url", "LinkedIn"),
    ("portfolio_url", "Portfolio"),
)


def _first_error(error: PydanticValidationError) -> ValidationError:
    detail = error.errors()[0]
    field = ".".join(str(part) for part in detail.get("loc", ())) or None
    if detail.get("type") == "extra_forbidden":
        return ValidationError(f"Field '{field}' cannot be changed here", field=field)
    return ValidationError(f"{field}: {detail.get('msg')}" if field else detail.get("msg"), field=field)


# ==================== Helpers ====================

def normalize_url(url: Optional[str]) -> Optional[str]:
    """Absolute URL for display; bare hosts get https://"""
    if url is None:
        return None
    url = url.strip()
    if not url:
        return None
    if SCHEME_PATTERN.match(url):
        return url
    return f"https://{url}"


def split_list(value: Union[str, Sequence[str], None]) -> List[str]:
    """Comma-separated text (or a list) to a list of trimmed, non-empty items"""
    if value is None:
        return []
    items = value.split(",") if isinstance(value, str) else value
    return [item.strip() for item in items if item and item.strip()]


def initials(full_name: Optional[str]) -> str:
    return "".join(part[0] for part in (full_name or "").split())


# ==================== Composition ====================

def compose_portfolio(
    profile: Dict[str, Any],
    certificates: Sequence[Dict[str, Any]],
    activities: Sequence[Dict[str, Any]],
) -> Dict[str, Any]:
    """Portfolio view-model: identity, resume, links, stats and showcased records"""
    counts = analytics.status_breakdown(certificates)
    decided = counts["approved"] + counts["rejected"]
    approved_activities = [a for a in activities if ActivityStatus(a["status"]) is ActivityStatus.APPROVED]

    links = [
        {"name": label, "url": normalize_url(profile.get(field))}
        for field, label in PLATFORM_LINKS
        if profile.get(field)
    ]
    custom_links = [
        {"name": link.get("name"), "url": normalize_url(link.get("url")), "icon": link.get("icon")}
        for link in profile.get("custom_links") or []
    ]

    return {
        "identity": {
            "id": profile["id"],
            "full_name": profile.get("full_name"),
            "email": profile.get("email"),
            "student_id_number": profile.get("student_id_number"),
            "phone": profile.get("phone"),
            "address": profile.get("address"),
            "date_of_birth": profile.get("date_of_birth"),
            "bio": profile.get("bio"),
            "initials": initials(profile.get("full_name")),
        },
        "skills": list(profile.get("skills") or []),
        "languages": list(profile.get("languages") or []),
        "interests": list(profile.get("interests") or []),
        "links": links,
        "custom_links": custom_links,
        "stats": {
            "total_certificates": counts["total"],
            "approved_certificates": counts["approved"],
            "pending_certificates": counts["pending"],
            "progress": analytics.approval_rate(counts["approved"], counts["total"]),
            "approval_rate": analytics.approval_rate(counts["approved"], decided),
            "total_credits": analytics.total_credits(approved_activities),
        },
        "certificates": [
            c for c in certificates if CertificateStatus(c["status"]) is CertificateStatus.APPROVED
        ],
        "activities": approved_activities,
        "generated_at": datetime.utcnow(),
    }


# ==================== Renderers ====================

def render_portfolio_text(portfolio: Dict[str, Any]) -> str:
    identity = portfolio["identity"]
    stats = portfolio["stats"]
    lines = [identity["full_name"] or "", "=" * len(identity["full_name"] or "")]

    for label, key in (("Email", "email"), ("Student ID", "student_id_number"), ("Phone", "phone"), ("Address", "address")):
        if identity.get(key):
            lines.append(f"{label}: {identity[key]}")
    if identity.get("bio"):
        lines += ["", identity["bio"]]

    for title, key in (("Skills", "skills"), ("Languages", "languages"), ("Interests", "interests")):
        if portfolio[key]:
            lines += ["", f"{title}: {', '.join(portfolio[key])}"]

    lines += [
        "",
        "Achievements",
        "------------",
        f"Certificates: {stats['approved_certificates']} approved of {stats['total_certificates']} "
        f"({stats['progress']}%)",
        f"Activity credits: {stats['total_credits']}",
    ]
    for certificate in portfolio["certificates"]:
        lines.append(f"- {certificate['title']} ({certificate['category']})")
    for activity in portfolio["activities"]:
        lines.append(f"- {activity['title']}: {activity.get('credits_earned') or 0} credits")

    all_links = portfolio["links"] + portfolio["custom_links"]
    if all_links:
        lines += ["", "Links"]
        lines += [f"- {link['name']}: {link['url']}" for link in all_links]

    return "\n".join(lines) + "\n"


def render_portfolio_html(portfolio: Dict[str, Any]) -> str:
    """Standalone printable page; the browser's print dialog opens on load"""
    e = html.escape
    identity = portfolio["identity"]
    stats = portfolio["stats"]

    def tag_list(items: List[str]) -> str:
        return "".join(f'<span class="tag">{e(item)}</span>' for item in items)

    contact = " &middot; ".join(
        e(str(identity[key])) for key in ("email", "phone", "address") if identity.get(key)
    )
    sections = []
    if identity.get("bio"):
        sections.append(f"<section><h2>About</h2><p>{e(identity['bio'])}</p></section>")
    for title, key in (("Skills", "skills"), ("Languages", "languages"), ("Interests", "interests")):
        if portfolio[key]:
            sections.append(f"<section><h2>{title}</h2>{tag_list(portfolio[key])}</section>")

    certificate_rows = "".join(
        f"<li>{e(c['title'])} <small>{e(c['category'])}</small></li>" for c in portfolio["certificates"]
    )
    activity_rows = "".join(
        f"<li>{e(a['title'])} <small>{a.get('credits_earned') or 0} credits</small></li>"
        for a in portfolio["activities"]
    )
    sections.append(
        "<section><h2>Achievements</h2>"
        f"<p>{stats['approved_certificates']} of {stats['total_certificates']} certificates approved "
        f"({stats['progress']}%), {stats['total_credits']} activity credits</p>"
        f"<ul>{certificate_rows}{activity_rows}</ul></section>"
    )

    all_links = portfolio["links"] + portfolio["custom_links"]
    if all_links:
        link_rows = "".join(
            f'<li><a href="{e(link["url"] or "")}">{e(link["name"] or "")}</a></li>' for link in all_links
        )
        sections.append(f"<section><h2>Links</h2><ul>{link_rows}</ul></section>")

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{e(identity['full_name'] or 'Portfolio')} - Portfolio</title>
<style>
  body {{ font-family: Helvetica, Arial, sans-serif; color: #2d3748; max-width: 800px; margin: 2rem auto; }}
  header {{ display: flex; align-items: center; gap: 1rem; border-bottom: 2px solid #3182ce; padding-bottom: 1rem; }}
  .avatar {{ width: 64px; height: 64px; border-radius: 50%; background: #3182ce; color: #fff;
            display: flex; align-items: center; justify-content: center; font-size: 1.5rem; }}
  h2 {{ color: #1a365d; font-size: 1.1rem; margin-top: 1.5rem; }}
  .tag {{ display: inline-block; background: #e2e8f0; border-radius: 4px; padding: 2px 8px; margin: 2px; }}
  small {{ color: #718096; }}
  @media print {{ body {{ margin: 0; }} }}
</style>
</head>
<body>
<header>
  <div class="avatar">{e(identity['initials'])}</div>
  <div><h1>{e(identity['full_name'] or '')}</h1><p>{contact}</p></div>
</header>
{''.join(sections)}
<script>window.onload = function () {{ window.print(); }};</script>
</body>
</html>
"""


def render_portfolio_pdf(portfolio: Dict[str, Any]) -> bytes:
    """Portfolio as a PDF document"""
    from reportlab.lib import colors
    from reportlab.lib.pagesizes import A4
    from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
    from reportlab.lib.units import cm, inch
    from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle

    e = html.escape
    identity = portfolio["identity"]
    stats = portfolio["stats"]

    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        rightMargin=2*cm,
        leftMargin=2*cm,
        topMargin=2*cm,
        bottomMargin=2*cm,
        title=f"{identity['full_name']} - Portfolio",
    )

    styles = getSampleStyleSheet()
    name_style = ParagraphStyle(
        'PortfolioName',
        parent=styles['Heading1'],
        fontSize=22,
        textColor=colors.HexColor('#1a365d'),
        spaceAfter=6
    )
    section_style = ParagraphStyle(
        'PortfolioSection',
        parent=styles['Heading2'],
        fontSize=13,
        textColor=colors.HexColor('#3182ce'),
        spaceBefore=12,
        spaceAfter=6
    )
    body_style = ParagraphStyle(
        'PortfolioBody',
        parent=styles['Normal'],
        fontSize=10,
        textColor=colors.HexColor('#4a5568'),
        spaceAfter=4
    )

    content = [Paragraph(e(identity['full_name'] or ''), name_style)]
    contact = " | ".join(e(str(identity[key])) for key in ("email", "phone", "address") if identity.get(key))
    if contact:
        content.append(Paragraph(contact, body_style))
    if identity.get("bio"):
        content.append(Spacer(1, 8))
        content.append(Paragraph(e(identity["bio"]), body_style))

    for title, key in (("Skills", "skills"), ("Languages", "languages"), ("Interests", "interests")):
        if portfolio[key]:
            content.append(Paragraph(title, section_style))
            content.append(Paragraph(e(", ".join(portfolio[key])), body_style))

    content.append(Paragraph("Achievements", section_style))
    stats_table = Table(
        [
            ['Certificates approved', f"{stats['approved_certificates']} of {stats['total_certificates']}"],
            ['Progress', f"{stats['progress']}%"],
            ['Activity credits', str(stats['total_credits'])],
        ],
        colWidths=[2.5*inch, 2.5*inch]
    )
    stats_table.setStyle(TableStyle([
        ('BACKGROUND', (0, 0), (0, -1), colors.HexColor('#e2e8f0')),
        ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, -1), 10),
        ('GRID', (0, 0), (-1, -1), 1, colors.HexColor('#cbd5e0')),
        ('TOPPADDING', (0, 0), (-1, -1), 6),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 6),
    ]))
    content.append(stats_table)
    content.append(Spacer(1, 8))

    for certificate in portfolio["certificates"]:
        content.append(Paragraph(f"&bull; {e(certificate['title'])} ({e(certificate['category'])})", body_style))
    for activity in portfolio["activities"]:
        content.append(Paragraph(
            f"&bull; {e(activity['title'])}: {activity.get('credits_earned') or 0} credits", body_style
        ))

    all_links = portfolio["links"] + portfolio["custom_links"]
    if all_links:
        content.append(Paragraph("Links", section_style))
        for link in all_links:
            content.append(Paragraph(f"{e(link['name'] or '')}: {e(link['url'] or '')}", body_style))

    doc.build(content)
    pdf_bytes = buffer.getvalue()
    buffer.close()
    return pdf_bytes


# ==================== Service ====================

class PortfolioService:
    """Profile editing and portfolio assembly for the signed-in user"""

    def __init__(self, store: RecordStore):
        self.store = store

    async def _reload(self, profile_id: str) -> Dict[str, Any]:
        return await self.store.fetch_one(Entity.PROFILES, profile_id)

    async def update_profile(self, profile: Dict[str, Any], fields: Dict[str, Any]) -> Dict[str, Any]:
        """Change full name and/or email; anything else is refused"""
        try:
            update = ProfileUpdate.model_validate(fields)
        except PydanticValidationError as e:
            raise _first_error(e)

        changes = update.model_dump(exclude_unset=True, exclude_none=True)
        if not changes:
            raise ValidationError("Nothing to update")

        await self.store.update(Entity.PROFILES, profile["id"], changes)
        logger.info(
            f"Profile {profile['id']} updated: {', '.join(sorted(changes))}",
            extra={"event_type": "profile_update", "fields": sorted(changes)}
        )
        return await self._reload(profile["id"])

    async def update_resume(self, profile: Dict[str, Any], fields: Dict[str, Any]) -> Dict[str, Any]:
        try:
            resume = ResumeUpdate.model_validate(fields)
        except PydanticValidationError as e:
            raise _first_error(e)

        changes = resume.model_dump(exclude_unset=True)
        for key in ("skills", "languages", "interests"):
            if key in changes:
                changes[key] = split_list(changes[key])
        for key in ("github_url", "linkedin_url", "portfolio_url", "phone", "address", "bio"):
            if key in changes and isinstance(changes[key], str):
                changes[key] = changes[key].strip() or None
        if not changes:
            raise ValidationError("Nothing to update")

        await self.store.update(Entity.PROFILES, profile["id"], changes)
        return await self._reload(profile["id"])

    async def add_custom_link(self, profile: Dict[str, Any], name: str, url: str, icon: Optional[str] = None) -> Dict[str, Any]:
        try:
            link = CustomLink(name=name or "", url=url or "", icon=icon)
        except PydanticValidationError as e:
            raise _first_error(e)

        links = list(profile.get("custom_links") or []) + [link.model_dump()]
        await self.store.update(Entity.PROFILES, profile["id"], {"custom_links": links})
        return await self._reload(profile["id"])

    async def remove_custom_link(self, profile: Dict[str, Any], index: int) -> Dict[str, Any]:
        links = list(profile.get("custom_links") or [])
        if index < 0 or index >= len(links):
            raise ValidationError(f"No custom link at position {index}", field="index")

        del links[index]
        await self.store.update(Entity.PROFILES, profile["id"], {"custom_links": links})
        return await self._reload(profile["id"])

    async def portfolio(self, profile: Dict[str, Any]) -> Dict[str, Any]:
        certificates = await self.store.fetch_collection(
            Entity.CERTIFICATES, filters={"student_id": profile["id"]}, order=[("uploaded_at", True)]
        )
        activities = await self.store.fetch_collection(
            Entity.ACTIVITIES, filters={"student_id": profile["id"]}, order=[("start_date", True)]
        )
        return compose_portfolio(profile, certificates, activities)

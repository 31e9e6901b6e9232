"""Issue drafts for broken-asset reports, contributions, and edit requests.

Produces ``IssueDraft(title, body, labels)`` for an external issue tracker.
Nothing here talks to the tracker; the draft is plain data.

Body structure:
  ## <heading>
  **Asset URL:** / **Asset Title:** / **<by-line>:** / **<date-line>:**
  ### <details heading>
  {description}
  ### <checklist heading>
  - [ ] ...
  ---
  *<footer>*
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from vidcat.catalog.models import Asset


@dataclass(frozen=True)
class _IssueTemplate:
    title_prefix: str
    labels: tuple[str, ...]
    heading: str
    by_line: str
    date_line: str
    details_heading: str
    checklist_heading: str
    checklist: tuple[str, ...]
    footer: str


_TEMPLATES: dict[str, _IssueTemplate] = {
    "broken": _IssueTemplate(
        title_prefix="Broken Asset",
        labels=("bug", "broken-asset", "needs-investigation"),
        heading="Broken Asset Report",
        by_line="Reported by",
        date_line="Report Date",
        details_heading="Issue Description",
        checklist_heading="Automated Actions",
        checklist=(
            "Verify asset accessibility",
            "Check for alternative sources",
            "Update asset status in database",
            "Remove if permanently broken",
        ),
        footer="This issue was automatically created from the Video Test Assets Portal",
    ),
    "contribution": _IssueTemplate(
        title_prefix="New Asset Contribution",
        labels=("enhancement", "new-asset", "contribution"),
        heading="New Asset Contribution",
        by_line="Contributed by",
        date_line="Contribution Date",
        details_heading="Asset Details",
        checklist_heading="Review Checklist",
        checklist=(
            "Verify asset accessibility",
            "Test playback compatibility",
            "Extract technical metadata",
            "Add to asset database",
            "Update documentation",
        ),
        footer="This contribution was submitted through the Video Test Assets Portal",
    ),
    "edit": _IssueTemplate(
        title_prefix="Asset Edit Request",
        labels=("enhancement", "asset-update", "edit-request"),
        heading="Asset Edit Request",
        by_line="Requested by",
        date_line="Request Date",
        details_heading="Requested Changes",
        checklist_heading="Review Process",
        checklist=(
            "Validate requested changes",
            "Update asset metadata",
            "Verify technical accuracy",
            "Update database records",
        ),
        footer="This edit request was submitted through the Video Test Assets Portal",
    ),
}

ISSUE_TYPES: tuple[str, ...] = tuple(_TEMPLATES)


@dataclass
class AssetReport:
    """What a user submits about an asset.

    Attributes:
        asset_url: URL of the asset concerned (or proposed, for contributions).
        asset_title: Short human name, usually the category.
        issue_type: One of ``broken``, ``contribution``, ``edit``.
        description: Free-text details from the user.
        reporter: Optional contact; "Anonymous user" when missing.
    """

    asset_url: str
    asset_title: str
    issue_type: str
    description: str
    reporter: str | None = None


@dataclass
class IssueDraft:
    title: str
    body: str
    labels: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"title": self.title, "body": self.body, "labels": list(self.labels)}


def describe_asset(asset: Asset) -> str:
    """Technical summary of *asset* for an issue description."""
    lines = [
        f"- Protocols: {', '.join(asset.protocol)}",
        f"- Codecs: {', '.join(asset.codec) or 'unknown'}",
        f"- Resolution: {asset.resolution.label if asset.resolution else 'unknown'}",
        f"- HDR: {asset.hdr}",
        f"- Container: {asset.container or 'unknown'}",
    ]
    if asset.features:
        lines.append(f"- Features: {', '.join(asset.features)}")
    if asset.notes:
        lines.append(f"- Notes: {asset.notes}")
    return "\n".join(lines)


def create_issue_draft(report: AssetReport, now: datetime | None = None) -> IssueDraft:
    """Render *report* into an issue draft.

    Raises:
        ValueError: If ``report.issue_type`` is not a known issue type.
    """
    tpl = _TEMPLATES.get(report.issue_type)
    if tpl is None:
        raise ValueError(
            f"Unknown issue type: {report.issue_type!r}. Expected one of: {', '.join(ISSUE_TYPES)}"
        )

    stamp = (now or datetime.now(timezone.utc)).isoformat()
    checklist = "\n".join(f"- [ ] {item}" for item in tpl.checklist)
    body = (
        f"## {tpl.heading}\n\n"
        f"**Asset URL:** {report.asset_url}\n"
        f"**Asset Title:** {report.asset_title}\n"
        f"**{tpl.by_line}:** {report.reporter or 'Anonymous user'}\n"
        f"**{tpl.date_line}:** {stamp}\n\n"
        f"### {tpl.details_heading}\n"
        f"{report.description}\n\n"
        f"### {tpl.checklist_heading}\n"
        f"{checklist}\n\n"
        "---\n"
        f"*{tpl.footer}*"
    )
    return IssueDraft(
        title=f"{tpl.title_prefix}: {report.asset_title}",
        body=body,
        labels=list(tpl.labels),
    )

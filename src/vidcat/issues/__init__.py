"""vidcat issue drafts."""

from vidcat.issues.drafts import ISSUE_TYPES, AssetReport, IssueDraft, create_issue_draft, describe_asset

__all__ = ["ISSUE_TYPES", "AssetReport", "IssueDraft", "create_issue_draft", "describe_asset"]

"""vidcat quality scoring."""

from vidcat.scoring.quality import QualityScore, grade_distribution, score_asset, top_assets

__all__ = ["QualityScore", "grade_distribution", "score_asset", "top_assets"]

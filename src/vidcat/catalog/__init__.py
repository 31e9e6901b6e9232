"""vidcat catalog pipeline: tokenizer, extractors, normalizer, builder."""

from vidcat.catalog.builder import CatalogBuildError, build_catalog, count_facets, load_catalog
from vidcat.catalog.fetcher import SourceFetchError, fetch_source
from vidcat.catalog.models import Asset, Catalog, CatalogMetadata, Resolution
from vidcat.catalog.normalizer import make_asset_id, normalize_row, normalize_structured_row
from vidcat.catalog.tokenizer import tokenize_line

__all__ = [
    "Asset",
    "Catalog",
    "CatalogBuildError",
    "CatalogMetadata",
    "Resolution",
    "SourceFetchError",
    "build_catalog",
    "count_facets",
    "fetch_source",
    "load_catalog",
    "make_asset_id",
    "normalize_row",
    "normalize_structured_row",
    "tokenize_line",
]

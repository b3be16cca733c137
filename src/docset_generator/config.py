"""Configuration management with Pydantic models."""

import tomllib
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


class EntryType(str, Enum):
    """Dash search index entry types."""

    RESOURCE = "Resource"
    SOURCE = "Source"
    GUIDE = "Guide"
    FUNCTION = "Function"
    PROVIDER = "Provider"
    SECTION = "Section"
    ENTRY = "Entry"


class DocsetConfig(BaseModel):
    """Bundle identity and on-disk location."""

    name: str = "RouterOS_Terraform"
    output_dir: Path = Path(".")
    bundle_identifier: str = "terraform-routeros"
    display_name: str = "RouterOS Terraform Provider"
    platform_family: str = "terraform"
    index_file: str = "index.html"
    docset_family: str = "dashtoc"
    index_title: str = "RouterOS Terraform Provider Documentation"
    index_description: str = "Offline documentation for the Terraform RouterOS Provider"
    document_suffix: str = ".html"

    @property
    def bundle_path(self) -> Path:
        return self.output_dir / f"{self.name}.docset"


class DiscoveryConfig(BaseModel):
    """Configuration for finding pages on the listing page."""

    listing_url: str = (
        "https://registry.terraform.io/providers/terraform-routeros/routeros/latest/docs"
    )
    internal_prefix: str = "/providers/terraform-routeros/routeros"
    doc_marker: str = "/docs/"
    # Tried in order; links found by earlier selectors win.
    link_selectors: list[str] = Field(
        default_factory=lambda: [
            ".menu-list-link a.ember-view",
            "a",
        ]
    )
    expand_selector: str = 'a, button, div[role="button"]'
    expand_exact_texts: list[str] = Field(
        default_factory=lambda: ["resources", "data sources", "guides", "functions"]
    )
    expand_substrings: list[str] = Field(
        default_factory=lambda: ["resource", "data source"]
    )
    settle_ms: int = Field(default=500, ge=0, le=30000)
    ready_timeout_ms: int = Field(default=10000, ge=0, le=120000)
    ready_poll_ms: int = Field(default=500, ge=50, le=10000)


class FetcherConfig(BaseModel):
    """Configuration for the browser."""

    headless: bool = True
    timeout_ms: int = Field(default=30000, ge=1000, le=120000)
    user_agent: str | None = None
    content_wait_selector: str = "article"
    content_wait_ms: int = Field(default=10000, ge=0, le=60000)


class ExtractorConfig(BaseModel):
    """Configuration for content extraction."""

    content_selector: str = ".markdown, #provider-doc"
    fallback_selector: str = "article"
    heading_selector: str = "h2[id], h3[id]"
    heading_strip_pattern: str = r"^#+\s*"
    title_separator: str = "|"
    stylesheet_selector: str = 'link[rel~="stylesheet"]'


class ClassifierRule(BaseModel):
    """Map a path substring to an entry type."""

    path_contains: str
    entry_type: EntryType


class ClassifierConfig(BaseModel):
    """Ordered rules for classifying documentation pages."""

    rules: list[ClassifierRule] = Field(
        default_factory=lambda: [
            ClassifierRule(path_contains="/resources/", entry_type=EntryType.RESOURCE),
            ClassifierRule(path_contains="/data-sources/", entry_type=EntryType.SOURCE),
            ClassifierRule(path_contains="/guides/", entry_type=EntryType.GUIDE),
            ClassifierRule(path_contains="/functions/", entry_type=EntryType.FUNCTION),
        ]
    )
    provider_keyword: str = "provider"
    default: EntryType = EntryType.GUIDE


class DownloadConfig(BaseModel):
    """Configuration for batch downloading."""

    batch_size: int = Field(default=10, ge=1, le=50)


class AppConfig(BaseModel):
    """Main application configuration."""

    docset: DocsetConfig = Field(default_factory=DocsetConfig)
    discovery: DiscoveryConfig = Field(default_factory=DiscoveryConfig)
    fetcher: FetcherConfig = Field(default_factory=FetcherConfig)
    extractor: ExtractorConfig = Field(default_factory=ExtractorConfig)
    classifier: ClassifierConfig = Field(default_factory=ClassifierConfig)
    download: DownloadConfig = Field(default_factory=DownloadConfig)
    verbose: bool = False

    @classmethod
    def from_toml(cls, path: Path) -> "AppConfig":
        """Load config from a TOML file."""
        with open(path, "rb") as f:
            data = tomllib.load(f)
        return cls.model_validate(data)

    def to_toml(self) -> str:
        """Serialize config to TOML format."""
        data = self.model_dump(mode="json", exclude_defaults=True)
        return _dict_to_toml(data)


def _toml_value(v: object) -> str:
    """Format a Python value as a TOML literal."""
    if isinstance(v, bool):
        return "true" if v else "false"
    if isinstance(v, (int, float)):
        return str(v)
    if isinstance(v, str):
        escaped = v.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    if isinstance(v, list):
        items = ", ".join(_toml_value(i) for i in v)
        return f"[{items}]"
    if isinstance(v, dict):
        items = ", ".join(f"{k} = {_toml_value(i)}" for k, i in v.items())
        return f"{{ {items} }}"
    return f'"{v}"'


def _dict_to_toml(data: dict) -> str:
    """Convert a two-level dict to a TOML string."""
    lines: list[str] = []
    for k, v in data.items():
        if not isinstance(v, dict):
            lines.append(f"{k} = {_toml_value(v)}")
    for k, v in data.items():
        if isinstance(v, dict) and v:
            lines.append(f"\n[{k}]")
            for sk, sv in v.items():
                lines.append(f"{sk} = {_toml_value(sv)}")
    return "\n".join(lines) + "\n"

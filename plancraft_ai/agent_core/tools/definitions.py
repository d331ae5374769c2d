"""Tool definitions exposed to the language model.

Each tool is described by a ``ToolDefinition``: a name, a human description
and a Pydantic input model. The input model is both the documentation the model
sees (rendered as a JSON schema) and the validator applied to tool arguments
before anything is dispatched.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ToolName(str, Enum):
    semantic_search_assets = "semantic_search_assets"
    create_image_asset = "create_image_asset"
    create_video_asset = "create_video_asset"
    browse_web = "browse_web"
    post_to_linkedin = "post_to_linkedin"
    facebook_create_post = "facebook_create_post"
    facebook_managed_page_posts_search = "facebook_managed_page_posts_search"
    facebook_public_posts_search = "facebook_public_posts_search"
    tiktok_create_post = "tiktok_create_post"
    tiktok_public_posts_search = "tiktok_public_posts_search"
    wordpress_create_draft = "wordpress_create_draft"
    google_ads_create_campaign_scaffold = "google_ads_create_campaign_scaffold"
    google_ads_create_ad_group_scaffold = "google_ads_create_ad_group_scaffold"
    google_ads_create_ad_scaffold = "google_ads_create_ad_scaffold"


class ToolInput(BaseModel):
    """Base class for tool argument models.

    Unknown arguments are ignored: models occasionally add fields the tool does
    not use, and that alone should not fail a step.
    """

    model_config = ConfigDict(extra="ignore")


class SemanticSearchAssetsInput(ToolInput):
    query: str = Field(..., description="The search query for finding relevant assets.")


class CreateImageAssetInput(ToolInput):
    prompt: str = Field(..., description="The textual prompt to generate the image.")


class CreateVideoAssetInput(ToolInput):
    prompt: str = Field(..., description="The textual prompt to generate the video.")


class BrowseWebInput(ToolInput):
    url: str = Field(..., description="The absolute http(s) URL of the page to read.")


class PostToLinkedInInput(ToolInput):
    content: str = Field(..., description="The text of the LinkedIn post.")


class FacebookCreatePostInput(ToolInput):
    text_content: str = Field(..., description="The text of the Facebook post.")
    image_asset_id: Optional[str] = Field(None, description="Project image asset to attach (optional).")
    video_asset_id: Optional[str] = Field(None, description="Project video asset to attach (optional).")

    @model_validator(mode="after")
    def _single_media(self) -> "FacebookCreatePostInput":
        if self.image_asset_id and self.video_asset_id:
            raise ValueError("Cannot provide both image_asset_id and video_asset_id.")
        return self


class FacebookManagedPagePostsSearchInput(ToolInput):
    keywords: str = Field("", description="Keywords to look for in the managed page's posts.")


class FacebookPublicPostsSearchInput(ToolInput):
    keywords: str = Field("", description="Keywords to look for in public posts.")
    target_page: Optional[str] = Field(None, description="Public page id or name to search (optional).")


class TikTokCreatePostInput(ToolInput):
    text_content: str = Field(..., description="The caption of the TikTok post.")
    video_asset_id: str = Field(..., description="Project video asset to publish.")


class TikTokPublicPostsSearchInput(ToolInput):
    keywords_or_hashtags: str = Field(..., description="Keywords or hashtags to search for.")


class WordPressCreateDraftInput(ToolInput):
    title: str = Field(..., description="Title of the blog post.")
    content: str = Field(..., description="HTML or plain-text body of the blog post.")


class GoogleAdsCampaignScaffoldInput(ToolInput):
    campaign_name: str = Field(..., description="Name of the campaign to scaffold.")
    campaign_type: str = Field("SEARCH", description="Campaign type such as SEARCH, DISPLAY or VIDEO.")
    daily_budget: Optional[float] = Field(None, gt=0, description="Daily budget in the account currency (optional).")


class GoogleAdsAdGroupScaffoldInput(ToolInput):
    campaign_id: str = Field(..., description="Id of the campaign the ad group belongs to.")
    ad_group_name: str = Field(..., description="Name of the ad group to scaffold.")


class GoogleAdsAdScaffoldInput(ToolInput):
    ad_group_id: str = Field(..., description="Id of the ad group the ad belongs to.")
    ad_type: str = Field(
        "RESPONSIVE_SEARCH_AD", description="Ad type such as RESPONSIVE_SEARCH_AD or RESPONSIVE_DISPLAY_AD."
    )
    headlines: Optional[List[str]] = Field(None, max_length=15, description="Ad headlines (optional, at most 15).")
    descriptions: Optional[List[str]] = Field(None, max_length=4, description="Ad descriptions (optional, at most 4).")


def _simplify_property(prop: Dict[str, Any]) -> Dict[str, Any]:
    """Collapse Pydantic's ``anyOf [T, null]`` rendering and drop titles."""
    out = {k: v for k, v in prop.items() if k not in ("title", "anyOf")}
    variants = [v for v in prop.get("anyOf", []) if v.get("type") != "null"]
    if len(variants) == 1:
        out.update({k: v for k, v in variants[0].items() if k != "title"})
    return out


class ToolDefinition(BaseModel):
    """Pydantic model for tool definitions.

    ``to_schema`` renders the contract the model sees::

        {"name": ..., "description": ...,
         "parameters": {"type": "object", "properties": {...}, "required": [...]}}
    """

    name: str = Field(..., description="Unique identifier for the tool")
    description: str = Field(..., description="Human-readable description of what the tool does")
    input_schema: Type[ToolInput] = Field(..., description="Pydantic model class for argument validation")

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    def to_schema(self) -> Dict[str, Any]:
        json_schema = self.input_schema.model_json_schema()
        properties = {
            name: _simplify_property(prop) for name, prop in (json_schema.get("properties") or {}).items()
        }
        return {
            "name": self.name,
            "description": self.description,
            "parameters": {
                "type": "object",
                "properties": properties,
                "required": list(json_schema.get("required") or []),
            },
        }

"""Builtin tool catalogue.

The catalogue mirrors the integrations shipped in
``plancraft_ai.agent_core.capabilities.builtin``; every name here has exactly
one adapter there.
"""

from typing import List

from .definitions import (
    BrowseWebInput,
    CreateImageAssetInput,
    CreateVideoAssetInput,
    FacebookCreatePostInput,
    FacebookManagedPagePostsSearchInput,
    FacebookPublicPostsSearchInput,
    GoogleAdsAdGroupScaffoldInput,
    GoogleAdsAdScaffoldInput,
    GoogleAdsCampaignScaffoldInput,
    PostToLinkedInInput,
    SemanticSearchAssetsInput,
    TikTokCreatePostInput,
    TikTokPublicPostsSearchInput,
    ToolDefinition,
    ToolName,
    WordPressCreateDraftInput,
)

BUILTIN_TOOLS: List[ToolDefinition] = [
    ToolDefinition(
        name=ToolName.semantic_search_assets.value,
        description="Performs a semantic search within the project's asset library based on a query.",
        input_schema=SemanticSearchAssetsInput,
    ),
    ToolDefinition(
        name=ToolName.create_image_asset.value,
        description="Generates an image from a textual prompt and saves it as a project asset.",
        input_schema=CreateImageAssetInput,
    ),
    ToolDefinition(
        name=ToolName.create_video_asset.value,
        description="Generates a short video from a textual prompt and saves it as a project asset.",
        input_schema=CreateVideoAssetInput,
    ),
    ToolDefinition(
        name=ToolName.browse_web.value,
        description="Fetches a web page and returns its title and readable text.",
        input_schema=BrowseWebInput,
    ),
    ToolDefinition(
        name=ToolName.post_to_linkedin.value,
        description="Publishes a text post on the project's connected LinkedIn account.",
        input_schema=PostToLinkedInInput,
    ),
    ToolDefinition(
        name=ToolName.facebook_create_post.value,
        description="Publishes a post on the project's Facebook page, optionally with one image or video asset.",
        input_schema=FacebookCreatePostInput,
    ),
    ToolDefinition(
        name=ToolName.facebook_managed_page_posts_search.value,
        description="Searches the posts of the project's own Facebook page.",
        input_schema=FacebookManagedPagePostsSearchInput,
    ),
    ToolDefinition(
        name=ToolName.facebook_public_posts_search.value,
        description="Searches public Facebook page posts for keywords.",
        input_schema=FacebookPublicPostsSearchInput,
    ),
    ToolDefinition(
        name=ToolName.tiktok_create_post.value,
        description="Publishes a project video asset on the project's TikTok account.",
        input_schema=TikTokCreatePostInput,
    ),
    ToolDefinition(
        name=ToolName.tiktok_public_posts_search.value,
        description="Searches public TikTok videos by keywords or hashtags.",
        input_schema=TikTokPublicPostsSearchInput,
    ),
    ToolDefinition(
        name=ToolName.wordpress_create_draft.value,
        description="Creates a draft blog post on the project's WordPress site.",
        input_schema=WordPressCreateDraftInput,
    ),
    ToolDefinition(
        name=ToolName.google_ads_create_campaign_scaffold.value,
        description="Prepares a paused Google Ads campaign scaffold for review.",
        input_schema=GoogleAdsCampaignScaffoldInput,
    ),
    ToolDefinition(
        name=ToolName.google_ads_create_ad_group_scaffold.value,
        description="Prepares a paused Google Ads ad group scaffold inside an existing campaign.",
        input_schema=GoogleAdsAdGroupScaffoldInput,
    ),
    ToolDefinition(
        name=ToolName.google_ads_create_ad_scaffold.value,
        description="Prepares a paused Google Ads ad scaffold inside an existing ad group.",
        input_schema=GoogleAdsAdScaffoldInput,
    ),
]

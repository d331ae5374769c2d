from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Tuple
from uuid import uuid4

from ..integrations.errors import IntegrationNotConfiguredError
from ..schemas.domain import Asset
from ..tools.definitions import ToolName
from .base import Adapter, AdapterContext, AdapterResult


def _generated_asset(kind: str, prompt: str, url: str) -> Asset:
    prefix = "img" if kind == "image" else "vid"
    return Asset(
        asset_id=f"{prefix}_{uuid4().hex[:12]}",
        name=f"Generated {kind.capitalize()}: {prompt[:30]}...",
        type=kind,
        url=url,
        prompt=prompt,
        description=f'AI-generated {kind} based on prompt: "{prompt}"',
        tags={"ai-generated", kind},
    )


@dataclass(frozen=True)
class SemanticSearchAssetsAdapter(Adapter):
    """
    Search the project's asset library by meaning.

    Embeds the query, asks the vector index for the closest asset ids and
    resolves them against the project's assets. Ids the index returns but the
    project no longer holds are skipped.
    """

    name: str = ToolName.semantic_search_assets.value
    required_project_fields: Tuple[str, ...] = ()
    precondition_message: str = ""
    required_deps: Tuple[str, ...] = ("vector_index",)

    async def execute(self, ctx: AdapterContext, *, args: Dict[str, Any]) -> AdapterResult:
        """
        Args:
            ctx: The execution context.
            args: Dictionary of arguments:
                - query (str): Free-text search query.

        Returns:
            AdapterResult: ``{"query", "results": [{id, name, type, description, url}]}``.
        """
        query = str(args.get("query") or "").strip()
        if not query:
            return AdapterResult(ok=False, output={"error": "Search query cannot be empty."})

        index = ctx.deps.vector_index
        if index is None:
            raise IntegrationNotConfiguredError("Semantic search")

        vector = await index.embed(query)
        asset_ids = await index.query(ctx.project.id, vector, ctx.deps.semantic_search_top_n)
        results = []
        for asset_id in asset_ids:
            asset = ctx.project.find_asset(asset_id)
            if asset is None:
                continue
            results.append(
                {
                    "id": asset.asset_id,
                    "name": asset.name,
                    "type": asset.type,
                    "description": asset.description,
                    "url": asset.url,
                }
            )
        return AdapterResult(ok=True, output={"query": query, "results": results})


@dataclass(frozen=True)
class CreateImageAssetAdapter(Adapter):
    """Generate an image from a prompt and hand it back as a new project asset."""

    name: str = ToolName.create_image_asset.value
    required_project_fields: Tuple[str, ...] = ()
    precondition_message: str = ""
    required_deps: Tuple[str, ...] = ("media",)

    async def execute(self, ctx: AdapterContext, *, args: Dict[str, Any]) -> AdapterResult:
        prompt = str(args.get("prompt") or "").strip()
        if not prompt:
            return AdapterResult(ok=False, output={"error": "Image prompt cannot be empty."})
        if ctx.deps.media is None:
            raise IntegrationNotConfiguredError("Image generation service")

        url = await ctx.deps.media.generate_image(prompt)
        asset = _generated_asset("image", prompt, url)
        return AdapterResult(
            ok=True,
            output={
                "asset_id": asset.asset_id,
                "image_url": url,
                "name": asset.name,
                "message": "Image asset created, saved, and indexed for search.",
            },
            assets=[asset],
        )


@dataclass(frozen=True)
class CreateVideoAssetAdapter(Adapter):
    """Generate a short video from a prompt and hand it back as a new project asset."""

    name: str = ToolName.create_video_asset.value
    required_project_fields: Tuple[str, ...] = ()
    precondition_message: str = ""
    required_deps: Tuple[str, ...] = ("media",)

    async def execute(self, ctx: AdapterContext, *, args: Dict[str, Any]) -> AdapterResult:
        prompt = str(args.get("prompt") or "").strip()
        if not prompt:
            return AdapterResult(ok=False, output={"error": "Video prompt cannot be empty."})
        if ctx.deps.media is None:
            raise IntegrationNotConfiguredError("Video generation service")

        url = await ctx.deps.media.generate_video(prompt)
        asset = _generated_asset("video", prompt, url)
        return AdapterResult(
            ok=True,
            output={
                "asset_id": asset.asset_id,
                "video_url": url,
                "name": asset.name,
                "message": "Video asset created, saved, and indexed for search.",
            },
            assets=[asset],
        )


@dataclass(frozen=True)
class BrowseWebAdapter(Adapter):
    """
    Read a web page.

    Delegates fetching and text extraction to the configured ``WebPageReader``.
    """

    name: str = ToolName.browse_web.value
    required_project_fields: Tuple[str, ...] = ()
    precondition_message: str = ""
    required_deps: Tuple[str, ...] = ("web",)

    async def execute(self, ctx: AdapterContext, *, args: Dict[str, Any]) -> AdapterResult:
        url = str(args.get("url") or "").strip()
        if not url:
            return AdapterResult(ok=False, output={"error": "missing url"})
        if ctx.deps.web is None:
            raise IntegrationNotConfiguredError("Web browsing")
        page = await ctx.deps.web.read(url)
        return AdapterResult(ok=True, output=page)


@dataclass(frozen=True)
class PostToLinkedInAdapter(Adapter):
    name: str = ToolName.post_to_linkedin.value
    required_project_fields: Tuple[str, ...] = ("linkedin_access_token", "linkedin_user_id")
    precondition_message: str = "LinkedIn account not connected or credentials missing for this project."
    required_deps: Tuple[str, ...] = ("linkedin",)

    async def execute(self, ctx: AdapterContext, *, args: Dict[str, Any]) -> AdapterResult:
        if ctx.deps.linkedin is None:
            raise IntegrationNotConfiguredError("LinkedIn integration")
        result = await ctx.deps.linkedin.create_post(
            access_token=str(ctx.project.linkedin_access_token),
            user_id=str(ctx.project.linkedin_user_id),
            content=str(args["content"]),
        )
        return AdapterResult(
            ok=True, output={"message": "Successfully posted to LinkedIn.", "post_id": result.get("id")}
        )


@dataclass(frozen=True)
class FacebookCreatePostAdapter(Adapter):
    """
    Publish a post on the project's Facebook page.

    At most one of ``image_asset_id`` and ``video_asset_id`` may be given; the
    referenced asset must exist in the project with a URL.
    """

    name: str = ToolName.facebook_create_post.value
    required_project_fields: Tuple[str, ...] = ("facebook_page_access_token", "facebook_page_id")
    precondition_message: str = "Facebook Page access token or Page ID not configured for this project."
    required_deps: Tuple[str, ...] = ("facebook",)

    async def execute(self, ctx: AdapterContext, *, args: Dict[str, Any]) -> AdapterResult:
        if ctx.deps.facebook is None:
            raise IntegrationNotConfiguredError("Facebook integration")

        media_url = None
        media_type = None
        for media_type_candidate, key in (("image", "image_asset_id"), ("video", "video_asset_id")):
            asset_id = args.get(key)
            if not asset_id:
                continue
            asset = ctx.project.find_asset(asset_id, asset_type=media_type_candidate)
            if asset is None or not asset.url:
                label = media_type_candidate.capitalize()
                return AdapterResult(ok=False, output={"error": f"{label} asset {asset_id} not found or has no URL."})
            media_url, media_type = asset.url, media_type_candidate

        result = await ctx.deps.facebook.create_post(
            page_id=str(ctx.project.facebook_page_id),
            access_token=str(ctx.project.facebook_page_access_token),
            message=str(args["text_content"]),
            media_url=media_url,
            media_type=media_type,
        )
        return AdapterResult(
            ok=True,
            output={
                "message": "Successfully posted to Facebook Page.",
                "post_id": result.get("post_id") or result.get("id"),
            },
        )


@dataclass(frozen=True)
class FacebookManagedPagePostsSearchAdapter(Adapter):
    name: str = ToolName.facebook_managed_page_posts_search.value
    required_project_fields: Tuple[str, ...] = ("facebook_page_access_token", "facebook_page_id")
    precondition_message: str = "Facebook Page access token or Page ID not configured for this project."
    required_deps: Tuple[str, ...] = ("facebook",)

    async def execute(self, ctx: AdapterContext, *, args: Dict[str, Any]) -> AdapterResult:
        if ctx.deps.facebook is None:
            raise IntegrationNotConfiguredError("Facebook integration")
        result = await ctx.deps.facebook.search_posts(
            target=str(ctx.project.facebook_page_id),
            access_token=str(ctx.project.facebook_page_access_token),
            keywords=str(args.get("keywords") or ""),
        )
        return AdapterResult(ok=True, output={"posts": result.get("data", [])})


@dataclass(frozen=True)
class FacebookPublicPostsSearchAdapter(Adapter):
    """
    Search public posts of a page.

    Uses the project's user token when connected and falls back to the
    deployment's app access token. ``target_page`` defaults to the project's
    own page.
    """

    name: str = ToolName.facebook_public_posts_search.value
    required_project_fields: Tuple[str, ...] = ()
    precondition_message: str = ""
    required_deps: Tuple[str, ...] = ("facebook",)

    async def execute(self, ctx: AdapterContext, *, args: Dict[str, Any]) -> AdapterResult:
        if ctx.deps.facebook is None:
            raise IntegrationNotConfiguredError("Facebook integration")
        token = ctx.project.facebook_user_access_token or ctx.deps.facebook_app_access_token
        if not token:
            return AdapterResult(
                ok=False,
                output={"error": "No Facebook user or app access token available for public search."},
            )
        target = args.get("target_page") or ctx.project.facebook_page_id
        if not target:
            return AdapterResult(ok=False, output={"error": "No target page given and no project page configured."})
        result = await ctx.deps.facebook.search_posts(
            target=str(target), access_token=token, keywords=str(args.get("keywords") or "")
        )
        return AdapterResult(ok=True, output={"target_page": target, "posts": result.get("data", [])})


@dataclass(frozen=True)
class TikTokCreatePostAdapter(Adapter):
    name: str = ToolName.tiktok_create_post.value
    required_project_fields: Tuple[str, ...] = ("tiktok_access_token",)
    precondition_message: str = "TikTok access token not configured for this project."
    required_deps: Tuple[str, ...] = ("tiktok",)

    async def execute(self, ctx: AdapterContext, *, args: Dict[str, Any]) -> AdapterResult:
        if ctx.deps.tiktok is None:
            raise IntegrationNotConfiguredError("TikTok integration")
        asset_id = str(args["video_asset_id"])
        asset = ctx.project.find_asset(asset_id, asset_type="video")
        if asset is None or not asset.url:
            return AdapterResult(ok=False, output={"error": f"Video asset {asset_id} not found or has no URL."})
        result = await ctx.deps.tiktok.publish_video(
            access_token=str(ctx.project.tiktok_access_token),
            caption=str(args["text_content"]),
            video_url=asset.url,
        )
        data = result.get("data") or {}
        return AdapterResult(
            ok=True,
            output={"message": "TikTok video publish initiated.", "publish_id": data.get("publish_id")},
        )


@dataclass(frozen=True)
class TikTokPublicPostsSearchAdapter(Adapter):
    name: str = ToolName.tiktok_public_posts_search.value
    required_project_fields: Tuple[str, ...] = ()
    precondition_message: str = ""
    required_deps: Tuple[str, ...] = ("tiktok",)

    async def execute(self, ctx: AdapterContext, *, args: Dict[str, Any]) -> AdapterResult:
        query = str(args.get("keywords_or_hashtags") or "").strip()
        if not query:
            return AdapterResult(ok=False, output={"error": "missing keywords_or_hashtags"})
        if ctx.deps.tiktok is None:
            raise IntegrationNotConfiguredError("TikTok integration")
        result = await ctx.deps.tiktok.search_videos(query=query, access_token=ctx.project.tiktok_access_token)
        data = result.get("data") or {}
        return AdapterResult(ok=True, output={"query": query, "videos": data.get("videos", [])})


@dataclass(frozen=True)
class WordPressCreateDraftAdapter(Adapter):
    name: str = ToolName.wordpress_create_draft.value
    required_project_fields: Tuple[str, ...] = (
        "wordpress_url",
        "wordpress_username",
        "wordpress_application_password",
    )
    precondition_message: str = "WordPress site URL, username or application password not configured for this project."
    required_deps: Tuple[str, ...] = ("wordpress",)

    async def execute(self, ctx: AdapterContext, *, args: Dict[str, Any]) -> AdapterResult:
        if ctx.deps.wordpress is None:
            raise IntegrationNotConfiguredError("WordPress integration")
        draft = await ctx.deps.wordpress.create_draft(
            site_url=str(ctx.project.wordpress_url),
            username=str(ctx.project.wordpress_username),
            application_password=str(ctx.project.wordpress_application_password),
            title=str(args["title"]),
            content=str(args["content"]),
        )
        return AdapterResult(ok=True, output={"message": "WordPress draft created.", **draft})


@dataclass(frozen=True)
class GoogleAdsCampaignScaffoldAdapter(Adapter):
    """
    Prepare a Google Ads campaign scaffold for review.

    Nothing is sent to Google Ads; the scaffold is created paused so a human
    can complete targeting and creatives before it goes live.
    """

    name: str = ToolName.google_ads_create_campaign_scaffold.value
    required_project_fields: Tuple[str, ...] = ("google_ads_customer_id",)
    precondition_message: str = "Google Ads customer ID not configured for this project."
    required_deps: Tuple[str, ...] = ()

    async def execute(self, ctx: AdapterContext, *, args: Dict[str, Any]) -> AdapterResult:
        campaign_type = str(args.get("campaign_type") or "SEARCH").upper()
        scaffold: Dict[str, Any] = {
            "customer_id": ctx.project.google_ads_customer_id,
            "campaign": {
                "name": str(args["campaign_name"]),
                "advertising_channel_type": campaign_type,
                "status": "PAUSED",
            },
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        if args.get("daily_budget") is not None:
            scaffold["budget"] = {"amount_micros": int(float(args["daily_budget"]) * 1_000_000), "period": "DAILY"}
        return AdapterResult(
            ok=True,
            output={"message": "Campaign scaffold prepared (paused, not yet published).", "scaffold": scaffold},
        )


@dataclass(frozen=True)
class GoogleAdsAdGroupScaffoldAdapter(Adapter):
    """Prepare a paused ad group scaffold inside an existing campaign."""

    name: str = ToolName.google_ads_create_ad_group_scaffold.value
    required_project_fields: Tuple[str, ...] = ("google_ads_customer_id",)
    precondition_message: str = "Google Ads customer ID not configured for this project."
    required_deps: Tuple[str, ...] = ()

    async def execute(self, ctx: AdapterContext, *, args: Dict[str, Any]) -> AdapterResult:
        scaffold = {
            "customer_id": ctx.project.google_ads_customer_id,
            "ad_group": {
                "campaign_id": str(args["campaign_id"]),
                "name": str(args["ad_group_name"]),
                "status": "PAUSED",
            },
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        return AdapterResult(
            ok=True,
            output={"message": "Ad group scaffold prepared (paused, not yet published).", "scaffold": scaffold},
        )


@dataclass(frozen=True)
class GoogleAdsAdScaffoldAdapter(Adapter):
    """
    Prepare a paused ad scaffold inside an existing ad group.

    Headlines and descriptions are optional; an ad without them is a
    placeholder that a human fills in before enabling it.
    """

    name: str = ToolName.google_ads_create_ad_scaffold.value
    required_project_fields: Tuple[str, ...] = ("google_ads_customer_id",)
    precondition_message: str = "Google Ads customer ID not configured for this project."
    required_deps: Tuple[str, ...] = ()

    async def execute(self, ctx: AdapterContext, *, args: Dict[str, Any]) -> AdapterResult:
        ad_type = str(args.get("ad_type") or "RESPONSIVE_SEARCH_AD").upper()
        scaffold = {
            "customer_id": ctx.project.google_ads_customer_id,
            "ad": {
                "ad_group_id": str(args["ad_group_id"]),
                "type": ad_type,
                "headlines": [str(h) for h in args.get("headlines") or []],
                "descriptions": [str(d) for d in args.get("descriptions") or []],
                "status": "PAUSED",
            },
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        return AdapterResult(
            ok=True,
            output={"message": "Ad scaffold prepared (paused, not yet published).", "scaffold": scaffold},
        )


def builtin_adapters() -> list[Adapter]:
    return [
        SemanticSearchAssetsAdapter(),
        CreateImageAssetAdapter(),
        CreateVideoAssetAdapter(),
        BrowseWebAdapter(),
        PostToLinkedInAdapter(),
        FacebookCreatePostAdapter(),
        FacebookManagedPagePostsSearchAdapter(),
        FacebookPublicPostsSearchAdapter(),
        TikTokCreatePostAdapter(),
        TikTokPublicPostsSearchAdapter(),
        WordPressCreateDraftAdapter(),
        GoogleAdsCampaignScaffoldAdapter(),
        GoogleAdsAdGroupScaffoldAdapter(),
        GoogleAdsAdScaffoldAdapter(),
    ]

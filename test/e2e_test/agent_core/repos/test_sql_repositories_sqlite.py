"""End-to-end tests for the SQL repository implementations.

Runs the repositories and the plan executor against an in-memory SQLite
database to verify that objectives, plans, chat history and project assets
survive a round trip through the ORM models.
"""

from datetime import datetime, timezone

import pytest
from sqlalchemy import JSON
from sqlalchemy.dialects.sqlite.base import SQLiteTypeCompiler

pytest.importorskip("aiosqlite")

# Patch SQLite type compiler to handle JSONB (needed for in-memory testing)
original_process = SQLiteTypeCompiler.process


def patched_process(self, type_, **kw):
    from sqlalchemy.dialects.postgresql import JSONB

    if isinstance(type_, JSONB):
        return self.process(JSON(), **kw)
    return original_process(self, type_, **kw)


SQLiteTypeCompiler.process = patched_process  # type: ignore[method-assign]

from plancraft_ai.agent_core.capabilities import AdapterDeps, AdapterRegistry
from plancraft_ai.agent_core.capabilities.builtin import CreateImageAssetAdapter, SemanticSearchAssetsAdapter
from plancraft_ai.agent_core.dispatcher import ToolDispatcher
from plancraft_ai.agent_core.errors import ObjectiveConflict, ObjectiveNotFound, ProjectNotFound
from plancraft_ai.agent_core.planning.recurrence import RecurrenceScheduler
from plancraft_ai.agent_core.repos.sql import (
    SqlRepoBundle,
    SqlVectorIndex,
    build_sql_repos,
    create_all,
    create_engine,
    create_sessionmaker,
)
from plancraft_ai.agent_core.runtime import ExecutorDeps, PlanExecutor
from plancraft_ai.agent_core.schemas.domain import (
    Asset,
    ChatMessage,
    Objective,
    ObjectiveUpdate,
    Plan,
    PlanStatus,
    Project,
    RecurrenceFrequency,
    RecurrenceRule,
    Speaker,
    TextResult,
    ToolInvocation,
)
from plancraft_ai.agent_core.tools import BUILTIN_TOOLS, ToolRegistry


@pytest.fixture
async def db_engine():
    """Create an in-memory SQLite database for testing."""
    engine = create_engine("sqlite+aiosqlite:///:memory:")
    await create_all(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def repos(db_engine) -> SqlRepoBundle:
    return build_sql_repos(session_factory=create_sessionmaker(db_engine))


def _objective(**overrides) -> Objective:
    data = dict(
        id="o1",
        project_id="p1",
        title="Spring launch",
        brief="Promote the new sneakers",
        plan=Plan(steps=["Write copy", "Post it"], status=PlanStatus.approved),
    )
    data.update(overrides)
    return Objective(**data)


class TestSqlObjectiveRepository:
    @pytest.mark.asyncio
    async def test_round_trip(self, repos: SqlRepoBundle) -> None:
        objective = _objective(
            chat_history=[ChatMessage(speaker=Speaker.user, content="hello")],
            assets=[Asset(asset_id="img_1", name="Logo", type="image", tags={"brand"})],
            is_recurring=True,
            recurrence_rule=RecurrenceRule(frequency=RecurrenceFrequency.weekly, interval=2),
        )
        await repos.objectives.create(objective)

        fetched = await repos.objectives.find_by_id("o1")

        assert fetched is not None
        assert fetched.plan == objective.plan
        assert fetched.chat_history[0].content == "hello"
        assert fetched.assets[0].tags == {"brand"}
        assert fetched.recurrence_rule == RecurrenceRule(frequency=RecurrenceFrequency.weekly, interval=2)
        assert await repos.objectives.find_by_id("missing") is None

    @pytest.mark.asyncio
    async def test_partial_update(self, repos: SqlRepoBundle) -> None:
        await repos.objectives.create(_objective())

        updated = await repos.objectives.update(
            "o1",
            ObjectiveUpdate(plan=Plan(steps=["Write copy", "Post it"], status=PlanStatus.in_progress, current_step_index=1)),
        )
        fetched = await repos.objectives.find_by_id("o1")

        assert updated.plan.current_step_index == 1
        assert fetched.plan.status == PlanStatus.in_progress
        assert fetched.title == "Spring launch"
        assert fetched.brief == "Promote the new sneakers"

    @pytest.mark.asyncio
    async def test_update_unknown_objective(self, repos: SqlRepoBundle) -> None:
        with pytest.raises(ObjectiveNotFound):
            await repos.objectives.update("missing", ObjectiveUpdate(title="x"))

    @pytest.mark.asyncio
    async def test_list_recurring(self, repos: SqlRepoBundle) -> None:
        await repos.objectives.create(_objective(id="o1"))
        await repos.objectives.create(_objective(id="o2", is_recurring=True))

        assert [o.id for o in await repos.objectives.list_recurring()] == ["o2"]

    @pytest.mark.asyncio
    async def test_conditional_update_refuses_a_moved_cursor(self, repos: SqlRepoBundle) -> None:
        await repos.objectives.create(_objective())
        advanced = Plan(steps=["Write copy", "Post it"], status=PlanStatus.in_progress, current_step_index=1)

        await repos.objectives.update("o1", ObjectiveUpdate(plan=advanced), expected_step_index=0)
        with pytest.raises(ObjectiveConflict) as exc_info:
            await repos.objectives.update("o1", ObjectiveUpdate(plan=advanced), expected_step_index=0)

        assert exc_info.value.details == {"expected_step_index": 0, "actual_step_index": 1}
        assert (await repos.objectives.find_by_id("o1")).plan.current_step_index == 1


class TestSqlProjectRepository:
    @pytest.mark.asyncio
    async def test_integration_credentials_round_trip(self, repos: SqlRepoBundle) -> None:
        await repos.projects.create(
            Project(id="p1", name="Acme", linkedin_access_token="tok", linkedin_user_id="u1")
        )

        fetched = await repos.projects.find_by_id("p1")

        assert fetched.linkedin_access_token == "tok"
        assert fetched.linkedin_user_id == "u1"
        assert fetched.facebook_page_id is None

    @pytest.mark.asyncio
    async def test_add_asset_replaces_same_id(self, repos: SqlRepoBundle) -> None:
        await repos.projects.create(Project(id="p1", name="Acme"))

        await repos.projects.add_asset("p1", Asset(asset_id="img_1", name="v1", type="image"))
        await repos.projects.add_asset("p1", Asset(asset_id="img_1", name="v2", type="image"))

        fetched = await repos.projects.find_by_id("p1")
        assert [(a.asset_id, a.name) for a in fetched.assets] == [("img_1", "v2")]
        with pytest.raises(ProjectNotFound):
            await repos.projects.add_asset("missing", Asset(name="x", type="image"))


class _EchoGateway:
    async def execute_step(self, description, history, assets, objective_title, objective_brief, *, recurrence_context=None):
        return TextResult(text=f"done: {description}")

    async def summarize(self, tool_output_description, history, assets):
        return TextResult(text="summary")


@pytest.mark.asyncio
async def test_executor_runs_recurring_plan_against_sql(repos: SqlRepoBundle) -> None:
    await repos.projects.create(Project(id="p1", name="Acme"))
    await repos.objectives.create(
        _objective(is_recurring=True, recurrence_rule=RecurrenceRule(frequency=RecurrenceFrequency.daily))
    )
    dispatcher = ToolDispatcher(
        registry=ToolRegistry(BUILTIN_TOOLS),
        adapters=AdapterRegistry(),
        projects=repos.projects,
        deps=AdapterDeps(),
    )
    executor = PlanExecutor(deps=ExecutorDeps(objectives=repos.objectives, gateway=_EchoGateway(), dispatcher=dispatcher))

    await executor.advance("o1", "Keep it short")
    final = await executor.advance("o1")
    stored = await repos.objectives.find_by_id("o1")

    assert final.plan_status == PlanStatus.completed
    assert [m.speaker for m in stored.chat_history] == [
        Speaker.system,
        Speaker.user,
        Speaker.agent,
        Speaker.system,
        Speaker.agent,
    ]
    assert stored.original_plan == Plan(steps=["Write copy", "Post it"], status=PlanStatus.approved)

    scheduler = RecurrenceScheduler(objectives=repos.objectives)
    now = datetime(2030, 1, 1, tzinfo=timezone.utc)
    assert await scheduler.run_due(now) == []
    assert await scheduler.run_due(datetime(2030, 1, 3, tzinfo=timezone.utc)) == ["o1"]

    restarted = await repos.objectives.find_by_id("o1")
    assert restarted.plan.status == PlanStatus.approved
    assert restarted.plan.current_step_index == 0
    assert restarted.current_recurrence_context.startswith("Previous cycle completed 2 step(s).")
    assert len(restarted.chat_history) == 5


async def _fixed_embedding(text: str) -> list[float]:
    return [1.0, 0.0] if "sneakers" in text.lower() else [0.0, 1.0]


class TestSqlVectorIndex:
    @pytest.mark.asyncio
    async def test_vectors_survive_a_new_index_instance(self, db_engine) -> None:
        writer = SqlVectorIndex(session_factory=create_sessionmaker(db_engine), embedder=_fixed_embedding)
        await writer.upsert("p1", "img_far", [0.0, 5.0])
        await writer.upsert("p1", "img_near", [1.0, 0.5])
        await writer.upsert("p1", "img_near", [1.0, 0.1])
        await writer.upsert("p2", "img_other", [1.0, 0.0])
        await writer.upsert("p1", "img_old_model", [1.0, 0.0, 0.0])

        reader = SqlVectorIndex(session_factory=create_sessionmaker(db_engine), embedder=_fixed_embedding)

        assert await reader.query("p1", [1.0, 0.0], 5) == ["img_near", "img_far"]
        assert await reader.query("p1", [1.0, 0.0], 1) == ["img_near"]
        assert await reader.query("p1", [1.0, 0.0], 0) == []
        assert await reader.query("p3", [1.0, 0.0], 5) == []

    @pytest.mark.asyncio
    async def test_created_asset_is_searchable_after_restart(self, db_engine, repos: SqlRepoBundle) -> None:
        class _Media:
            async def generate_image(self, prompt: str) -> str:
                return "https://cdn.example/sneakers.png"

        await repos.projects.create(Project(id="p1", name="Acme"))
        index = SqlVectorIndex(session_factory=create_sessionmaker(db_engine), embedder=_fixed_embedding)
        adapters = AdapterRegistry()
        adapters.register(CreateImageAssetAdapter())
        creating = ToolDispatcher(
            registry=ToolRegistry(BUILTIN_TOOLS),
            adapters=adapters,
            projects=repos.projects,
            deps=AdapterDeps(media=_Media(), vector_index=index),
            vector_index=index,
        )
        created = await creating.dispatch(
            ToolInvocation(name="create_image_asset", arguments={"prompt": "Blue sneakers"}), "p1"
        )

        restarted_repos = build_sql_repos(session_factory=create_sessionmaker(db_engine))
        restarted_index = SqlVectorIndex(session_factory=create_sessionmaker(db_engine), embedder=_fixed_embedding)
        search_adapters = AdapterRegistry()
        search_adapters.register(SemanticSearchAssetsAdapter())
        searching = ToolDispatcher(
            registry=ToolRegistry(BUILTIN_TOOLS),
            adapters=search_adapters,
            projects=restarted_repos.projects,
            deps=AdapterDeps(vector_index=restarted_index),
        )
        found = await searching.dispatch(
            ToolInvocation(name="semantic_search_assets", arguments={"query": "sneakers"}), "p1"
        )

        (asset,) = created.assets
        assert found.ok
        assert [r["id"] for r in found.payload["results"]] == [asset.asset_id]

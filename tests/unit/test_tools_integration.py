# tests/unit/test_tools_integration.py
"""
Integration tests for tool implementations with SQLiteDocumentStore.

Tests the tools (not the MCP wrappers) against persistent storage, a local
blob store and a scripted LLM. PDF text extraction is patched out.
"""

import importlib
import json
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
import pytest_asyncio
from fastmcp.exceptions import ToolError

from plansight.config.schema import PlansightConfig
from plansight.documents.blob_store import LocalBlobStore
from plansight.documents.text import TextExtractionError
from plansight.models.documents import DocumentState, ShareRecord, generate_share_token
from plansight.models.sqlite_store import SQLiteDocumentStore
from plansight.tools import (
    create_share_link,
    generate_mitigation_plan,
    get_report,
    get_risk_matrix,
    list_documents,
    process_document,
    upload_document,
    view_share,
)

process_module = importlib.import_module("plansight.tools.process_document")

SUMMARY_REPLY = json.dumps(
    {
        "headline": "Approval likely once highways objection is resolved.",
        "risk_level": "MEDIUM",
        "key_issues": ["Highways objection", "Drainage strategy"],
        "recommended_actions": ["Commission a transport assessment"],
        "timeline_notes": ["Committee date in 10 weeks"],
        "risk_issues": [
            {"issue": "Highways objection", "category": "planning", "probability": 4, "impact": 5},
            {"issue": "Drainage strategy", "category": "delivery", "probability": 2, "impact": 3},
        ],
    }
)

PLAN_REPLY = json.dumps(
    {
        "summary": "Resolve highways first, then drainage.",
        "steps": [
            {"title": "Transport assessment", "cost_gbp_min": 4000, "cost_gbp_max": 8000},
            {"title": "Drainage strategy", "timeline_weeks_min": 2, "timeline_weeks_max": 3},
            {"title": "Pre-app meeting", "specialist": "Planning consultant"},
        ],
    }
)


class ScriptedLLM:
    """Answers summary prompts and mitigation prompts with canned JSON."""

    def __init__(self, summary_reply: str = SUMMARY_REPLY, plan_reply: str = PLAN_REPLY):
        self.summary_reply = summary_reply
        self.plan_reply = plan_reply
        self.summary_calls = 0
        self.plan_calls = 0

    async def generate(self, messages: list[dict]) -> str:
        if "planning consultant" in messages[0]["content"]:
            self.plan_calls += 1
            return self.plan_reply
        self.summary_calls += 1
        return self.summary_reply


@pytest_asyncio.fixture
async def store(tmp_path: Path):
    """Create a temporary SQLite store for testing."""
    s = SQLiteDocumentStore(str(tmp_path / "test_documents.db"))
    await s.initialize()
    yield s
    await s.close()


@pytest.fixture
def blob_store(tmp_path: Path) -> LocalBlobStore:
    return LocalBlobStore(tmp_path / "blobs")


@pytest.fixture
def config(tmp_path: Path) -> PlansightConfig:
    return PlansightConfig(
        storage={"data_dir": str(tmp_path)},
        sharing={"base_url": "https://plansight.example/", "default_expiry_days": 14},
    )


@pytest.fixture
def pdf_file(tmp_path: Path) -> Path:
    path = tmp_path / "Design Statement.pdf"
    path.write_bytes(b"%PDF-1.7\n% fake body for tests\n%%EOF")
    return path


@pytest.fixture
def pdf_text(monkeypatch):
    """Patch PDF text extraction to return fixed text."""
    monkeypatch.setattr(
        process_module, "extract_pdf_text", lambda data: "Planning statement for 12 homes."
    )


async def _upload(pdf_file, store, blob_store, config, site_id=None) -> str:
    result = await upload_document(str(pdf_file), store, blob_store, config, site_id=site_id)
    return result["document_id"]


async def _processed(pdf_file, store, blob_store, config, llm) -> str:
    document_id = await _upload(pdf_file, store, blob_store, config, site_id="mill-lane")
    await process_document(document_id, store, blob_store, llm, config)
    return document_id


class TestUpload:
    @pytest.mark.asyncio
    async def test_upload_persists_record_and_blob(self, store, blob_store, config, pdf_file):
        result = await upload_document(str(pdf_file), store, blob_store, config, site_id="site-7")

        assert result["state"] == "pending"
        assert result["file_name"] == "Design Statement.pdf"
        assert result["storage_path"].startswith("site-7/")
        assert result["storage_path"].endswith("-Design_Statement.pdf")
        assert result["file_size"] == pdf_file.stat().st_size

        record = await store.get(result["document_id"])
        assert record.state == DocumentState.PENDING
        assert record.mime_type == "application/pdf"
        assert record.site_id == "site-7"
        assert blob_store.get(record.storage_path) == pdf_file.read_bytes()

    @pytest.mark.asyncio
    async def test_upload_rejects_non_pdf(self, store, blob_store, config, tmp_path):
        notes = tmp_path / "notes.pdf"
        notes.write_text("just some notes")

        with pytest.raises(ToolError, match="not a PDF"):
            await upload_document(str(notes), store, blob_store, config)
        assert await store.list_all() == []

    @pytest.mark.asyncio
    async def test_upload_rejects_oversized_file(self, store, blob_store, tmp_path, pdf_file):
        config = PlansightConfig(storage={"data_dir": str(tmp_path), "max_upload_bytes": 10})

        with pytest.raises(ToolError, match="too large"):
            await upload_document(str(pdf_file), store, blob_store, config)

    @pytest.mark.asyncio
    async def test_upload_missing_file(self, store, blob_store, config, tmp_path):
        with pytest.raises(ToolError, match="does not exist"):
            await upload_document(str(tmp_path / "nope.pdf"), store, blob_store, config)

    @pytest.mark.asyncio
    async def test_free_tier_limited_to_one_site(self, store, blob_store, config, pdf_file):
        await _upload(pdf_file, store, blob_store, config, site_id="mill-lane")
        await _upload(pdf_file, store, blob_store, config, site_id="mill-lane")
        await _upload(pdf_file, store, blob_store, config)

        with pytest.raises(ToolError, match="free plan allows 1 site"):
            await _upload(pdf_file, store, blob_store, config, site_id="chapel-row")

        assert len(await store.list_all()) == 3

    @pytest.mark.asyncio
    async def test_starter_tier_allows_more_sites(self, store, blob_store, tmp_path, pdf_file):
        config = PlansightConfig(storage={"data_dir": str(tmp_path)}, account={"tier": "starter"})

        for site in ["mill-lane", "chapel-row", "quarry-road"]:
            await _upload(pdf_file, store, blob_store, config, site_id=site)

        sites = {record.site_id for record in await store.list_all()}
        assert sites == {"mill-lane", "chapel-row", "quarry-road"}


class TestProcess:
    @pytest.mark.asyncio
    async def test_process_stores_summary(self, store, blob_store, config, pdf_file, pdf_text):
        llm = ScriptedLLM()
        document_id = await _upload(pdf_file, store, blob_store, config)

        result = await process_document(document_id, store, blob_store, llm, config)

        assert result["state"] == "processed"
        assert result["headline"].startswith("Approval likely")
        assert result["risk_level"] == "MEDIUM"
        # (80 + 24) / 2
        assert result["risk_index"] == 52
        assert result["risk_band"] == "medium"
        assert result["issue_count"] == 2
        assert result["text_chars"] == len("Planning statement for 12 homes.")

        record = await store.get(document_id)
        assert record.state == DocumentState.PROCESSED
        assert record.extracted_text == "Planning statement for 12 homes."
        assert json.loads(record.summary_json)["risk_issues"][0]["issue"] == "Highways objection"
        assert record.error is None

    @pytest.mark.asyncio
    async def test_processed_document_not_reprocessed(
        self, store, blob_store, config, pdf_file, pdf_text
    ):
        llm = ScriptedLLM()
        document_id = await _processed(pdf_file, store, blob_store, config, llm)

        result = await process_document(document_id, store, blob_store, llm, config)

        assert result["risk_index"] == 52
        assert llm.summary_calls == 1

    @pytest.mark.asyncio
    async def test_force_reprocess_clears_mitigation(
        self, store, blob_store, config, pdf_file, pdf_text
    ):
        llm = ScriptedLLM()
        document_id = await _processed(pdf_file, store, blob_store, config, llm)
        await generate_mitigation_plan(document_id, store, llm, config)
        assert (await store.get(document_id)).mitigation_json is not None

        await process_document(document_id, store, blob_store, llm, config, force=True)

        assert llm.summary_calls == 2
        assert (await store.get(document_id)).mitigation_json is None

    @pytest.mark.asyncio
    async def test_unparseable_reply_fails_document(
        self, store, blob_store, config, pdf_file, pdf_text
    ):
        llm = ScriptedLLM(summary_reply="I'm unable to summarise this document.")
        document_id = await _upload(pdf_file, store, blob_store, config)

        with pytest.raises(ToolError, match="Summary extraction failed"):
            await process_document(document_id, store, blob_store, llm, config)

        record = await store.get(document_id)
        assert record.state == DocumentState.FAILED
        assert "Summary extraction failed" in record.error
        assert llm.summary_calls == config.extraction.max_attempts

    @pytest.mark.asyncio
    async def test_unreadable_pdf_fails_document(
        self, store, blob_store, config, pdf_file, monkeypatch
    ):
        def no_text(data):
            raise TextExtractionError("No extractable text in PDF (3 pages)")

        monkeypatch.setattr(process_module, "extract_pdf_text", no_text)
        llm = ScriptedLLM()
        document_id = await _upload(pdf_file, store, blob_store, config)

        with pytest.raises(ToolError, match="No extractable text"):
            await process_document(document_id, store, blob_store, llm, config)

        record = await store.get(document_id)
        assert record.state == DocumentState.FAILED
        assert llm.summary_calls == 0

    @pytest.mark.asyncio
    async def test_llm_error_fails_document(self, store, blob_store, config, pdf_file, pdf_text):
        class DownLLM:
            async def generate(self, messages):
                raise ConnectionError("connection refused")

        document_id = await _upload(pdf_file, store, blob_store, config)

        with pytest.raises(ToolError, match="LLM request failed"):
            await process_document(document_id, store, blob_store, DownLLM(), config)
        assert (await store.get(document_id)).state == DocumentState.FAILED

    @pytest.mark.asyncio
    async def test_failed_document_can_be_retried(
        self, store, blob_store, config, pdf_file, pdf_text
    ):
        llm = ScriptedLLM(summary_reply="nope")
        document_id = await _upload(pdf_file, store, blob_store, config)
        with pytest.raises(ToolError):
            await process_document(document_id, store, blob_store, llm, config)

        llm.summary_reply = SUMMARY_REPLY
        result = await process_document(document_id, store, blob_store, llm, config)

        assert result["state"] == "processed"
        assert (await store.get(document_id)).error is None

    @pytest.mark.asyncio
    async def test_document_already_processing(self, store, blob_store, config, pdf_file):
        document_id = await _upload(pdf_file, store, blob_store, config)
        await store.update(document_id, state=DocumentState.PROCESSING)

        with pytest.raises(ToolError, match="already being processed"):
            await process_document(document_id, store, blob_store, ScriptedLLM(), config)

    @pytest.mark.asyncio
    async def test_unknown_document(self, store, blob_store, config):
        with pytest.raises(ToolError, match="not found"):
            await process_document("doc-missing", store, blob_store, ScriptedLLM(), config)


class TestRiskMatrixAndList:
    @pytest.mark.asyncio
    async def test_risk_matrix(self, store, blob_store, config, pdf_file, pdf_text):
        document_id = await _processed(pdf_file, store, blob_store, config, ScriptedLLM())

        result = await get_risk_matrix(document_id, store)

        matrix = result["matrix"]
        assert result["file_name"] == "Design Statement.pdf"
        assert matrix["risk_index"] == 52
        assert matrix["top_issues"][0]["issue"] == "Highways objection"
        assert matrix["top_issues"][0]["score"] == 20
        assert matrix["grid"][3][4] == 1
        assert matrix["grid"][1][2] == 1

    @pytest.mark.asyncio
    async def test_risk_matrix_requires_processing(self, store, blob_store, config, pdf_file):
        document_id = await _upload(pdf_file, store, blob_store, config)

        with pytest.raises(ToolError, match="Run process_document first"):
            await get_risk_matrix(document_id, store)

    @pytest.mark.asyncio
    async def test_list_documents(self, store, blob_store, config, pdf_file, pdf_text):
        processed_id = await _processed(pdf_file, store, blob_store, config, ScriptedLLM())
        pending_id = await _upload(pdf_file, store, blob_store, config)

        result = await list_documents(store)

        assert result["total"] == 2
        by_id = {d["document_id"]: d for d in result["documents"]}
        assert by_id[processed_id]["risk_index"] == 52
        assert by_id[processed_id]["risk_band"] == "medium"
        assert by_id[processed_id]["site_id"] == "mill-lane"
        assert by_id[pending_id]["state"] == "pending"
        assert by_id[pending_id]["risk_index"] is None

    @pytest.mark.asyncio
    async def test_list_documents_empty(self, store):
        assert await list_documents(store) == {"documents": [], "total": 0}


class TestMitigation:
    @pytest.mark.asyncio
    async def test_free_tier_gets_preview_but_full_plan_stored(
        self, store, blob_store, config, pdf_file, pdf_text
    ):
        llm = ScriptedLLM()
        document_id = await _processed(pdf_file, store, blob_store, config, llm)

        result = await generate_mitigation_plan(document_id, store, llm, config)

        assert result["tier"] == "free"
        assert result["plan"]["truncated"] is True
        assert len(result["plan"]["steps"]) == 1
        assert result["message"].startswith("Preview only")

        stored = json.loads((await store.get(document_id)).mitigation_json)
        assert len(stored["steps"]) == 3

    @pytest.mark.asyncio
    async def test_pro_tier_gets_full_plan_from_cache(
        self, store, blob_store, config, pdf_file, pdf_text
    ):
        llm = ScriptedLLM()
        document_id = await _processed(pdf_file, store, blob_store, config, llm)
        await generate_mitigation_plan(document_id, store, llm, config)

        result = await generate_mitigation_plan(document_id, store, llm, config, tier="pro")

        assert result["tier"] == "pro"
        assert len(result["plan"]["steps"]) == 3
        assert result["plan"]["truncated"] is False
        assert result["message"] is None
        assert llm.plan_calls == 1

    @pytest.mark.asyncio
    async def test_regenerate_calls_llm_again(self, store, blob_store, config, pdf_file, pdf_text):
        llm = ScriptedLLM()
        document_id = await _processed(pdf_file, store, blob_store, config, llm)
        await generate_mitigation_plan(document_id, store, llm, config)

        await generate_mitigation_plan(document_id, store, llm, config, regenerate=True)

        assert llm.plan_calls == 2

    @pytest.mark.asyncio
    async def test_unusable_plan_reply(self, store, blob_store, config, pdf_file, pdf_text):
        llm = ScriptedLLM(plan_reply="Here are some thoughts, no JSON.")
        document_id = await _processed(pdf_file, store, blob_store, config, llm)

        result = await generate_mitigation_plan(document_id, store, llm, config)

        assert result["plan"] is None
        assert "usable mitigation plan" in result["message"]
        assert (await store.get(document_id)).mitigation_json is None

    @pytest.mark.asyncio
    async def test_no_issues_skips_llm(self, store, blob_store, config, pdf_file, pdf_text):
        llm = ScriptedLLM(summary_reply=json.dumps({"headline": "Nothing of concern."}))
        document_id = await _processed(pdf_file, store, blob_store, config, llm)

        result = await generate_mitigation_plan(document_id, store, llm, config)

        assert result["plan"] is None
        assert result["message"] == "No risk issues to mitigate."
        assert llm.plan_calls == 0


class TestReportAndSharing:
    @pytest.mark.asyncio
    async def test_report_for_processed_document(
        self, store, blob_store, config, pdf_file, pdf_text
    ):
        llm = ScriptedLLM()
        document_id = await _processed(pdf_file, store, blob_store, config, llm)
        await generate_mitigation_plan(document_id, store, llm, config)

        free = (await get_report(document_id, store))["content"]
        pro = (await get_report(document_id, store, tier="pro"))["content"]

        assert "# Planning Risk Report: Design Statement.pdf" in free
        assert "**Risk index:** 52/100 (medium)" in free
        assert "### Step 1: Transport assessment" in free
        assert "### Step 2" not in free
        assert "Preview only" in free
        assert "### Step 3: Pre-app meeting" in pro

    @pytest.mark.asyncio
    async def test_report_for_pending_document(self, store, blob_store, config, pdf_file):
        document_id = await _upload(pdf_file, store, blob_store, config)

        content = (await get_report(document_id, store))["content"]

        assert "Document has not been processed (state: pending)." in content

    @pytest.mark.asyncio
    async def test_share_link_and_views(self, store, blob_store, config, pdf_file, pdf_text):
        document_id = await _processed(pdf_file, store, blob_store, config, ScriptedLLM())

        link = await create_share_link(
            document_id, store, config, recipient_email="officer@council.gov.uk"
        )

        assert link["url"] == f"https://plansight.example/share/{link['token']}"
        assert link["recipient_email"] == "officer@council.gov.uk"
        expires = datetime.fromisoformat(link["expires_at"])
        assert timedelta(days=13) < expires - datetime.now(timezone.utc) <= timedelta(days=14)

        first = await view_share(link["token"], store)
        second = await view_share(link["token"].upper(), store)

        assert first["view_count"] == 1
        assert second["view_count"] == 2
        assert "# Planning Risk Report: Design Statement.pdf" in second["content"]

    @pytest.mark.asyncio
    async def test_share_requires_processed_document(self, store, blob_store, config, pdf_file):
        document_id = await _upload(pdf_file, store, blob_store, config)

        with pytest.raises(ToolError, match="Run process_document first"):
            await create_share_link(document_id, store, config)

    @pytest.mark.asyncio
    async def test_share_expiry_bounds(self, store, blob_store, config, pdf_file, pdf_text):
        document_id = await _processed(pdf_file, store, blob_store, config, ScriptedLLM())

        with pytest.raises(ToolError, match="between 1 and 365"):
            await create_share_link(document_id, store, config, expires_in_days=400)

    @pytest.mark.asyncio
    async def test_expired_share(self, store, blob_store, config, pdf_file, pdf_text):
        document_id = await _processed(pdf_file, store, blob_store, config, ScriptedLLM())
        now = datetime.now(timezone.utc)
        share = ShareRecord(
            token=generate_share_token(),
            document_id=document_id,
            expires_at=now - timedelta(days=1),
            created_at=now - timedelta(days=31),
        )
        await store.add_share(share)

        with pytest.raises(ToolError, match="expired"):
            await view_share(share.token, store)
        assert (await store.get_share(share.token)).view_count == 0

    @pytest.mark.asyncio
    async def test_unknown_share(self, store):
        with pytest.raises(ToolError, match="Share link not found"):
            await view_share(generate_share_token(), store)

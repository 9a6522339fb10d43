import asyncio

from autodamage.analysis.schemas import AnalysisResult
from autodamage.pipeline.intake import EncodedImage
from autodamage.pipeline.orchestrator import ANALYSIS_FAILED_MESSAGE, AnalysisOrchestrator
from autodamage.pipeline.session import AssessmentSession

from .conftest import FakeAnalysisClient, make_analysis, make_damage


def encoded(name):
    return EncodedImage(image_id=f"id-{name}", name=name, data_uri="data:image/png;base64,AAAA")


def test_add_get_and_update():
    session = AssessmentSession()
    session.add(make_analysis("a", loading=True))

    updated = session.update("a", loading=False, damages=[make_damage(cost=250)])

    assert updated.loading is False
    assert session.get("a").total_cost == 250
    assert session.get("missing") is None


def test_update_of_removed_image_is_ignored():
    session = AssessmentSession()
    session.add(make_analysis("a", loading=True))
    session.remove("a")

    assert session.update("a", loading=False) is None
    assert len(session) == 0


def test_remove_recomputes_report():
    session = AssessmentSession()
    session.add(make_analysis("a", [make_damage("door", "dent", "left", 4000, "moderate")]))
    session.add(make_analysis("b", [make_damage("roof", "dent", "top", 3000, "moderate"),
                                    make_damage("door", "dent", "left", 1000, "moderate")]))

    before = session.report()
    assert before.total_cost == 7000
    assert before.overall_condition == "Poor"

    assert session.remove("a") is True
    after = session.report()

    assert after.total_cost == 4000
    assert after.overall_condition == "Fair"
    assert [d.part for d in after.unique_damages] == ["roof", "door"]
    assert session.remove("a") is False


def test_analyses_is_a_snapshot():
    session = AssessmentSession()
    session.add(make_analysis("a"))
    snapshot = session.analyses

    session.add(make_analysis("b"))

    assert [a.image_id for a in snapshot] == ["a"]


def test_submit_publishes_loading_placeholders():
    session = AssessmentSession()
    orchestrator = AnalysisOrchestrator(FakeAnalysisClient(), session)

    placeholders = orchestrator.submit([encoded("front.jpg"), encoded("rear.jpg")])

    assert [p.image_name for p in placeholders] == ["front.jpg", "rear.jpg"]
    assert all(p.loading for p in session.analyses)
    assert all(p.overall_condition == "Fair" and p.damages == [] for p in placeholders)
    assert session.report().images_analyzed == 0


def test_process_records_results_and_failures_per_image():
    client = FakeAnalysisClient(
        results={
            "front.jpg": AnalysisResult(
                damages=[make_damage("bonnet", "scratch", "front", 300)],
                overall_condition="Good",
            ),
        },
        fail_names={"rear.jpg"},
    )
    session = AssessmentSession()
    orchestrator = AnalysisOrchestrator(client, session)

    results = asyncio.run(orchestrator.process([encoded("front.jpg"), encoded("rear.jpg")]))

    front, rear = results
    assert front.loading is False
    assert front.error is None
    assert front.overall_condition == "Good"
    assert front.damages[0].part == "bonnet"
    assert rear.loading is False
    assert rear.error == ANALYSIS_FAILED_MESSAGE
    assert rear.damages == []
    assert len(client.calls) == 2

    report = session.report()
    assert report.images_analyzed == 1
    assert report.total_cost == 300


def test_image_condition_is_not_overwritten_by_report():
    client = FakeAnalysisClient(results={
        "side.jpg": AnalysisResult(
            damages=[make_damage("door", "dent", "left", 100, "severe")],
            overall_condition="Excellent",
        ),
    })
    session = AssessmentSession()

    asyncio.run(AnalysisOrchestrator(client, session).process([encoded("side.jpg")]))

    assert session.get("id-side.jpg").overall_condition == "Excellent"
    assert session.report().overall_condition == "Poor"


def test_removal_during_analysis_is_benign():
    session = AssessmentSession()

    class RemovingClient(FakeAnalysisClient):
        async def analyze(self, image_base64, image_name=None):
            session.remove("id-gone.jpg")
            await asyncio.sleep(0)
            return AnalysisResult(damages=[make_damage(cost=50)])

    orchestrator = AnalysisOrchestrator(RemovingClient(), session)
    results = asyncio.run(orchestrator.process([encoded("gone.jpg"), encoded("kept.jpg")]))

    assert [r.image_name for r in results] == ["kept.jpg"]
    assert [a.image_name for a in session.analyses] == ["kept.jpg"]

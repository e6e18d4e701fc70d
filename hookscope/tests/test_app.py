import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.routers.analyze import get_pipeline
from hookscope.exceptions import AcquisitionError, PipelineTimeoutError, ProbeError
from hookscope.video_pipeline import AnalysisPipeline
from hookscope.tests.fakes import (
    FakeAcquirer,
    FakeAudioExtractor,
    FakeFrameSampler,
    FakeProbe,
    FakeProviderFactory,
    make_config,
)


@pytest.fixture
def client_for(work_root, credential_resolver):
    def build(acquirer=None, probe=None):
        pipeline = AnalysisPipeline(
            config=make_config(work_root),
            credential_resolver=credential_resolver,
            provider_factory=FakeProviderFactory(),
            acquirer=acquirer or FakeAcquirer(),
            probe=probe or FakeProbe(),
            audio_extractor=FakeAudioExtractor(),
            frame_sampler=FakeFrameSampler(),
        )
        app.dependency_overrides[get_pipeline] = lambda: pipeline
        return TestClient(app)

    yield build
    app.dependency_overrides.clear()


def test_analyze_url_success(client_for):
    response = client_for().post("/analyze", json={"url": "https://www.tiktok.com/@a/video/1", "keyOwner": "sergio"})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"]["metadata"]["frameRate"] == 30.0
    assert len(body["data"]["visualAnalysis"]) == 5
    assert body["data"]["hookAnalysis"]["type"] == "verbal"


def test_analyze_upload_success(client_for):
    response = client_for().post(
        "/analyze-upload", files={"file": ("clip.mp4", b"bytes", "video/mp4")}, data={"keyOwner": "sergio"}
    )

    assert response.status_code == 200
    assert response.json()["success"] is True


@pytest.mark.parametrize(
    "payload, status",
    [
        ({}, 400),
        ({"url": ""}, 400),
        ({"url": "   "}, 400),
        ({"url": "https://www.tiktok.com/@a/video/1", "keyOwner": "ruben"}, 500),
    ],
)
def test_invalid_requests(client_for, payload, status):
    response = client_for().post("/analyze", json=payload)

    assert response.status_code == status
    assert response.json()["success"] is False


@pytest.mark.parametrize(
    "kwargs, status",
    [
        ({"acquirer": FakeAcquirer(error=AcquisitionError("video unavailable"))}, 502),
        ({"probe": FakeProbe(error=ProbeError("no video stream"))}, 422),
        ({"probe": FakeProbe(error=PipelineTimeoutError("too slow"))}, 504),
    ],
)
def test_fatal_errors_map_to_status(client_for, kwargs, status):
    response = client_for(**kwargs).post("/analyze", json={"url": "https://www.tiktok.com/@a/video/1"})

    assert response.status_code == status
    body = response.json()
    assert body["success"] is False
    assert body["error"]

import io
import os
from pathlib import Path

import pytest
from PIL import Image

os.environ.setdefault("AUTODAMAGE_CONFIG", str(Path(__file__).parent / "config_test.yaml"))

from autodamage.analysis.schemas import AnalysisResult, Damage, ImageAnalysis  # noqa: E402
from autodamage.pipeline.client import ModelAPIError  # noqa: E402


def make_damage(part="front bumper", damage_type="scratch", location="front",
                cost=100.0, severity="minor"):
    return Damage(
        part=part,
        damage_type=damage_type,
        location=location,
        estimated_cost=cost,
        severity=severity,
    )


def make_analysis(image_id, damages=(), loading=False, error=None, condition="Fair"):
    return ImageAnalysis(
        image_id=image_id,
        image_name=f"{image_id}.jpg",
        damages=list(damages),
        overall_condition=condition,
        loading=loading,
        error=error,
    )


def png_bytes(size=(8, 8), color=(200, 30, 30)):
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format="PNG")
    return buf.getvalue()


class FakeAnalysisClient:
    """Stands in for DamageAnalysisClient, keyed by image name."""

    def __init__(self, results=None, fail_names=()):
        self.results = results or {}
        self.fail_names = set(fail_names)
        self.calls = []
        self.is_configured = True

    async def analyze(self, image_base64, image_name=None):
        self.calls.append((image_base64, image_name))
        if image_name in self.fail_names:
            raise ModelAPIError("DeepSeek API error: 502 Bad Gateway - upstream", status_code=502)
        return self.results.get(image_name, AnalysisResult())


@pytest.fixture
def fake_client():
    return FakeAnalysisClient()

"""
API integration tests for the palette endpoints.

Tests the complete palette API:
- Upload with explicit and default analysis size
- Parameter validation and error handling
- Health and metrics routes
"""

import base64
import io

from PIL import Image

from generate_test_images import create_framed_image, encode_png


def framed_upload():
    png = encode_png(create_framed_image(100, 100))
    return {"file": ("framed.png", png, "image/png")}


class TestPaletteAPI:
    """Test the /v1/palette endpoint"""

    def test_extract_with_target_size(self, test_client):
        response = test_client.post("/v1/palette?width=100&height=100", files=framed_upload())

        assert response.status_code == 200
        data = response.json()

        assert data["width"] == 100
        assert data["height"] == 100
        assert data["background"]["hex"] == "#FFFFFF"
        assert data["primary"]["hex"] == "#FF0000"
        assert data["secondary"]["hex"] == "#000000"
        assert data["detail"]["hex"] == "#000000"
        assert data["primary"]["rgba"] == [1.0, 0.0, 0.0, 1.0]
        assert data["request_id"].startswith("pal-")

        for key in ("decode", "extract", "total"):
            assert key in data["timings_ms"]

        swatch = data["artifacts"]["swatch_png_b64"]
        assert base64.b64decode(swatch).startswith(b"\x89PNG")

    def test_extract_default_size(self, test_client):
        response = test_client.post("/v1/palette", files=framed_upload())

        assert response.status_code == 200
        data = response.json()
        assert data["background"]["hex"] == "#FFFFFF"
        assert data["primary"]["hex"] == "#FF0000"

    def test_swatch_disabled(self, test_client):
        response = test_client.post("/v1/palette?include_swatch=false", files=framed_upload())

        assert response.status_code == 200
        assert response.json()["artifacts"] is None

    def test_unsupported_media_type(self, test_client):
        response = test_client.post(
            "/v1/palette", files={"file": ("notes.txt", b"hello", "text/plain")}
        )
        assert response.status_code == 415

    def test_undecodable_image(self, test_client):
        response = test_client.post(
            "/v1/palette", files={"file": ("broken.png", b"not a png at all", "image/png")}
        )
        assert response.status_code == 400

    def test_width_without_height(self, test_client):
        response = test_client.post("/v1/palette?width=100", files=framed_upload())
        assert response.status_code == 400

    def test_target_size_out_of_range(self, test_client):
        response = test_client.post("/v1/palette?width=0&height=10", files=framed_upload())
        assert response.status_code == 400

        response = test_client.post("/v1/palette?width=5000&height=10", files=framed_upload())
        assert response.status_code == 400

    def test_custom_chip_size(self, test_client):
        response = test_client.post("/v1/palette?chip_size=10", files=framed_upload())

        assert response.status_code == 200
        swatch = base64.b64decode(response.json()["artifacts"]["swatch_png_b64"])
        swatch_image = Image.open(io.BytesIO(swatch))
        assert swatch_image.size == (40, 10)

    def test_invalid_chip_size(self, test_client):
        response = test_client.post("/v1/palette?chip_size=0", files=framed_upload())
        assert response.status_code == 400
        assert "chip_size" in response.json()["detail"]

    def test_chip_size_ignored_without_swatch(self, test_client):
        response = test_client.post(
            "/v1/palette?chip_size=0&include_swatch=false", files=framed_upload()
        )
        assert response.status_code == 200

    def test_error_responses_documented(self, test_client):
        schema = test_client.get("/openapi.json").json()
        responses = schema["paths"]["/v1/palette"]["post"]["responses"]
        assert "400" in responses
        assert "415" in responses
        assert "ErrorResponse" in schema["components"]["schemas"]

    def test_missing_file(self, test_client):
        response = test_client.post("/v1/palette")
        assert response.status_code == 422


class TestSupportRoutes:
    """Test health and metrics routes"""

    def test_root_healthz(self, test_client):
        response = test_client.get("/healthz")

        assert response.status_code == 200
        data = response.json()
        assert data["ok"] is True
        assert data["service"] == "hue-palette"
        assert "version" in data

    def test_v1_healthz(self, test_client):
        response = test_client.get("/v1/healthz")

        assert response.status_code == 200
        data = response.json()
        assert data["ok"] is True
        assert "timestamp" in data

    def test_metrics_after_extraction(self, test_client):
        test_client.post("/v1/palette?width=100&height=100", files=framed_upload())
        response = test_client.get("/v1/metrics")

        assert response.status_code == 200
        data = response.json()
        assert "palette_selection" in data["operations"]
        assert "swatch_rendering" in data["operations"]
        assert data["total_errors"] == 0

"""Integration tests for the url command group.

Drives ``imagectl url ...`` through Typer's CliRunner and checks the URLs
written to stdout.
"""

import json

import pytest
from typer.testing import CliRunner

from imagectl import __version__
from imagectl.app import app


CLOUD = "https://res.cloudinary.com/demo/image/upload/v1690000000/folder/name.jpg"


@pytest.fixture
def runner():
    return CliRunner()


def invoke(runner, *args):
    return runner.invoke(app, list(args))


class TestResolveCommands:
    """Integration tests for plain resolution."""

    def test_version(self, runner):
        result = invoke(runner, "--version")
        assert result.exit_code == 0
        assert f"imagectl {__version__}" in result.stdout

    def test_resolve_bare_filename(self, runner):
        result = invoke(runner, "url", "resolve", "building2.jpeg")

        assert result.exit_code == 0
        assert result.stdout.strip() == "http://localhost:5000/uploads/building2.jpeg"

    def test_resolve_absolute_url(self, runner):
        result = invoke(runner, "url", "resolve", CLOUD)
        assert result.stdout.strip() == CLOUD

    def test_resolve_empty_reference(self, runner):
        result = invoke(runner, "url", "resolve", "")
        assert result.exit_code == 1
        assert "No image reference" in result.stdout

    def test_resolve_many_as_json(self, runner):
        result = invoke(runner, "--output", "json", "url", "resolve", "/uploads/a.png", "b.png", CLOUD)

        assert result.exit_code == 0
        rows = json.loads(result.stdout)
        assert [row["kind"] for row in rows] == ["relative_upload", "bare_filename", "absolute"]
        assert rows[0]["url"] == "http://localhost:5000/uploads/a.png"
        assert rows[1]["url"] == "http://localhost:5000/uploads/b.png"
        assert rows[2]["url"] == CLOUD

    def test_single_resolve_as_yaml(self, runner):
        result = invoke(runner, "-o", "yaml", "url", "resolve", "a.png")
        assert result.exit_code == 0
        assert "url: http://localhost:5000/uploads/a.png" in result.stdout

    def test_api_url_override(self, runner):
        result = invoke(runner, "--api-url", "https://api.example.edu/", "url", "resolve", "a.png")
        assert result.stdout.strip() == "https://api.example.edu/uploads/a.png"

    def test_invalid_api_url_override(self, runner):
        result = invoke(runner, "--api-url", "not a url", "url", "resolve", "a.png")
        assert result.exit_code == 1
        assert "Validation error" in result.stdout

    def test_invalid_output_format(self, runner):
        result = invoke(runner, "--output", "xml", "url", "resolve", "a.png")
        assert result.exit_code == 2

    def test_classify(self, runner):
        result = invoke(runner, "-o", "json", "url", "classify", CLOUD, "/uploads/a.png", "a.png")

        rows = json.loads(result.stdout)
        assert rows[0] == {
            "ref": CLOUD,
            "kind": "absolute",
            "cloudinary": True,
            "public_id": "folder/name",
        }
        assert rows[1]["kind"] == "relative_upload"
        assert rows[2]["cloudinary"] is False


class TestTransformCommands:
    """Integration tests for Cloudinary transformations."""

    def test_thumbnail(self, runner):
        result = invoke(runner, "url", "thumbnail", CLOUD, "--width", "200", "--height", "150")

        assert result.exit_code == 0
        assert result.stdout.strip() == CLOUD.replace("/upload/", "/upload/w_200,h_150,c_fill,f_auto,q_auto/")

    def test_thumbnail_local_image(self, runner):
        result = invoke(runner, "url", "thumbnail", "/uploads/a.png")
        assert result.stdout.strip() == "http://localhost:5000/uploads/a.png"

    def test_responsive(self, runner):
        result = invoke(runner, "url", "responsive", CLOUD, "--size", "small")
        assert "/upload/w_600,f_auto,q_auto/" in result.stdout

    def test_responsive_unknown_size(self, runner):
        result = invoke(runner, "url", "responsive", CLOUD, "--size", "huge")

        assert result.exit_code == 0
        assert "using medium" in result.stdout
        assert "/upload/w_1200,f_auto,q_auto/" in result.stdout

    def test_optimize(self, runner):
        result = invoke(
            runner, "url", "optimize", CLOUD,
            "--width", "250", "--height", "300", "--gravity", "face",
        )
        assert "/upload/w_250,h_300,c_fill,g_face,q_auto,f_auto/v1690000000/" in result.stdout

    def test_optimize_extra_params(self, runner):
        result = invoke(
            runner, "url", "optimize", CLOUD,
            "-w", "100", "--param", "e=sharpen", "--param", "a=90",
        )
        assert "/upload/w_100,c_fill,q_auto,f_auto,e_sharpen,a_90/" in result.stdout

    def test_optimize_bad_param(self, runner):
        result = invoke(runner, "url", "optimize", CLOUD, "--param", "sharpen")
        assert result.exit_code == 2

    def test_public_id(self, runner):
        result = invoke(runner, "url", "public-id", CLOUD)
        assert result.stdout.strip() == "folder/name"

    def test_public_id_not_cloudinary(self, runner):
        result = invoke(runner, "url", "public-id", "https://example.com/v1/a.jpg")
        assert result.exit_code == 1

    def test_placeholder(self, runner):
        result = invoke(runner, "url", "placeholder", "--width", "300", "--height", "200")
        assert result.stdout.strip() == "https://via.placeholder.com/300x200/e5e7eb/6b7280?text=No%20Image"

    def test_avatar(self, runner):
        result = invoke(runner, "url", "avatar", "Dr. Sana", "--size", "80")
        assert result.stdout.strip() == (
            "https://ui-avatars.com/api/?name=Dr.%20Sana&background=3B82F6&color=white&size=80"
        )


class TestPresetCommands:
    """Integration tests for page presets."""

    def test_preset(self, runner):
        result = invoke(runner, "url", "preset", "faculty.card", CLOUD)
        assert "/upload/w_250,h_300,c_fill,g_face,q_auto,f_auto/" in result.stdout

    def test_unknown_preset(self, runner):
        result = invoke(runner, "url", "preset", "faculty.banner", CLOUD)

        assert result.exit_code == 1
        assert "Unknown preset" in result.stdout
        assert "Available presets" in result.stdout

    def test_list_presets(self, runner):
        result = invoke(runner, "-o", "json", "url", "presets")

        rows = json.loads(result.stdout)
        assert len(rows) == 12
        assert rows[0]["preset"] == "gallery.full"


class TestRecordCommand:
    """Integration tests for resolving images in API records."""

    @pytest.fixture
    def news_file(self, tmp_path):
        payload = {
            "success": True,
            "data": [
                {"title": "Convocation", "images": [{"url": CLOUD}]},
                {"title": "Sports Week", "image": {"filename": "sports.jpg"}},
                {"title": "Notice Board"},
            ],
        }
        path = tmp_path / "news.json"
        path.write_text(json.dumps(payload))
        return path

    def test_record(self, runner, news_file):
        result = invoke(runner, "-o", "json", "url", "record", str(news_file))

        assert result.exit_code == 0
        rows = json.loads(result.stdout)
        assert [row["label"] for row in rows] == ["Convocation", "Sports Week", "Notice Board"]
        assert rows[0]["url"] == CLOUD
        assert rows[1]["url"] == "http://localhost:5000/uploads/sports.jpg"
        assert rows[2]["ref"] is None
        assert rows[2]["url"].startswith("https://ui-avatars.com/api/?name=Notice%20Board")

    def test_record_with_preset(self, runner, news_file):
        result = invoke(runner, "-o", "json", "url", "record", str(news_file), "--preset", "news.card")

        rows = json.loads(result.stdout)
        assert "/upload/w_400,h_250,c_fill,q_auto,f_auto/" in rows[0]["url"]
        assert rows[1]["url"] == "http://localhost:5000/uploads/sports.jpg"

    def test_single_record_file(self, runner, tmp_path):
        path = tmp_path / "faculty.json"
        path.write_text(json.dumps({"name": "Dr. Sana", "photoUrl": "/uploads/sana.jpg"}))

        result = invoke(runner, "-o", "json", "url", "record", str(path), "--name-field", "name")

        rows = json.loads(result.stdout)
        assert rows == [{
            "index": 0,
            "label": "Dr. Sana",
            "ref": "/uploads/sana.jpg",
            "url": "http://localhost:5000/uploads/sana.jpg",
        }]

    def test_invalid_record_file(self, runner, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{broken")

        result = invoke(runner, "url", "record", str(path))
        assert result.exit_code == 1
        assert "Invalid JSON" in result.stdout

    def test_missing_record_file(self, runner, tmp_path):
        result = invoke(runner, "url", "record", str(tmp_path / "missing.json"))
        assert result.exit_code == 1
        assert "Cannot read records" in result.stdout

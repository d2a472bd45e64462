import json

from fractview.util.manifest import build_manifest, write_manifest


def test_manifest_round_trip(tmp_path):
    manifest = build_manifest(config={"width": 4}, render_summary={"state": "completed"})
    assert "numpy" in manifest.packages
    path = tmp_path / "artifacts" / "run.json"
    write_manifest(str(path), manifest)
    data = json.loads(path.read_text())
    assert data["config"] == {"width": 4}
    assert data["render"] == {"state": "completed"}
    assert data["started_utc"].endswith("Z")

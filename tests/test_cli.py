import json
import os

from fractview.cli import build_arg_parser, main


def test_render_writes_picture_and_manifest(tmp_path):
    out_dir = tmp_path / "pictures"
    manifest = tmp_path / "run.json"
    rc = main([
        "--log-file", "",
        "render",
        "--width", "8", "--height", "6",
        "--julia", "-0.8", "0.156",
        "--saturation", "0.5",
        "--output-dir", str(out_dir),
        "--manifest", str(manifest),
    ])
    assert rc == 0
    pictures = os.listdir(out_dir)
    assert len(pictures) == 1 and pictures[0].endswith(".png")

    data = json.loads(manifest.read_text())
    assert data["render"]["state"] == "completed"
    assert data["config"]["julia"] == [-0.8, 0.156]
    assert data["config"]["width"] == 8


def test_direct_render(tmp_path):
    rc = main(["--log-file", "", "render", "--width", "4", "--height", "4", "--direct",
               "--output-dir", str(tmp_path), "--manifest", ""])
    assert rc == 0
    assert len(os.listdir(tmp_path)) == 1


def test_invalid_value_exits_non_zero(tmp_path):
    rc = main(["--log-file", "", "render", "--brightness", "3", "--output-dir", str(tmp_path), "--manifest", ""])
    assert rc == 1
    assert not os.listdir(tmp_path)


def test_encode_without_frames_fails(tmp_path):
    rc = main(["--log-file", "", "encode", "--input-dir", str(tmp_path), "--output", str(tmp_path / "out.mp4")])
    assert rc == 1


def test_parser_reads_offset_pair():
    parser = build_arg_parser()
    args = parser.parse_args(["render", "--offset", "1", "2"])
    assert args.cmd == "render"
    assert args.offset == [1.0, 2.0]

import json

import main


def _write_houdini(path, n=50):
    path.write_text(json.dumps([{"P": [i, -i, 0.5 * i], "Cd": [0.2, 0.4, (i % 10) / 10 + 0.05]}
                                for i in range(n)]))


def test_encode_then_decode(tmp_path):
    src = tmp_path / "points.json"
    _write_houdini(src)
    out_dir = tmp_path / "tex"
    assert main.main(["encode", "--input", str(src), "--out", str(out_dir), "--name", "pts"]) == 0
    for suffix in ("position.png", "color.png", "metadata.json"):
        assert (out_dir / f"pts_{suffix}").exists()

    decoded = tmp_path / "decoded.json"
    ply = tmp_path / "decoded.ply"
    files = [str(p) for p in sorted(out_dir.iterdir())]
    assert main.main(["decode", "--files", *files, "--out", str(decoded), "--ply", str(ply)]) == 0
    doc = json.loads(decoded.read_text())
    assert len(doc["particles"]) == 50
    assert doc["metadata"]["source"] == "texture_files"
    assert ply.exists()


def test_encode_subsamples_when_forced(tmp_path):
    src = tmp_path / "points.json"
    _write_houdini(src, n=40)
    out_dir = tmp_path / "tex"
    main.main(["encode", "--input", str(src), "--out", str(out_dir), "--name", "pts",
               "--force_optimize", "--max_particles", "10"])
    meta = json.loads((out_dir / "pts_metadata.json").read_text())
    assert meta["particleCount"] == 10
    assert meta["width"] == 4


def test_unrecognized_input_returns_error(tmp_path, capsys):
    src = tmp_path / "bad.json"
    src.write_text(json.dumps({"points": []}))
    assert main.main(["encode", "--input", str(src), "--out", str(tmp_path)]) == 1
    assert "Unknown particle data format" in capsys.readouterr().err

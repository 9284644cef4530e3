import argparse
import sys
from pathlib import Path
from tqdm import tqdm

from ptcltex.cfg import Cfg, CodecOptions
from ptcltex.errors import CodecError
from ptcltex.ptcl_utils import load_particles, save_particle_json, save_ply
from ptcltex.tex_enc import encode_collection
from ptcltex.tex_io import export_basename, identify_texture_files, load_from_textures, write_texture_files


def build_parser():
    p = argparse.ArgumentParser("Particle ↔ texture codec")
    sub = p.add_subparsers(dest="cmd", required=True)

    enc = sub.add_parser("encode", help="particle JSON/PLY → position/colour textures + metadata")
    enc.add_argument("--input", required=True, nargs="+", help="particle .json or .ply file(s)")
    enc.add_argument("--out", required=True, help="output directory")
    enc.add_argument("--name", default=None, help="base name (single input only; default <source>_<timestamp>)")
    enc.add_argument("--max_particles", type=int, default=Cfg.MAX_PARTICLES, help="subsampling cap")
    enc.add_argument("--force_optimize", action="store_true", help="subsample even below the auto threshold")
    enc.add_argument("--no_optimize", action="store_true", help="never subsample")
    enc.add_argument("--no_flip", action="store_true", help="do not negate the vertical axis")
    enc.add_argument("--format", choices=["png", "jpg"], default=Cfg.IMAGE_FORMAT)

    dec = sub.add_parser("decode", help="position/colour textures (+ metadata) → particle JSON")
    dec.add_argument("--files", nargs="+", help="texture/metadata files, identified by name")
    dec.add_argument("--position", help="position texture")
    dec.add_argument("--color", help="colour texture")
    dec.add_argument("--metadata", default=None, help="metadata JSON (required for correct scale)")
    dec.add_argument("--out", required=True, help="output particle JSON")
    dec.add_argument("--ply", default=None, help="also write the decoded points as PLY")
    dec.add_argument("--no_flip", action="store_true", help="textures were encoded without the vertical flip")
    return p


def run_encode(args) -> int:
    options = CodecOptions(flip_vertical_axis=not args.no_flip, image_format=args.format)
    inputs = [Path(x) for x in args.input]
    if args.name and len(inputs) > 1:
        raise SystemExit("--name can only be used with a single --input")

    for path in tqdm(inputs, disable=len(inputs) < 2):
        collection = load_particles(path, optimize=not args.no_optimize,
                                    force=args.force_optimize, max_n=args.max_particles)
        doc = encode_collection(collection, options)
        name = args.name or export_basename(collection)
        write_texture_files(doc, args.out, name)
    print("Encoding finished.")
    return 0


def run_decode(args) -> int:
    options = CodecOptions(flip_vertical_axis=not args.no_flip)
    if args.files:
        position, color, metadata = identify_texture_files(args.files)
    elif args.position and args.color:
        position, color, metadata = args.position, args.color, args.metadata
    else:
        raise SystemExit("decode needs --files or both --position and --color")

    collection = load_from_textures(position, color, metadata, options)
    save_particle_json(collection, args.out)
    if args.ply:
        save_ply(args.ply, collection)
    print("decoded", len(collection), "points")
    return 0


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return run_encode(args) if args.cmd == "encode" else run_decode(args)
    except CodecError as e:
        print(f"[{args.cmd}] error: {e}", file=sys.stderr)
        return 1


if __name__=="__main__":
    """
    Usage: python main.py encode --input point_data.json --out results/
           python main.py decode --files results/houdini_*_position.png results/houdini_*_color.png \
                  results/houdini_*_metadata.json --out results/decoded.json
    """
    sys.exit(main())

# scripts/stamp_pdf.py
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from stamping.errors import StampingError
from stamping.models import StampSpec
from stamping.services.keys import stamped_filename
from stamping.services.stamp_service import StampService


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Stamp a local PDF with text, an image, HTML or another PDF")
    parser.add_argument("input", help="PDF to stamp")
    parser.add_argument("--type", dest="stamp_type", required=True, help="TEXT, IMAGE, HTML or PDF")
    parser.add_argument("--content", help="Stamp file (image, HTML or PDF); not used for TEXT")
    parser.add_argument("--text", help="Text for TEXT stamps")
    parser.add_argument("--out", help="Output path (default: <input>_stamped.pdf)")
    parser.add_argument("--position", default="CENTER")
    parser.add_argument("--x", type=float)
    parser.add_argument("--y", type=float)
    parser.add_argument("--opacity", type=float, default=1.0)
    parser.add_argument("--rotation", type=float, default=0.0)
    parser.add_argument("--scale", type=float, default=1.0)
    parser.add_argument("--pages", default="ALL", help='ALL, FIRST, LAST or e.g. "1,3,5-7"')
    parser.add_argument("--font-size", type=float, default=14.0)
    parser.add_argument("--font-color", default="#000000")
    parser.add_argument("--width", type=float, help="Explicit stamp width (HTML/PDF)")
    parser.add_argument("--height", type=float, help="Explicit stamp height (HTML/PDF)")
    return parser


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    args = build_parser().parse_args(argv)

    inp = Path(args.input)
    outp = Path(args.out) if args.out else inp.with_name(stamped_filename(inp.name))

    try:
        spec = StampSpec.from_dict(
            {
                "stampType": args.stamp_type,
                "position": args.position,
                "x": args.x,
                "y": args.y,
                "opacity": args.opacity,
                "rotation": args.rotation,
                "scale": args.scale,
                "pages": args.pages,
                "text": args.text,
                "fontSize": args.font_size,
                "fontColor": args.font_color,
                "stampWidth": args.width,
                "stampHeight": args.height,
            }
        )
        content = Path(args.content).read_bytes() if args.content else None
        out = StampService().apply_stamp(inp.read_bytes(), spec, content)
    except (StampingError, OSError) as e:
        print(f"[FAIL] {e}", file=sys.stderr)
        return 1

    outp.parent.mkdir(parents=True, exist_ok=True)
    outp.write_bytes(out)
    print(f"[OK] wrote {outp} ({len(out)} bytes)")
    return 0


if __name__ == "__main__":
    sys.exit(main())

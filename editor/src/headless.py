"""Headless GB7 Layer Editor: CLI entry point.

Loads one or two images (PNG, JPEG or GB7) into document layers, optionally
filters and tone-corrects the top layer, composites and writes the result.
The output format comes from the output suffix (.png, .jpg, .jpeg, .gb7).

Usage:
    python -m headless INPUT [INPUT2] -o OUTPUT [options]

Examples:
    python -m headless photo.png -o photo.gb7 --gb7-mask
    python -m headless base.png overlay.png -o out.png --blend multiply --opacity 0.5
    python -m headless scan.jpg -o sharp.png --filter Sharpen --curve 20:0,235:255
"""

import sys
import os
import argparse
import logging

# Add editor/src to path so imports work
_src_dir = os.path.dirname(os.path.abspath(__file__))
if _src_dir not in sys.path:
    sys.path.insert(0, _src_dir)

from constants import CONVOLUTION_PRESETS, JPEG_QUALITY
from models.curve import Curve, CurveSet
from models.document import ImageDocument
from models.errors import EditorError
from models.kernel import get_preset_kernel
from models.modes import BlendMode, ConvolutionMode
from services.file_operations import load_image_file, save_image_file
from utils.logger import configure_logging


def _opacity(text: str) -> float:
    value = float(text)
    if not 0.0 <= value <= 1.0:
        raise argparse.ArgumentTypeError(f"opacity must be between 0 and 1, got {text}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Composite, filter and convert images with the GB7 layer engine (headless).',
    )
    parser.add_argument(
        'inputs',
        nargs='+',
        metavar='INPUT',
        help='One or two image files; the second becomes the top layer.',
    )
    parser.add_argument(
        '-o', '--output',
        required=True,
        help='Output file; the suffix selects PNG, JPEG or GB7.',
    )
    parser.add_argument(
        '--filter',
        choices=sorted(CONVOLUTION_PRESETS),
        help='Preset 3x3 convolution applied to the top layer.',
    )
    parser.add_argument(
        '--filter-mode',
        choices=[m.value for m in ConvolutionMode],
        default=ConvolutionMode.RGB.value,
        help='Channels the filter touches (default: rgb).',
    )
    parser.add_argument(
        '--curve',
        help='Tonal curve IN1:OUT1,IN2:OUT2 applied to the top layer.',
    )
    parser.add_argument(
        '--blend',
        choices=[m.value for m in BlendMode],
        default=BlendMode.NORMAL.value,
        help='Blend mode of the top layer (default: normal).',
    )
    parser.add_argument(
        '--opacity',
        type=_opacity,
        default=1.0,
        help='Opacity of the top layer, 0-1 (default: 1).',
    )
    parser.add_argument(
        '--strip-alpha',
        action='store_true',
        help='Delete the alpha channel of the top layer.',
    )
    parser.add_argument(
        '--gb7-mask',
        action='store_true',
        help='Store transparency as the GB7 mask bit.',
    )
    parser.add_argument(
        '--quality',
        type=int,
        default=JPEG_QUALITY,
        help=f'JPEG quality 1-95 (default: {JPEG_QUALITY}).',
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose logging.',
    )
    return parser


def run(args) -> int:
    """Execute parsed arguments; returns the process exit code"""
    if len(args.inputs) > 2:
        print(f"Error: At most 2 inputs are supported, got {len(args.inputs)}")
        return 1

    for path in args.inputs:
        if not os.path.isfile(path):
            print(f"Error: Input file not found: {os.path.abspath(path)}")
            return 1

    doc = ImageDocument()
    try:
        for path in args.inputs:
            loaded = load_image_file(path)
            layer_id = doc.add_layer(name=os.path.basename(path))
            doc.set_original(layer_id, loaded.buffer,
                             color_depth=loaded.color_depth, has_alpha=loaded.has_alpha)
            print(f"Loaded {path}: {loaded.buffer.width}x{loaded.buffer.height}, "
                  f"{loaded.format.value}, {loaded.color_depth} bit")

        top = doc.layer_count - 1
        doc.set_active_layer(top)

        if args.strip_alpha:
            doc.delete_alpha_channel(top)

        if args.filter:
            doc.apply_convolution(get_preset_kernel(args.filter), args.filter_mode, commit=True)

        if args.curve:
            doc.apply_correction(CurveSet.uniform(Curve.parse(args.curve)), commit=True)

        doc.set_blend_mode(top, args.blend)
        doc.set_opacity(top, args.opacity)

        result = doc.composite()
        out_path = save_image_file(result, args.output, use_mask=args.gb7_mask, quality=args.quality)
    except (EditorError, ValueError, OSError) as e:
        print(f"Error: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1

    print(f"Wrote {result.width}x{result.height} image to {os.path.abspath(out_path)}")
    return 0


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    # Logging
    configure_logging(logging.DEBUG if args.verbose else logging.WARNING)

    return run(args)


if __name__ == '__main__':
    sys.exit(main())

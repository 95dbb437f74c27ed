"""
Transform Flow Command Line Interface

Usage:
    tflow <command> [options]

Commands:
    scan        Detect scan-line features and chains in an image
    align       Estimate the offset between two images
    track       Estimate per-frame offsets through a video

Examples:
    tflow scan frame.png --tilt 2.5 --spacing 12 --chains chains.csv
    tflow align a.png b.png --bins 32
    tflow track input.mp4 -o offsets.crv --smooth 5
    tflow track input.mp4 --model orb -fs 100 -fe 400
"""

import argparse
import logging
import math
import sys

from tflow import __version__


def load_settings(args):
    """Config from -c (if given), environment, then command-line overrides."""
    from tflow.core.config import Config, load_config

    config = load_config(args.config) if args.config else Config()
    config.apply_env()

    if args.tilt is not None:
        config.scan.tilt = math.radians(args.tilt)
    if args.spacing is not None:
        config.scan.spacing = args.spacing
    if args.bins is not None:
        config.scan.bin_count = args.bins
    if args.threshold is not None:
        config.scan.contrast_threshold = args.threshold

    return config


def add_scan_options(parser):
    parser.add_argument(
        '-c', '--config',
        default=None,
        help='JSON configuration file',
    )
    parser.add_argument(
        '-t', '--tilt',
        type=float,
        default=None,
        help='Gravity tilt in degrees, overriding the config tilt in radians (default: 0)',
    )
    parser.add_argument(
        '-s', '--spacing',
        type=int,
        default=None,
        help='Scan line spacing in pixels (default: height / 40)',
    )
    parser.add_argument(
        '-b', '--bins',
        type=int,
        default=None,
        help='Feature table bin count (default: scan spacing)',
    )
    parser.add_argument(
        '--threshold',
        type=float,
        default=None,
        help='Edge contrast threshold (default: 600)',
    )


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog='tflow',
        description='Scan-line feature alignment for video stabilization',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument(
        '-V', '--version',
        action='version',
        version=f'tflow {__version__}',
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable debug logging',
    )

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    # Scan command
    scan_parser = subparsers.add_parser(
        'scan',
        help='Detect scan-line features and chains in an image',
    )
    scan_parser.add_argument('input', help='Input image file')
    add_scan_options(scan_parser)
    scan_parser.add_argument(
        '--features',
        metavar='CSV',
        help='Write feature points to CSV',
    )
    scan_parser.add_argument(
        '--chains',
        metavar='CSV',
        help='Write chains to CSV',
    )
    scan_parser.add_argument(
        '--print-table',
        action='store_true',
        help='Print the contents of every bin',
    )

    # Align command
    align_parser = subparsers.add_parser(
        'align',
        help='Estimate the offset between two images',
    )
    align_parser.add_argument('reference', help='Reference image file')
    align_parser.add_argument('input', help='Image to align')
    add_scan_options(align_parser)

    # Track command
    track_parser = subparsers.add_parser(
        'track',
        help='Estimate per-frame offsets through a video',
    )
    track_parser.add_argument('input', help='Input video file')
    add_scan_options(track_parser)
    track_parser.add_argument(
        '-m', '--model',
        choices=['scanline', 'orb'],
        default='scanline',
        help='Motion model (default: scanline)',
    )
    track_parser.add_argument(
        '-o', '--output',
        metavar='CRV',
        help='Write per-frame offsets to a .crv file',
    )
    track_parser.add_argument(
        '--smooth',
        type=float,
        default=0.0,
        metavar='SIGMA',
        help='Write stabilizing corrections smoothed with this sigma instead of raw offsets',
    )
    track_parser.add_argument(
        '-fs', '--first-frame',
        type=int,
        default=1,
        help='First frame to process (default: 1)',
    )
    track_parser.add_argument(
        '-fe', '--frame-end',
        type=int,
        default=None,
        help='Last frame to process (default: end of video)',
    )
    track_parser.add_argument(
        '-q', '--quiet',
        action='store_true',
        help='Suppress progress output',
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == 'scan':
        return run_scan(args)
    elif args.command == 'align':
        return run_align(args)
    elif args.command == 'track':
        return run_track(args)
    else:
        parser.print_help()
        return 1


def run_scan(args):
    """Run feature scan command."""
    from tflow.core.image import Image
    from tflow.features import FeatureScanner
    from tflow.outputs import write_chains_csv, write_features_csv

    config = load_settings(args)
    image = Image.from_file(args.input)

    scanner = FeatureScanner(config.scan, config.table)
    points, segments, table = scanner.scan(image)

    print(f"{args.input}: {image.width}x{image.height}")
    print(f"  {len(segments)} scan lines, {len(points)} feature points")
    print(f"  {table.chain_count} chains in {table.bin_count} bins")

    if args.print_table:
        print(table.format_table())
    if args.features:
        write_features_csv(args.features, points)
        print(f"Wrote {args.features}")
    if args.chains:
        write_chains_csv(args.chains, table)
        print(f"Wrote {args.chains}")
    return 0


def run_align(args):
    """Run two-image alignment command."""
    from tflow.core.image import Image
    from tflow.features import FeatureScanner

    config = load_settings(args)
    reference = Image.from_file(args.reference)
    image = Image.from_file(args.input)

    if reference.size != image.size:
        print(f"Image sizes differ: {reference.size} vs {image.size}", file=sys.stderr)
        return 1

    _, _, table_a = FeatureScanner(config.scan, config.table).scan(reference)
    _, _, table_b = FeatureScanner(config.scan, config.table).scan(image)

    offset = table_a.calculate_offset(
        table_b, max_shift=config.align.max_shift, sigma=config.align.sigma
    )
    if not offset.has_samples:
        print("No matching bins, offset unknown")
        return 1

    print(f"Offset: {offset.value:.3f} ({offset.count} bins)")
    return 0


def run_track(args):
    """Run per-frame motion estimation through a video."""
    from tflow.core.video import read_frames
    from tflow.outputs import write_offsets_crv
    from tflow.tracking import (
        OpticalFlowMotionModel,
        ScanLineMotionModel,
        stabilizing_corrections,
    )

    config = load_settings(args)

    if args.model == 'orb':
        model = OpticalFlowMotionModel()
    else:
        model = ScanLineMotionModel(config.scan, config.table, config.align)

    offsets = []
    for frame_num, frame in read_frames(args.input, args.first_frame, args.frame_end):
        estimate = model.update(frame)
        if estimate is None:
            offsets.append((0.0, 0.0))
            continue

        offsets.append(estimate.offset)
        if not args.quiet:
            dx, dy = estimate.offset
            print(f"\rFrame {frame_num}: dx={dx:.2f} dy={dy:.2f} ({estimate.samples} samples)", end='')

    if not args.quiet:
        print()

    if args.output:
        values = stabilizing_corrections(offsets, args.smooth) if args.smooth > 0 else offsets
        write_offsets_crv(args.output, values, first_frame=args.first_frame)
        print(f"Wrote {args.output}")

    print("Done!")
    return 0


if __name__ == '__main__':
    sys.exit(main())

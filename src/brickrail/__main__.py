#!/usr/bin/env python3
"""
Command line front end for building track parts.

Usage:
    python -m brickrail segment --radius R --angle A [--full] [--tie-spacing S] -o FILE
    python -m brickrail ballast --radius R --angle A [--ties N] [--rail-thickness T] -o FILE
    python -m brickrail catalog

Examples:
    # Standard R56 curve, eighteen to the circle
    python -m brickrail segment --radius 56 --angle 20 -o r56_l20.stl

    # Full mode with connector ties, loose printer tuning
    python -m brickrail segment --radius 120 --angle 11.25 --full --preset loose -o r120.stl

    # Matching ballast plate for a segment with three tie intervals
    python -m brickrail ballast --radius 56 --angle 20 --ties 3 -o r56_ballast.stl
"""

import argparse
import logging
import sys
from pathlib import Path

from . import __version__
from .ballast import build_ballast
from .brick import DEFAULT_TIE_SPACING
from .catalog import segments_per_circle, standard_curves
from .config import load_calibration
from .io import export_solid
from .params import BallastParams, CurveParams
from .placement import diagnostic_arc_length
from .segment import build_segment


def _calibration(args):
    path = Path(args.calibration) if args.calibration else None
    return load_calibration(args.preset, path)


def cmd_segment(args):
    params = CurveParams(radius=args.radius, angle=args.angle, full=args.full,
                         tie_spacing=args.tie_spacing)
    segment = build_segment(params, _calibration(args))
    print(f"Arc length: {segment.arc_length:.2f} mm")
    print(f"Ties: {len(segment.tie_angles)}")
    export_solid(segment.solid, args.output, binary=not args.ascii)
    print(f"Exported to: {args.output}")
    return 0


def cmd_ballast(args):
    params = BallastParams(radius=args.radius, angle=args.angle, num_ties=args.ties,
                           rail_thickness=args.rail_thickness, full=args.full)
    plate = build_ballast(params, _calibration(args))
    print(f"Arc length: {diagnostic_arc_length(args.radius, args.angle):.2f} mm")
    print(f"Tie pockets: {len(plate.tie_angles)}, studs: {plate.stud_count}")
    export_solid(plate.solid, args.output, binary=not args.ascii)
    print(f"Exported to: {args.output}")
    return 0


def cmd_catalog(args):
    for radius, angle in standard_curves():
        print(f"R{radius:g} L{angle:g}  ({segments_per_circle(angle):g} per circle, "
              f"{diagnostic_arc_length(radius, angle):.1f} mm)")
    return 0


def _add_build_options(parser):
    parser.add_argument('--radius', type=float, required=True,
                        help='Centreline radius in studs')
    parser.add_argument('--angle', type=float, required=True,
                        help='Arc angle in degrees')
    parser.add_argument('--full', action='store_true',
                        help='Connector-bearing H ties, no label')
    parser.add_argument('--preset', default='default',
                        help='Calibration preset (default: %(default)s)')
    parser.add_argument('--calibration', metavar='FILE',
                        help='Calibration YAML file')
    parser.add_argument('-o', '--output', metavar='FILE', required=True,
                        help='Output file (STL or any format trimesh exports)')
    parser.add_argument('--ascii', action='store_true',
                        help='Write ASCII STL')


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog='brickrail',
        description='Curved track segments and ballast plates for 8 mm stud bricks',
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Log debug output')

    subparsers = parser.add_subparsers(dest='action', required=True)

    segment_parser = subparsers.add_parser('segment', help='Build a curved track segment')
    _add_build_options(segment_parser)
    segment_parser.add_argument('--tie-spacing', type=float, default=DEFAULT_TIE_SPACING,
                                help='Target tie spacing in mm (default: %(default)s)')

    ballast_parser = subparsers.add_parser('ballast', help='Build a ballast plate')
    _add_build_options(ballast_parser)
    ballast_parser.add_argument('--ties', type=int, default=0,
                                help='Tie count of the segment it carries')
    ballast_parser.add_argument('--rail-thickness', type=float, default=0.0,
                                help='Extra width of the rail bands')

    subparsers.add_parser('catalog', help='List standard radius/angle pairs')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(levelname)s %(name)s: %(message)s',
    )

    try:
        if args.action == 'segment':
            return cmd_segment(args)
        elif args.action == 'ballast':
            return cmd_ballast(args)
        elif args.action == 'catalog':
            return cmd_catalog(args)
    except (ValueError, KeyError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    parser.print_help()
    return 1


if __name__ == '__main__':
    sys.exit(main())

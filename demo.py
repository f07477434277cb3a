#!/usr/bin/env python
"""
hoamic Demonstration Script

This script runs demonstrations of the HOA encoder and virtual microphone.
"""

import argparse
import logging

from hoamic.codec.examples import (
    demonstrate_channel_gains,
    demonstrate_polar_pattern,
    demonstrate_orbiting_source,
)


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description='hoamic Demonstration Script')
    parser.add_argument('demo', nargs='?', choices=['gains', 'polar', 'orbit', 'all'],
                        default='all', help='Which demo to run (default: all)')
    parser.add_argument('--order', type=int, default=3, help='Ambisonic order, 1..7 (default: 3)')
    parser.add_argument('--pattern', type=float, default=0.5,
                        help='Virtual microphone pattern, 0=omni .. 1=directional (default: 0.5)')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')
    return parser.parse_args()


if __name__ == "__main__":
    args = parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(asctime)s %(name)s %(levelname)s: %(message)s')

    print("HOA Virtual Microphone Demonstrations")
    print("=====================================")

    if args.demo == 'gains' or args.demo == 'all':
        print("\nChannel Gains:")
        print("--------------")
        demonstrate_channel_gains(args.order)

    if args.demo == 'polar' or args.demo == 'all':
        print("\nPolar Pattern:")
        print("--------------")
        demonstrate_polar_pattern(args.order)

    if args.demo == 'orbit' or args.demo == 'all':
        print("\nOrbiting Source:")
        print("----------------")
        demonstrate_orbiting_source(args.order, args.pattern)

    if args.demo == 'all':
        print("\nAll demonstrations complete!")

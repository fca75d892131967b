"""
Play Retro Rocket in a desktop window.

Click (or hold SPACE) to fire the thruster, R or click after a crash to
restart, ESC to quit.
"""

import argparse

from game.rocket.window import run_window
from rl.configs.rocket_config import WINDOW_CONFIG


def main():
    parser = argparse.ArgumentParser(description="Play Retro Rocket")
    parser.add_argument(
        "--width",
        type=int,
        default=WINDOW_CONFIG["width"],
        help=f"Surface width in pixels (default: {WINDOW_CONFIG['width']})",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=WINDOW_CONFIG["height"],
        help=f"Surface height in pixels (default: {WINDOW_CONFIG['height']})",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed (default: none)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Do not print game over messages",
    )

    args = parser.parse_args()

    run_window(
        width=args.width,
        height=args.height,
        seed=args.seed,
        star_count=WINDOW_CONFIG["star_count"],
        spawn_interval=WINDOW_CONFIG["spawn_interval"],
        verbose=0 if args.quiet else 1,
    )


if __name__ == "__main__":
    main()

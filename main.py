"""
main.py — Entry point.

Install (from the repository root):
    pip install -e .          # pygame, flask, python-dotenv
    pip install -e ".[test]"  # adds pytest

Run with:
    python main.py            # or the `snake` console script
"""

import logging

from snake.controller import GameController


def main() -> None:
    logging.basicConfig(level=logging.INFO,
                        format="%(asctime)s %(name)s %(levelname)s %(message)s")
    score = GameController().run()
    logging.getLogger(__name__).info("window closed, last score %d", score)


if __name__ == "__main__":
    main()

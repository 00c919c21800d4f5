"""
Training script for the learning Reversi agent.

Plays games against a built-in opponent (or itself) and learns from every
finished game: the positional weights adapt and winning mid-game moves are
memorised.

Usage:
    python -m reversi_ai.train                                # 100 games vs random
    python -m reversi_ai.train --episodes 500 --opponent self  # Self-play
    python -m reversi_ai.train --opponent search2             # vs depth-2 search
    python -m reversi_ai.train --export brain_backup.json     # Dump the brain
    python -m reversi_ai.train --import brain_backup.json     # Restore a brain
    python -m reversi_ai.train --memory-limit 2000            # Shrink memory
"""

import argparse
import logging
import sys

from reversi.board import Color
from reversi_ai.agent import ReversiAgent
from reversi_ai.config import ReversiConfig
from reversi_ai.knowledge_store import KnowledgeStore
from reversi_ai.opponents import REVERSI_OPPONENTS


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Train the learning Reversi agent'
    )
    parser.add_argument(
        '--episodes', type=int, default=100,
        help='Number of training games (default: 100)')
    parser.add_argument(
        '--opponent', type=str, default='random',
        choices=list(REVERSI_OPPONENTS.keys()) + ['self'],
        help='Opponent to train against (default: random)')
    parser.add_argument(
        '--opponent-depth', type=int, default=4,
        help='Midgame search depth of the self-play opponent (default: 4)')
    parser.add_argument(
        '--color', type=str, default='black',
        choices=['black', 'white'],
        help='Color to play as (default: black)')
    parser.add_argument(
        '--log-interval', type=int, default=10,
        help='Print stats every N episodes (default: 10)')
    parser.add_argument(
        '--store-path', type=str, default=None,
        help='Brain directory (default: $REVERSI_STORE_PATH or reversi_brain)')
    parser.add_argument(
        '--config', type=str, default=None,
        help='JSON config file (see ReversiConfig.save)')
    parser.add_argument(
        '--memory-limit', type=int, default=None,
        help='Set the learning memory capacity before training')
    parser.add_argument(
        '--export', type=str, default=None, metavar='PATH',
        help='Write the brain as JSON to PATH and exit')
    parser.add_argument(
        '--import', dest='import_path', type=str, default=None, metavar='PATH',
        help='Replace the brain with the JSON in PATH and exit')
    parser.add_argument(
        '--reset', action='store_true',
        help='Forget everything learned and exit')
    parser.add_argument(
        '--verbose', '-v', action='store_true',
        help='Verbose logging')
    return parser


def main(argv=None) -> int:
    args = create_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    config = ReversiConfig.load(args.config) if args.config else ReversiConfig.from_env()
    if args.store_path:
        config.store_path = args.store_path
    store = KnowledgeStore(config.store_path, config.learning)

    if args.reset:
        store.reset()
        print(f"Brain at {store.filepath} reset")
        return 0

    if args.export:
        with open(args.export, 'w') as f:
            f.write(store.export())
        print(f"Brain exported to {args.export}")
        return 0

    if args.import_path:
        with open(args.import_path, 'r') as f:
            ok = store.import_snapshot(f.read())
        print("Import succeeded" if ok else "Import failed, brain unchanged")
        return 0 if ok else 1

    if args.memory_limit is not None:
        store.set_memory_limit(args.memory_limit)

    print("=" * 70)
    print("REVERSI LEARNING AGENT - Training")
    print("Memory | Positional Weights | Alpha-Beta Search")
    print("=" * 70)
    print()

    agent = ReversiAgent(store, config)
    color = Color.BLACK if args.color == 'black' else Color.WHITE
    agent.train(
        total_episodes=args.episodes,
        opponent_name=args.opponent,
        color=color,
        log_interval=args.log_interval,
        opponent_depth=args.opponent_depth,
    )
    return 0


if __name__ == '__main__':
    sys.exit(main())

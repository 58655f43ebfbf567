"""
Command-line interface implementation.
"""

import argparse
import logging
import sys
from contextlib import contextmanager
from datetime import date, datetime
from typing import Dict, Iterator, Optional, TextIO

import yaml

from ..analyzer import format_price
from ..application import CryptoTracker
from ..config import ConfigurationManager, TrackerConfig
from ..exceptions import ArchiveLoadError
from ..storage import ArchiveSegment, ColdArchive


def setup_logging(level: str = "INFO") -> None:
    """Set up logging configuration."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def parse_date(date_str: str) -> date:
    """Parse date string in YYYY-MM-DD format."""
    try:
        return datetime.strptime(date_str, "%Y-%m-%d").date()
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid date format: {date_str}. Use YYYY-MM-DD format.")


def summarize_segment(segment: ArchiveSegment) -> Dict:
    """
    Compute summary statistics of an archived day.

    Returns:
        Dictionary with point count, time range and price statistics
    """
    df = segment.to_dataframe()
    if df.empty:
        return {'date': segment.date, 'points': 0}

    prices = df['price']
    return {
        'date': segment.date,
        'points': len(df),
        'first': df.index.min(),
        'last': df.index.max(),
        'open': float(prices.iloc[0]),
        'close': float(prices.iloc[-1]),
        'min': float(prices.min()),
        'max': float(prices.max()),
        'mean': float(prices.mean()),
        'volume_24h': float(df['volume_24h'].iloc[-1]),
    }


def format_history(summary: Dict, base_asset: str = "BTC") -> str:
    """Format an archived day summary for display."""
    lines = [f"📦 Archive for {summary['date'].isoformat()}", "=" * 40]

    if summary['points'] == 0:
        lines.append("No price points in this segment")
        return "\n".join(lines)

    lines.extend([
        f"Points: {summary['points']}",
        f"From: {summary['first'].strftime('%Y-%m-%d %H:%M:%S')} UTC",
        f"To: {summary['last'].strftime('%Y-%m-%d %H:%M:%S')} UTC",
        f"Open: ${format_price(summary['open'])}",
        f"Close: ${format_price(summary['close'])}",
        f"Low: ${format_price(summary['min'])}",
        f"High: ${format_price(summary['max'])}",
        f"Mean: ${format_price(summary['mean'])}",
        f"24h Volume (last): {format_price(summary['volume_24h'])} {base_asset}",
    ])
    return "\n".join(lines)


def format_config(config: TrackerConfig) -> str:
    """Render configuration as YAML with secrets masked."""
    data = config.model_dump(mode='json')
    if data['telegram'].get('bot_token'):
        data['telegram']['bot_token'] = "***"
    return yaml.safe_dump(data, sort_keys=False).rstrip()


@contextmanager
def open_feed(feed: str) -> Iterator[TextIO]:
    """Open a ticker feed, '-' meaning stdin."""
    if feed == "-":
        yield sys.stdin
        return
    with open(feed, 'r', encoding='utf-8') as f:
        yield f


def run_tracker(config: TrackerConfig, feed: str, tracker: Optional[CryptoTracker] = None) -> int:
    """
    Run the tracker, ingesting ticker messages from a feed until it ends.

    Returns:
        Number of price points stored
    """
    logger = logging.getLogger(__name__)
    tracker = tracker or CryptoTracker(config)

    with tracker, open_feed(feed) as stream:
        logger.info(f"Reading {config.symbol} ticker messages from {'stdin' if feed == '-' else feed}")
        try:
            stored = tracker.ingestor.consume(stream)
        except KeyboardInterrupt:
            logger.info("Interrupted, shutting down")
            stored = tracker.ingestor.stored

    logger.info(f"Feed finished: {stored} points stored, {tracker.ingestor.dropped} messages dropped")
    return stored


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        description="Crypto Tracker - Moving average alerts and daily archives for a price feed"
    )

    parser.add_argument(
        "--config",
        type=str,
        help="Path to configuration YAML file"
    )

    parser.add_argument(
        "--run",
        action="store_true",
        help="Run the tracker on a stream of raw ticker messages"
    )

    parser.add_argument(
        "--feed",
        type=str,
        default="-",
        help="File with one raw ticker JSON message per line ('-' for stdin, default)"
    )

    parser.add_argument(
        "--history",
        type=parse_date,
        help="Show the archived snapshot for a date (YYYY-MM-DD format)"
    )

    parser.add_argument(
        "--list-archives",
        action="store_true",
        help="List dates with an archived snapshot"
    )

    parser.add_argument(
        "--validate-config",
        action="store_true",
        help="Validate configuration file and exit"
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Set logging level"
    )

    return parser


def main() -> None:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args()

    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    try:
        config = ConfigurationManager().load_config(args.config)

        if args.validate_config:
            print("✅ Configuration is valid")
            print(format_config(config))

        elif args.list_archives:
            archive = ColdArchive(str(config.get_archive_dir()))
            dates = archive.list_dates()
            if not dates:
                print(f"No archived snapshots in {archive.archive_dir}")
            for day in dates:
                print(day.isoformat())

        elif args.history:
            archive = ColdArchive(str(config.get_archive_dir()))
            try:
                segment = archive.load_segment(args.history)
            except ArchiveLoadError as e:
                logger.error(str(e))
                sys.exit(1)
            print(format_history(summarize_segment(segment), config.base_asset))

        elif args.run:
            run_tracker(config, args.feed)

        else:
            # Default: show help
            parser.print_help()

    except Exception as e:
        logger.error(f"Application error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()

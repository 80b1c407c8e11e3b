#!/usr/bin/env python3
"""
Strategy Runner

Runs the strategist from the command line:
1. Site Analysis (Claude + web search)
2. Dashboard summary (competitors, visibility ranking, opportunities)
3. Optional content drafts for selected opportunities (Markdown files)

Usage:
    # Set environment variables first:
    export ANTHROPIC_API_KEY=your_key

    # Run analysis:
    python scripts/run_strategy.py example.com

    # Draft articles for the first two opportunities:
    python scripts/run_strategy.py example.com --generate 2 --output drafts/
"""

import asyncio
import argparse
import logging
import os
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def print_dashboard(dashboard: dict) -> None:
    """Print the dashboard view model as plain text."""
    summary = dashboard["summary"]

    print(f"\n{'='*70}")
    print(f"GEO STRATEGY - {dashboard['url']}")
    print(f"{'='*70}")
    print(f"Categories:     {summary['categories_found']} ({', '.join(summary['category_preview'])})")
    print(f"Blog themes:    {summary['blog_theme_count']} ({', '.join(summary['blog_theme_preview'])})")
    print(f"Opportunities:  {summary['missing_opportunities']}")

    print("\nVisibility ranking:")
    for entry in dashboard["visibility_ranking"]:
        marker = "*" if entry["is_own_site"] else " "
        print(f"  {marker} {entry['name']:<18} {entry['score']:>3}")

    print("\nCompetitors:")
    for card in dashboard["competitors"]:
        themes = ", ".join(card["blog_themes"]) or card["blog_themes_label"]
        print(f"  - {card['name']} ({card['link']})")
        print(f"      Writes about: {themes}")
        if card["headline_strength"]:
            print(f"      Strength:     {card['headline_strength']}")

    print("\nContent gaps:")
    for index, row in enumerate(dashboard["opportunities"], start=1):
        print(
            f"  {index:>2}. [{row['type_label']}] [{row['difficulty']}] "
            f"{row['title']} (keyword: {row['target_keyword']})"
        )
    print(f"{'='*70}\n")


async def run_strategy(url: str, generate: int = 0, output_dir: str = "."):
    """Analyze a site and optionally draft articles for the top opportunities."""

    load_dotenv()

    # Checked up front so a terminal run fails before any work starts;
    # the API service only finds out on the first Claude call.
    if not os.getenv("ANTHROPIC_API_KEY"):
        print("ERROR: Missing required environment variable ANTHROPIC_API_KEY")
        print("\nSet it with:")
        print("  export ANTHROPIC_API_KEY=your_key")
        return None

    # Import here so settings pick up the .env values
    from src.reporter import build_dashboard, draft_filename, render_markdown
    from src.services import StrategySession

    session = StrategySession()

    print(session.loading_message() or f"Analyzing {url}...")
    await session.analyze(url)

    if session.analysis is None:
        print(f"ERROR: {session.error_message}")
        return None

    print_dashboard(build_dashboard(session.analysis))

    written = []
    output = Path(output_dir)
    if generate > 0:
        output.mkdir(parents=True, exist_ok=True)

    for opportunity in session.analysis.opportunities[:generate]:
        session.begin_generation(opportunity.id)
        print(session.loading_message())
        await session.run_generation(opportunity)

        draft = session.draft
        if draft is None:
            print(f"  {session.error_message}")
            continue

        path = output / draft_filename(draft)
        path.write_text(render_markdown(draft), encoding="utf-8")
        written.append(path)
        print(f"  Draft saved to: {path}")
        session.close_draft()

    cost = session.analysis_agent.client.get_total_cost()
    logger.info(f"Total estimated cost: ${cost:.4f}")

    return {
        "analysis": session.analysis,
        "drafts": written,
        "cost": cost,
    }


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Analyze a website's content gaps and draft GEO-optimized articles"
    )
    parser.add_argument(
        "url",
        help="Website to analyze (e.g., example.com)"
    )
    parser.add_argument(
        "--generate",
        type=int,
        default=0,
        help="Draft articles for the first N opportunities (default: 0)"
    )
    parser.add_argument(
        "--output",
        default=".",
        help="Directory for Markdown drafts (default: current directory)"
    )

    args = parser.parse_args()

    result = asyncio.run(run_strategy(
        url=args.url,
        generate=args.generate,
        output_dir=args.output,
    ))

    if result is None:
        sys.exit(1)


if __name__ == "__main__":
    main()

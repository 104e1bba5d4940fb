#!/usr/bin/env python3
"""
Mapping Generation Script for Natural Remedy Bridge

This script seeds pharmaceuticals and natural remedies from CSV files (when
given) and generates drug-remedy mappings for every stored drug, or for a
single drug with --drug-id. Existing mappings are never overwritten.
"""

import argparse
import sys
import logging
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from config.settings import settings
from natural_remedy_bridge.data.database import SessionLocal, engine, init_db
from natural_remedy_bridge.data.seed_loader import seed_pharmaceuticals, seed_remedies
from natural_remedy_bridge.services.remedy_matching_service import RemedyMatchingService

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate drug to natural-remedy mappings.")
    parser.add_argument("--drugs-csv", default=settings.seed_drugs_csv, help="CSV of pharmaceuticals to import first")
    parser.add_argument("--remedies-csv", default=settings.seed_remedies_csv, help="CSV of natural remedies to import first")
    parser.add_argument("--drug-id", default=None, help="Only generate mappings for this drug")
    parser.add_argument("--limit", type=int, default=settings.match_limit, help="Maximum mappings per drug")
    parser.add_argument("--min-score", type=float, default=settings.match_min_score, help="Minimum similarity score")
    return parser.parse_args(argv)


def main(argv=None):
    """Main function to seed data and generate mappings."""
    args = parse_args(argv)
    logger.info("Starting mapping generation process...")

    try:
        init_db(engine)

        if args.drugs_csv or args.remedies_csv:
            session = SessionLocal()
            try:
                if args.drugs_csv:
                    result = seed_pharmaceuticals(session, args.drugs_csv)
                    logger.info(f"Pharmaceuticals: {result.created} created, {result.skipped} skipped")
                if args.remedies_csv:
                    result = seed_remedies(session, args.remedies_csv)
                    logger.info(f"Natural remedies: {result.created} created, {result.skipped} skipped")
            finally:
                session.close()

        service = RemedyMatchingService(SessionLocal)

        if args.drug_id:
            result = service.generate_mappings(args.drug_id, limit=args.limit, min_score=args.min_score)
            if result is None:
                logger.error(f"Drug not found: {args.drug_id}")
                return 1
            logger.info(f"Created {result.created} mappings ({result.skipped} duplicates skipped)")
            return 0

        summary = service.generate_all_mappings(limit=args.limit, min_score=args.min_score)
        logger.info("Mapping generation completed successfully!")
        logger.info("Statistics:")
        logger.info(f"   - Drugs processed: {summary.drugs_processed}")
        logger.info(f"   - Mappings created: {summary.mappings_created}")
        logger.info(f"   - Duplicates skipped: {summary.duplicates_skipped}")
        if summary.drugs_without_matches:
            logger.warning(f"Drugs without matches: {len(summary.drugs_without_matches)}")
            for name in summary.drugs_without_matches:
                logger.warning(f"   - {name}")
        return 0

    except Exception as e:
        logger.error(f"Mapping generation failed with exception: {str(e)}")
        return 1


if __name__ == "__main__":
    exit_code = main()
    sys.exit(exit_code)
